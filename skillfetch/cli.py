"""
Command line entry point
"""

import argparse
import asyncio
import json
import logging
import sys

from aiohttp import web

from .config import DEFAULT_HOST, DEFAULT_PORT
from .errors import ResolverError
from .github import GitHubClient
from .resolver import SkillResolver
from .service import create_app

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='skillfetch',
        description='Resolve skills from GitHub repositories into a single bundle',
    )
    parser.add_argument('-v', '--verbose', action='store_true', help='Debug logging')
    sub = parser.add_subparsers(dest='command', required=True)

    serve = sub.add_parser('serve', help='Run the HTTP service')
    serve.add_argument('--host', default=DEFAULT_HOST, help='Bind address')
    serve.add_argument('--port', type=int, default=DEFAULT_PORT, help='Bind port')

    resolve = sub.add_parser('resolve', help='Resolve one repository and print the JSON result')
    resolve.add_argument('github_url', help='github.com/owner/repo URL or owner/repo')
    resolve.add_argument('--skill-path', help='Skill directory, or __ALL__ to merge skills/')
    resolve.add_argument('--validate-only', action='store_true', help='Only check the root SKILL.md')
    resolve.add_argument('--token', help='GitHub API token (defaults to $GITHUB_TOKEN)')
    resolve.add_argument('--output', help='Write JSON here instead of stdout')

    return parser


async def run_resolve(args) -> int:
    resolver = SkillResolver(client_factory=lambda: GitHubClient(token=args.token))
    try:
        result = await resolver.resolve(
            args.github_url,
            skill_path=args.skill_path,
            validate_only=args.validate_only,
        )
        code = 0
    except ResolverError as e:
        logger.error(f"{e.message} ({e.status})")
        result = e.to_payload()
        code = 1

    text = json.dumps(result, indent=2, ensure_ascii=False)
    if args.output:
        with open(args.output, 'w', encoding='utf-8') as f:
            f.write(text)
        logger.info(f"Saved result to {args.output}")
    else:
        print(text)
    return code


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s - %(levelname)s - %(name)s - %(message)s',
    )

    if args.command == 'serve':
        web.run_app(create_app(), host=args.host, port=args.port)
        return 0

    return asyncio.run(run_resolve(args))


if __name__ == '__main__':
    sys.exit(main())
