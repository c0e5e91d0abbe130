"""
HTTP service exposing the resolver
"""

import json
import logging
from typing import Callable

import jsonschema
from aiohttp import web

from .config import FETCH_ROUTE, REQUEST_SCHEMA
from .errors import MalformedReference, ResolverError
from .resolver import SkillResolver

logger = logging.getLogger(__name__)

RESOLVER_KEY = web.AppKey('resolver', SkillResolver)

URL_REQUIRED_MESSAGE = "GitHub URL is required"
GENERIC_FAILURE_MESSAGE = "Failed to fetch skill from GitHub"


def parse_payload(body: str) -> dict:
    """Decode and schema-check a request body"""
    try:
        payload = json.loads(body or '{}')
    except json.JSONDecodeError:
        raise MalformedReference("Request body must be JSON")

    if not isinstance(payload, dict) or not payload.get('githubUrl'):
        raise MalformedReference(URL_REQUIRED_MESSAGE)

    try:
        jsonschema.validate(instance=payload, schema=REQUEST_SCHEMA)
    except jsonschema.ValidationError as e:
        raise MalformedReference(f"Invalid request: {e.message}")

    return payload


async def read_body(request: web.Request) -> str:
    try:
        return await request.text()
    except UnicodeDecodeError:
        raise MalformedReference("Request body must be UTF-8 encoded JSON")


async def fetch_github(request: web.Request) -> web.Response:
    resolver = request.app[RESOLVER_KEY]
    try:
        payload = parse_payload(await read_body(request))
        result = await resolver.resolve(
            payload['githubUrl'],
            skill_path=payload.get('skillPath'),
            validate_only=bool(payload.get('validateOnly')),
        )
    except ResolverError as e:
        logger.info(f"Resolution failed ({e.status}): {e.message}")
        return web.json_response(e.to_payload(), status=e.status)
    except Exception:
        logger.exception("Error fetching from GitHub")
        return web.json_response({'error': GENERIC_FAILURE_MESSAGE}, status=500)

    return web.json_response(result)


async def health(request: web.Request) -> web.Response:
    return web.json_response({'status': 'ok'})


def create_app(resolver_factory: Callable[[], SkillResolver] = SkillResolver) -> web.Application:
    """Build the aiohttp application serving the fetch endpoint"""
    app = web.Application()
    app[RESOLVER_KEY] = resolver_factory()
    app.router.add_get('/health', health)
    app.router.add_post(FETCH_ROUTE, fetch_github)
    return app
