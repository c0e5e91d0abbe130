"""
Skill resolver
Turns a repository reference into a validation result, a multi-skill
listing, or a serialized bundle of skill files.
"""

import logging
from typing import Callable, Optional, Sequence

from .branches import BranchResolver
from .bundle import serialize_bundle
from .collector import FileCollector, TreeCollection, collect_merged
from .config import ALL_SKILLS, MANIFEST_FILENAMES, PROBE_BRANCHES, SKILLS_ROOT, VALIDATION_MANIFEST
from .discovery import ROOT_SKILL, classify, find_collections
from .errors import ManifestNotFound, MissingRequiredFields, RepositoryNotFound, UnexpectedFailure
from .frontmatter import missing_fields, parse_frontmatter
from .github import GitHubClient
from .models import CollectionResult, RepositoryIdentity, SkillFile, TreeEntry
from .reference import parse_reference
from .walker import DirectoryWalk

logger = logging.getLogger(__name__)

VALIDATED_MESSAGE = "✓ Repository follows add-skill standard!"


def default_collector(entries: Optional[Sequence[TreeEntry]] = None) -> FileCollector:
    return FileCollector([TreeCollection(entries), DirectoryWalk()])


class SkillResolver:
    """
    Stateless per call: every resolve() opens its own client and shares
    nothing with other calls.
    """

    def __init__(
        self,
        client_factory: Callable[[], GitHubClient] = GitHubClient,
        branch_resolver: Optional[BranchResolver] = None,
        collector_factory: Callable[..., FileCollector] = default_collector,
    ):
        self.client_factory = client_factory
        self.branch_resolver = branch_resolver or BranchResolver()
        self.collector_factory = collector_factory

    async def resolve(self, github_url: str, skill_path: Optional[str] = None,
                      validate_only: bool = False) -> dict:
        identity = parse_reference(github_url)
        skill_path = (skill_path or '').strip('/')

        async with self.client_factory() as client:
            if validate_only:
                return await self.validate(client, identity)

            branch = await self.branch_resolver.resolve(client, identity)

            if skill_path == ALL_SKILLS:
                return await self.merge_all(client, identity, branch)
            if skill_path:
                return await self.resolve_skill(client, identity, branch, skill_path)
            return await self.discover(client, identity, branch)

    async def validate(self, client, identity: RepositoryIdentity) -> dict:
        """Root SKILL.md probe on main/master plus required frontmatter keys"""
        for branch in PROBE_BRANCHES:
            content, _ = await client.get_raw(identity, branch, VALIDATION_MANIFEST)
            if content is not None:
                break
        else:
            raise ManifestNotFound(
                f"{VALIDATION_MANIFEST} not found in the root of the repository. "
                "This is required for the add-skill standard."
            )

        meta = parse_frontmatter(content)
        missing = missing_fields(meta)
        if missing:
            raise MissingRequiredFields(missing, meta, manifest=VALIDATION_MANIFEST)

        logger.info(f"Validated {identity.full_name}@{branch}")
        return {
            'success': True,
            'validated': True,
            'githubUrl': identity.html_url,
            'owner': identity.owner,
            'repo': identity.repo,
            'branch': branch,
            'message': VALIDATED_MESSAGE,
            'meta': meta,
        }

    async def fetch_manifest(self, client, identity: RepositoryIdentity, branch: str,
                             base_path: str = '') -> Optional[SkillFile]:
        """First manifest filename that answers, by raw content"""
        for filename in MANIFEST_FILENAMES:
            path = f"{base_path}/{filename}" if base_path else filename
            content, _ = await client.get_raw(identity, branch, path)
            if content is not None:
                return SkillFile(filename=filename, content=content)
        return None

    async def discover(self, client, identity: RepositoryIdentity, branch: str) -> dict:
        """
        Root skill bundle or multi-skill listing. When the tree is missing,
        or names nothing usable, root manifests are probed by raw content.
        """
        entries, status = await client.get_tree(identity, branch)

        if entries is not None:
            found = classify(entries)
            skills = found.skills

            if found.kind == ROOT_SKILL:
                content, status = await client.get_raw(identity, branch, found.manifest)
                if content is not None:
                    manifest = SkillFile(filename=found.manifest, content=content)
                    result = await self.collector_factory(entries).collect(
                        client, identity, branch, '', manifest)
                    return self.bundle_payload(identity, result)
                logger.warning(f"Root {found.manifest} listed but not fetched ({status})")
                skills = find_collections(entries)

            if skills:
                logger.info(f"{identity.full_name} hosts {len(skills)} skills")
                return {
                    'multipleSkills': True,
                    'skills': [s.to_dict() for s in skills],
                    'githubUrl': identity.html_url,
                }
        else:
            logger.warning(f"Tree listing for {identity.full_name}@{branch} failed ({status})")

        manifest = await self.fetch_manifest(client, identity, branch)
        if manifest is not None:
            result = await self.collector_factory(entries).collect(
                client, identity, branch, '', manifest)
            return self.bundle_payload(identity, result)

        raise ManifestNotFound("No SKILL.md found in repository")

    async def resolve_skill(self, client, identity: RepositoryIdentity, branch: str,
                            skill_path: str) -> dict:
        manifest = await self.fetch_manifest(client, identity, branch, skill_path)
        if manifest is None:
            raise ManifestNotFound(f"SKILL.md or README.md not found in {skill_path}")

        result = await self.collector_factory().collect(client, identity, branch, skill_path, manifest)
        return self.bundle_payload(identity, result)

    async def merge_all(self, client, identity: RepositoryIdentity, branch: str) -> dict:
        """One bundle holding every file under skills/"""
        entries, status = await client.get_tree(identity, branch)
        if entries is None:
            logger.warning(f"Tree listing for {identity.full_name}@{branch} failed ({status})")
            raise RepositoryNotFound("Failed to fetch repository tree")

        result = await collect_merged(client, identity, branch, entries)
        if result.attempted == 0:
            raise ManifestNotFound(f"No files found in {SKILLS_ROOT}/ directory")
        if result.collected == 0:
            raise UnexpectedFailure("Failed to fetch skill files")

        logger.info(f"Merged {result.collected}/{result.attempted} files from {identity.full_name}")
        return self.bundle_payload(identity, result)

    @staticmethod
    def bundle_payload(identity: RepositoryIdentity, result: CollectionResult) -> dict:
        return {
            'success': True,
            'content': serialize_bundle(result.files),
            'githubUrl': identity.html_url,
            'owner': identity.owner,
            'repo': identity.repo,
            'files': result.stats(),
        }
