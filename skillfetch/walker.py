"""
Directory walker
Fallback collection when the bulk tree listing is unavailable: list one
directory level at a time through the contents API.
"""

import asyncio
import logging
from typing import List, Optional, Set

from .collector import CollectionStrategy
from .config import MAX_SKILL_FILES, MAX_WALK_DEPTH, ROOT_EXCLUDED_DIRS
from .models import CollectionResult, RepositoryIdentity, SkillFile, is_binary_path

logger = logging.getLogger(__name__)


class DirectoryWalker:
    """
    Walk a skill directory recursively.

    Files get the same binary filter and first-seen dedup as tree
    collection. Descent stops at max_depth. Once limit files have been
    attempted no further directory is listed.
    """

    def __init__(self, client, identity: RepositoryIdentity, branch: str,
                 limit: int = MAX_SKILL_FILES, max_depth: int = MAX_WALK_DEPTH):
        self.client = client
        self.identity = identity
        self.branch = branch
        self.limit = limit
        self.max_depth = max_depth
        self.files: List[SkillFile] = []
        self.seen: Set[str] = set()
        self.attempted = 0

    async def _fetch(self, item: dict, filename: str) -> Optional[SkillFile]:
        url = item.get('download_url')
        if url:
            content, status = await self.client.get_url(url)
        else:
            content, status = await self.client.get_raw(self.identity, self.branch, item.get('path', ''))
        if content is None:
            logger.debug(f"Dropped {filename} ({status})")
            return None
        return SkillFile(filename=filename, content=content)

    @property
    def exhausted(self) -> bool:
        return self.attempted >= self.limit

    async def walk(self, path: str, relative: str = '', depth: int = 0) -> None:
        if self.exhausted:
            return

        listing, status = await self.client.list_contents(self.identity, path, self.branch)
        if listing is None:
            logger.debug(f"Could not list {self.identity.full_name}:{path or '/'} ({status})")
            return

        pending = []
        subdirs = []
        for item in listing:
            name = item.get('name', '')
            if not name:
                continue
            item_relative = f"{relative}/{name}" if relative else name

            if item.get('type') == 'file':
                if is_binary_path(name) or item_relative in self.seen:
                    continue
                if self.exhausted:
                    continue
                self.seen.add(item_relative)
                self.attempted += 1
                pending.append(self._fetch(item, item_relative))
            elif item.get('type') == 'dir':
                subdirs.append((name, item_relative))

        for fetched in await asyncio.gather(*pending):
            if fetched is not None:
                self.files.append(fetched)

        for name, item_relative in subdirs:
            if self.exhausted:
                break
            if not path and any(f"{item_relative}/".startswith(d) for d in ROOT_EXCLUDED_DIRS):
                continue
            child_path = f"{path}/{name}" if path else name
            if depth + 1 > self.max_depth:
                logger.warning(f"Walk depth limit reached at {self.identity.full_name}:{child_path}")
                continue
            await self.walk(child_path, item_relative, depth + 1)


class DirectoryWalk(CollectionStrategy):
    """Collection strategy wrapping DirectoryWalker"""

    name = 'walk'

    def __init__(self, limit: int = MAX_SKILL_FILES, max_depth: int = MAX_WALK_DEPTH):
        self.limit = limit
        self.max_depth = max_depth

    async def collect(self, client, identity, branch, base_path, manifest):
        walker = DirectoryWalker(client, identity, branch, self.limit, self.max_depth)
        walker.seen.add(manifest.filename)
        await walker.walk(base_path.strip('/'))
        return CollectionResult(supporting=walker.files, attempted=walker.attempted, manifest=manifest)
