"""
File collection for a resolved skill

Candidates come from a tree listing (preferred) or a live directory walk.
Contents are fetched concurrently; a file whose fetch fails is dropped and
the rest of the bundle still goes out.
"""

import asyncio
import logging
from typing import Iterable, List, Optional, Sequence, Set

from .config import MAX_MERGED_FILES, MAX_SKILL_FILES, ROOT_EXCLUDED_DIRS, SKILLS_ROOT
from .models import CandidateFile, CollectionResult, RepositoryIdentity, SkillFile, TreeEntry

logger = logging.getLogger(__name__)


def _is_root_excluded(path: str) -> bool:
    return any(path.startswith(d) for d in ROOT_EXCLUDED_DIRS)


def select_candidates(
    entries: Sequence[TreeEntry],
    base_path: str,
    manifest: str,
    limit: int = MAX_SKILL_FILES,
) -> List[CandidateFile]:
    """
    Files belonging to the skill at base_path ('' for the repository root),
    minus binaries and the manifest itself, capped at limit.
    """
    base_path = base_path.strip('/')
    prefix = f"{base_path}/" if base_path else ''
    seen: Set[str] = {manifest}
    candidates = []

    for entry in entries:
        if not entry.is_file:
            continue
        if base_path:
            if not entry.path.startswith(prefix):
                continue
            filename = entry.path[len(prefix):]
        else:
            if _is_root_excluded(entry.path):
                continue
            filename = entry.path

        candidate = CandidateFile.from_path(entry.path, filename)
        if candidate.is_binary or filename in seen:
            continue
        seen.add(filename)
        candidates.append(candidate)

        if len(candidates) >= limit:
            break

    return candidates


def select_merged_candidates(
    entries: Sequence[TreeEntry],
    root: str = SKILLS_ROOT,
    limit: int = MAX_MERGED_FILES,
) -> List[CandidateFile]:
    """Every non-binary file under root/, named without the root/ prefix"""
    prefix = f"{root}/"
    candidates = []
    for entry in entries:
        if not entry.is_file or not entry.path.startswith(prefix):
            continue
        candidate = CandidateFile.from_path(entry.path, entry.path[len(prefix):])
        if candidate.is_binary:
            continue
        candidates.append(candidate)
        if len(candidates) >= limit:
            break
    return candidates


def dedupe(files: Iterable[SkillFile], taken: Iterable[str] = ()) -> List[SkillFile]:
    """First file per filename wins; names in taken are already used"""
    seen = set(taken)
    unique = []
    for f in files:
        if f.filename in seen:
            continue
        seen.add(f.filename)
        unique.append(f)
    return unique


async def fetch_file(client, identity: RepositoryIdentity, branch: str,
                     candidate: CandidateFile) -> Optional[SkillFile]:
    content, status = await client.get_raw(identity, branch, candidate.path)
    if content is None:
        logger.debug(f"Dropped {candidate.path} ({status})")
        return None
    return SkillFile(filename=candidate.filename, content=content)


async def fetch_files(client, identity: RepositoryIdentity, branch: str,
                      candidates: Sequence[CandidateFile]) -> List[SkillFile]:
    """Fetch all candidates at once; failures are left out"""
    results = await asyncio.gather(
        *(fetch_file(client, identity, branch, c) for c in candidates)
    )
    return [f for f in results if f is not None]


class CollectionStrategy:
    name = 'base'

    async def collect(self, client, identity, branch, base_path,
                      manifest: SkillFile) -> Optional[CollectionResult]:
        raise NotImplementedError


class TreeCollection(CollectionStrategy):
    """Candidates from a single recursive tree listing"""

    name = 'tree'

    def __init__(self, entries: Optional[Sequence[TreeEntry]] = None,
                 limit: int = MAX_SKILL_FILES):
        self.entries = entries
        self.limit = limit

    async def collect(self, client, identity, branch, base_path, manifest):
        entries = self.entries
        if entries is None:
            entries, status = await client.get_tree(identity, branch)
            if entries is None:
                logger.warning(f"Tree listing for {identity.full_name}@{branch} failed ({status})")
                return None

        candidates = select_candidates(entries, base_path, manifest.filename, self.limit)
        fetched = await fetch_files(client, identity, branch, candidates)
        return CollectionResult(
            supporting=dedupe(fetched, taken=[manifest.filename]),
            attempted=len(candidates),
            manifest=manifest,
        )


class FileCollector:
    """Try each collection strategy in order until one produces a result"""

    def __init__(self, strategies: List[CollectionStrategy]):
        self.strategies = strategies

    async def collect(self, client, identity: RepositoryIdentity, branch: str,
                      base_path: str, manifest: SkillFile) -> CollectionResult:
        for strategy in self.strategies:
            result = await strategy.collect(client, identity, branch, base_path, manifest)
            if result is not None:
                logger.info(
                    f"Collected {result.collected}/{result.attempted} files for "
                    f"{identity.full_name}:{base_path or '/'} via {strategy.name}"
                )
                return result

        return CollectionResult(manifest=manifest)


async def collect_merged(client, identity: RepositoryIdentity, branch: str,
                         entries: Sequence[TreeEntry]) -> CollectionResult:
    candidates = select_merged_candidates(entries)
    fetched = await fetch_files(client, identity, branch, candidates)
    return CollectionResult(supporting=dedupe(fetched), attempted=len(candidates))
