"""
Default branch resolution

Strategies are tried in order. Each returns a branch name, or None to hand
over to the next one; terminal failures (missing repo, rate limit) raise.
"""

import logging
from typing import List, Optional, Sequence

from .config import DEFAULT_BRANCH, PROBE_BRANCHES
from .errors import RateLimited, RepositoryNotFound
from .models import RepositoryIdentity

logger = logging.getLogger(__name__)

REPO_NOT_FOUND_MESSAGE = (
    "Repository not found. Please check the repository name and make sure it's public."
)
RATE_LIMITED_MESSAGE = (
    "GitHub API rate limit exceeded. Please try again later or add a GITHUB_TOKEN."
)
INACCESSIBLE_MESSAGE = (
    "Repository not found or inaccessible. Please ensure the repository is public."
)


class BranchStrategy:
    name = 'base'

    async def resolve(self, client, identity: RepositoryIdentity) -> Optional[str]:
        raise NotImplementedError


class MetadataBranch(BranchStrategy):
    """Use the default_branch declared in repository metadata"""

    name = 'metadata'

    async def resolve(self, client, identity):
        data, status = await client.get_repo_info(identity)

        if status == 404:
            raise RepositoryNotFound(REPO_NOT_FOUND_MESSAGE)
        if status in (403, 429):
            raise RateLimited(RATE_LIMITED_MESSAGE)
        if data is None:
            logger.warning(f"Metadata lookup for {identity.full_name} failed ({status}), probing branches")
            return None

        return data.get('default_branch') or DEFAULT_BRANCH


class ProbeBranches(BranchStrategy):
    """First branch whose root listing answers successfully"""

    name = 'probe'

    def __init__(self, branches: Sequence[str] = PROBE_BRANCHES):
        self.branches = list(branches)

    async def resolve(self, client, identity):
        for branch in self.branches:
            data, status = await client.list_contents(identity, '', branch)
            if data is not None:
                return branch
            logger.debug(f"Branch probe {identity.full_name}@{branch} -> {status}")
        return None


def default_strategies() -> List[BranchStrategy]:
    return [MetadataBranch(), ProbeBranches()]


class BranchResolver:

    def __init__(self, strategies: Optional[List[BranchStrategy]] = None):
        self.strategies = strategies if strategies is not None else default_strategies()

    async def resolve(self, client, identity: RepositoryIdentity) -> str:
        for strategy in self.strategies:
            branch = await strategy.resolve(client, identity)
            if branch:
                logger.info(f"Resolved {identity.full_name} branch '{branch}' via {strategy.name}")
                return branch

        raise RepositoryNotFound(INACCESSIBLE_MESSAGE)
