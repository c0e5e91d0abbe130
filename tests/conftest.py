from __future__ import annotations

import pytest

from skillfetch.models import RepositoryIdentity
from skillfetch.resolver import SkillResolver
from tests._fixtures.fake_github import FakeGitHub


@pytest.fixture
def identity() -> RepositoryIdentity:
    return RepositoryIdentity(owner="octocat", repo="Hello-World")


@pytest.fixture
def make_resolver():
    """Build a resolver whose every call goes to the given fake."""

    def _make(fake: FakeGitHub) -> SkillResolver:
        return SkillResolver(client_factory=lambda: fake)

    return _make
