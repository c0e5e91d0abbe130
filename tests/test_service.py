"""Tests for the aiohttp service."""

from __future__ import annotations

import pytest

from skillfetch.config import FETCH_ROUTE
from skillfetch.resolver import SkillResolver
from skillfetch.service import create_app
from tests._fixtures.fake_github import FakeGitHub, manifest_text


class _ExplodingResolver:
    async def resolve(self, *args, **kwargs):
        raise RuntimeError("boom")


@pytest.fixture
def make_client(aiohttp_client):
    async def _make(fake: FakeGitHub):
        app = create_app(lambda: SkillResolver(client_factory=lambda: fake))
        return await aiohttp_client(app)

    return _make


async def test_health(make_client) -> None:
    client = await make_client(FakeGitHub())
    resp = await client.get("/health")
    assert resp.status == 200
    assert await resp.json() == {"status": "ok"}


async def test_validate_only(make_client) -> None:
    client = await make_client(FakeGitHub({"SKILL.md": manifest_text("hello", "Greets")}))
    resp = await client.post(FETCH_ROUTE, json={"githubUrl": "octocat/Hello-World", "validateOnly": True})
    assert resp.status == 200
    body = await resp.json()
    assert body["validated"] is True
    assert body["owner"] == "octocat"
    assert body["repo"] == "Hello-World"
    assert body["message"].endswith("add-skill standard!")


async def test_validate_missing_fields(make_client) -> None:
    client = await make_client(FakeGitHub({"SKILL.md": "---\nname: hello\n---\n"}))
    resp = await client.post(FETCH_ROUTE, json={"githubUrl": "octocat/Hello-World", "validateOnly": True})
    assert resp.status == 400
    body = await resp.json()
    assert body["validated"] is False
    assert body["missingFields"] == ["description"]
    assert body["meta"] == {"name": "hello"}


async def test_multiple_skills(make_client) -> None:
    client = await make_client(FakeGitHub({"skills/alpha/SKILL.md": "a", "skills/beta/SKILL.md": "b"}))
    resp = await client.post(FETCH_ROUTE, json={"githubUrl": "https://github.com/octocat/Hello-World"})
    assert resp.status == 200
    body = await resp.json()
    assert body["multipleSkills"] is True
    assert [s["name"] for s in body["skills"]] == ["alpha", "beta"]


async def test_bundle(make_client) -> None:
    client = await make_client(FakeGitHub({"skills/a/SKILL.md": "a", "skills/a/x.md": "x"}))
    resp = await client.post(
        FETCH_ROUTE, json={"githubUrl": "octocat/Hello-World", "skillPath": "skills/a"}
    )
    assert resp.status == 200
    body = await resp.json()
    assert body["success"] is True
    assert body["content"].startswith("--- FILE: SKILL.md (1 chars) ---\n")
    assert body["files"] == {"attempted": 1, "collected": 1}


@pytest.mark.parametrize(
    "fake, status",
    [
        (FakeGitHub({}, repo_status=404), 404),
        (FakeGitHub({}, repo_status=403), 429),
        (FakeGitHub({"src/app.py": ""}), 404),
    ],
)
async def test_error_statuses(make_client, fake: FakeGitHub, status: int) -> None:
    client = await make_client(fake)
    resp = await client.post(FETCH_ROUTE, json={"githubUrl": "octocat/Hello-World"})
    assert resp.status == status
    assert "error" in await resp.json()


@pytest.mark.parametrize(
    "body",
    [
        "{}",
        '{"githubUrl": ""}',
        "not json",
        '["octocat/Hello-World"]',
        '{"githubUrl": "octocat/Hello-World", "validateOnly": "yes"}',
        '{"githubUrl": "nope"}',
    ],
)
async def test_bad_requests(make_client, body: str) -> None:
    client = await make_client(FakeGitHub())
    resp = await client.post(FETCH_ROUTE, data=body, headers={"Content-Type": "application/json"})
    assert resp.status == 400
    assert (await resp.json())["error"]


async def test_unexpected_error_is_generic(aiohttp_client) -> None:
    client = await aiohttp_client(create_app(_ExplodingResolver))
    resp = await client.post(FETCH_ROUTE, json={"githubUrl": "octocat/Hello-World"})
    assert resp.status == 500
    assert await resp.json() == {"error": "Failed to fetch skill from GitHub"}


async def test_body_not_utf8(make_client) -> None:
    client = await make_client(FakeGitHub())
    resp = await client.post(
        FETCH_ROUTE,
        data=b'\xff\xfe{"githubUrl": "octocat/Hello-World"}',
        headers={"Content-Type": "application/json"},
    )
    assert resp.status == 400
    assert "error" in await resp.json()
