"""Tests for the GitHub client against a local stand-in server."""

from __future__ import annotations

import asyncio

import pytest
from aiohttp import web

from skillfetch.github import NETWORK_ERROR, GitHubClient
from skillfetch.models import RepositoryIdentity, TreeEntry

IDENTITY = RepositoryIdentity("octocat", "Hello-World")


def build_app(seen_headers: list) -> web.Application:
    async def repo(request: web.Request) -> web.Response:
        seen_headers.append(dict(request.headers))
        if request.match_info["repo"] != "Hello-World":
            return web.json_response({"message": "Not Found"}, status=404)
        return web.json_response({"default_branch": "main"})

    async def tree(request: web.Request) -> web.Response:
        assert request.query["recursive"] == "1"
        if request.match_info["branch"] != "main":
            return web.json_response({"message": "Not Found"}, status=404)
        return web.json_response({
            "truncated": False,
            "tree": [
                {"path": "SKILL.md", "type": "blob"},
                {"path": "docs", "type": "tree"},
                {"path": "docs/a.md", "type": "blob"},
            ],
        })

    async def contents(request: web.Request) -> web.Response:
        if request.query.get("ref") != "main":
            return web.json_response({"message": "No commit found"}, status=404)
        path = request.match_info.get("path", "")
        if path == "SKILL.md":
            return web.json_response({"name": "SKILL.md", "type": "file"})
        return web.json_response([{"name": "a.md", "path": f"{path}/a.md", "type": "file"}])

    async def raw(request: web.Request) -> web.Response:
        seen_headers.append(dict(request.headers))
        if request.match_info["path"] == "slow.md":
            await asyncio.sleep(1)
        if request.match_info["path"] in ("SKILL.md", "slow.md"):
            return web.Response(text="---\nname: demo\n---\n")
        return web.Response(text="404: Not Found", status=404)

    app = web.Application()
    app.router.add_get("/api/repos/{owner}/{repo}", repo)
    app.router.add_get("/api/repos/{owner}/{repo}/git/trees/{branch}", tree)
    app.router.add_get("/api/repos/{owner}/{repo}/contents", contents)
    app.router.add_get("/api/repos/{owner}/{repo}/contents/{path:.*}", contents)
    app.router.add_get("/raw/{owner}/{repo}/{branch}/{path:.*}", raw)
    return app


@pytest.fixture
async def github(aiohttp_server):
    seen_headers: list = []
    server = await aiohttp_server(build_app(seen_headers))

    def _client(**kwargs) -> GitHubClient:
        return GitHubClient(
            api_base=str(server.make_url("/api")),
            raw_base=str(server.make_url("/raw")),
            **kwargs,
        )

    _client.seen_headers = seen_headers  # type: ignore[attr-defined]
    return _client


async def test_repo_info_and_token_header(github) -> None:
    async with github(token="secret") as client:
        data, status = await client.get_repo_info(IDENTITY)
        missing, missing_status = await client.get_repo_info(RepositoryIdentity("octocat", "nope"))

    assert status == 200
    assert data["default_branch"] == "main"
    assert missing is None
    assert missing_status == 404
    headers = github.seen_headers[0]
    assert headers["Authorization"] == "token secret"
    assert headers["Accept"] == "application/vnd.github.v3+json"
    assert "User-Agent" in headers


async def test_no_token_no_auth_header(github) -> None:
    async with github(token="") as client:
        await client.get_raw(IDENTITY, "main", "SKILL.md")
    assert "Authorization" not in github.seen_headers[0]


async def test_tree(github) -> None:
    async with github(token="") as client:
        entries, status = await client.get_tree(IDENTITY, "main")
        failed, failed_status = await client.get_tree(IDENTITY, "gone")

    assert status == 200
    assert entries == [
        TreeEntry("SKILL.md", "blob"),
        TreeEntry("docs", "tree"),
        TreeEntry("docs/a.md", "blob"),
    ]
    assert failed is None
    assert failed_status == 404


async def test_list_contents(github) -> None:
    async with github(token="") as client:
        root, status = await client.list_contents(IDENTITY, "", "main")
        docs, _ = await client.list_contents(IDENTITY, "docs", "main")
        wrong_branch, wrong_status = await client.list_contents(IDENTITY, "", "master")
        file_path, _ = await client.list_contents(IDENTITY, "SKILL.md", "main")

    assert status == 200
    assert root[0]["name"] == "a.md"
    assert docs[0]["path"] == "docs/a.md"
    assert wrong_branch is None
    assert wrong_status == 404
    assert file_path is None


async def test_raw_content(github) -> None:
    async with github(token="") as client:
        content, status = await client.get_raw(IDENTITY, "main", "SKILL.md")
        missing, missing_status = await client.get_raw(IDENTITY, "main", "nope.md")

    assert status == 200
    assert content.startswith("---\nname: demo")
    assert missing is None
    assert missing_status == 404


async def test_timeout_reports_network_error(github) -> None:
    async with github(token="", timeout=0.2) as client:
        content, status = await client.get_raw(IDENTITY, "main", "slow.md")
    assert content is None
    assert status == NETWORK_ERROR


async def test_connection_error_reports_network_error() -> None:
    async with GitHubClient(token="", api_base="http://127.0.0.1:9", timeout=2) as client:
        data, status = await client.get_repo_info(IDENTITY)
    assert data is None
    assert status == NETWORK_ERROR


async def test_use_outside_context_manager() -> None:
    client = GitHubClient(token="")
    with pytest.raises(RuntimeError):
        await client.get_repo_info(IDENTITY)
