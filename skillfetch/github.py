"""
GitHub client
Thin async wrapper over the REST API and raw content host
"""

import asyncio
import logging
from typing import Any, List, Optional, Tuple
from urllib.parse import quote

import aiohttp

from .config import (
    GITHUB_API_BASE,
    GITHUB_RAW_BASE,
    GITHUB_TOKEN,
    REQUEST_TIMEOUT,
    USER_AGENT,
)
from .models import RepositoryIdentity, TreeEntry

logger = logging.getLogger(__name__)

# Status reported for network errors and timeouts
NETWORK_ERROR = -1


class GitHubClient:
    """
    One client per resolution. Every call returns (data, status) and never
    raises for HTTP errors; status is NETWORK_ERROR when no response arrived.
    """

    def __init__(
        self,
        token: Optional[str] = None,
        api_base: str = GITHUB_API_BASE,
        raw_base: str = GITHUB_RAW_BASE,
        timeout: float = REQUEST_TIMEOUT,
        session: Optional[aiohttp.ClientSession] = None,
    ):
        self.token = token if token is not None else GITHUB_TOKEN
        self.api_base = api_base.rstrip('/')
        self.raw_base = raw_base.rstrip('/')
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self._session = session
        self._owns_session = session is None

    async def __aenter__(self) -> 'GitHubClient':
        if self._session is None:
            headers = {'User-Agent': USER_AGENT}
            if self.token:
                headers['Authorization'] = f'token {self.token}'
            self._session = aiohttp.ClientSession(headers=headers, timeout=self.timeout)
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def close(self) -> None:
        if self._session is not None and self._owns_session:
            await self._session.close()
        self._session = None

    @property
    def session(self) -> aiohttp.ClientSession:
        if self._session is None:
            raise RuntimeError("GitHubClient used outside 'async with'")
        return self._session

    async def _get(self, url: str, as_json: bool, params: dict = None) -> Tuple[Any, int]:
        headers = {'Accept': 'application/vnd.github.v3+json'} if as_json else {}
        try:
            async with self.session.get(url, params=params, headers=headers,
                                        timeout=self.timeout) as resp:
                if resp.status != 200:
                    logger.debug(f"GET {url} -> {resp.status}")
                    return None, resp.status
                if as_json:
                    return await resp.json(content_type=None), resp.status
                return await resp.text(), resp.status
        except asyncio.TimeoutError:
            logger.debug(f"GET {url} timed out")
            return None, NETWORK_ERROR
        except (aiohttp.ClientError, ValueError) as e:
            logger.debug(f"GET {url} failed: {e}")
            return None, NETWORK_ERROR

    async def get_repo_info(self, identity: RepositoryIdentity) -> Tuple[Optional[dict], int]:
        """Repository metadata (default_branch, visibility, ...)"""
        url = f"{self.api_base}/repos/{identity.owner}/{identity.repo}"
        return await self._get(url, as_json=True)

    async def get_tree(self, identity: RepositoryIdentity,
                       branch: str) -> Tuple[Optional[List[TreeEntry]], int]:
        """Recursive listing of every path on a branch, in one call"""
        url = f"{self.api_base}/repos/{identity.owner}/{identity.repo}/git/trees/{branch}"
        data, status = await self._get(url, as_json=True, params={'recursive': '1'})
        if data is None:
            return None, status
        if not isinstance(data, dict) or not isinstance(data.get('tree'), list):
            return None, NETWORK_ERROR
        if data.get('truncated'):
            logger.warning(f"Tree listing for {identity.full_name}@{branch} is truncated")
        return [TreeEntry.from_api(item) for item in data['tree']], status

    async def list_contents(self, identity: RepositoryIdentity, path: str,
                            branch: str) -> Tuple[Optional[List[dict]], int]:
        """One level of a directory: [{name, path, type, download_url}, ...]"""
        path = path.strip('/')
        url = f"{self.api_base}/repos/{identity.owner}/{identity.repo}/contents"
        if path:
            url = f"{url}/{quote(path)}"
        data, status = await self._get(url, as_json=True, params={'ref': branch})
        if data is None:
            return None, status
        if not isinstance(data, list):
            # A file path answers with a single object
            return None, NETWORK_ERROR
        return data, status

    async def get_raw(self, identity: RepositoryIdentity, branch: str,
                      path: str) -> Tuple[Optional[str], int]:
        """Raw file content by repository path"""
        url = f"{self.raw_base}/{identity.owner}/{identity.repo}/{branch}/{quote(path.lstrip('/'))}"
        return await self._get(url, as_json=False)

    async def get_url(self, url: str) -> Tuple[Optional[str], int]:
        """Raw content by absolute URL (contents API download_url)"""
        return await self._get(url, as_json=False)
