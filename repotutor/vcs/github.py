"""GitHub provider using the REST API over httpx."""

from __future__ import annotations

import logging
import re
from functools import cached_property

import httpx

from repotutor.errors import InvalidLocatorError, UpstreamUnavailableError
from repotutor.vcs.base import VCSProvider
from repotutor.vcs.models import RepoLocator, TreeEntry

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.github.com"

_JSON_ACCEPT = "application/vnd.github+json"
_RAW_ACCEPT = "application/vnd.github.raw"

_LOCATOR_RE = re.compile(
    r"^(?:https?://)?(?:www\.)?github\.com/"
    r"(?P<owner>[A-Za-z0-9][A-Za-z0-9_.-]*)/"
    r"(?P<repo>[A-Za-z0-9_.-]+?)"
    r"(?:\.git)?(?:[/?#].*)?$"
)


def parse_github_locator(locator: str) -> RepoLocator:
    """Parse ``github.com/owner/repo`` (scheme, ``.git`` and sub-paths allowed)."""
    match = _LOCATOR_RE.match(locator.strip())
    if not match:
        raise InvalidLocatorError(locator)
    return RepoLocator(host="github.com", owner=match["owner"], repo=match["repo"])


def _error_message(response: httpx.Response) -> str:
    """Best-effort extraction of GitHub's error message."""
    try:
        data = response.json()
    except ValueError:
        return response.reason_phrase or response.text[:200]
    if isinstance(data, dict) and data.get("message"):
        return str(data["message"])
    return response.reason_phrase


class GitHubProvider(VCSProvider):
    """GitHub implementation of VCSProvider.

    The token is optional: public repositories are readable anonymously,
    subject to GitHub's lower unauthenticated rate limit.
    """

    def __init__(
        self,
        token: str | None = None,
        api_url: str = DEFAULT_API_URL,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._token = token or None
        self._api_url = api_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport

    @cached_property
    def _client(self) -> httpx.AsyncClient:
        headers = {"Accept": _JSON_ACCEPT, "X-GitHub-Api-Version": "2022-11-28"}
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        return httpx.AsyncClient(
            base_url=self._api_url,
            headers=headers,
            timeout=self._timeout,
            transport=self._transport,
            follow_redirects=True,
        )

    def parse_locator(self, locator: str) -> RepoLocator:
        return parse_github_locator(locator)

    async def _get_json(self, url: str, **params: str) -> dict:
        try:
            response = await self._client.get(url, params=params or None)
        except httpx.HTTPError as e:
            raise UpstreamUnavailableError(0, f"{type(e).__name__}: {e}", url=url) from e
        if not response.is_success:
            raise UpstreamUnavailableError(
                response.status_code, _error_message(response), url=str(response.url)
            )
        return response.json()

    async def get_default_branch(self, repo: RepoLocator) -> str:
        data = await self._get_json(f"/repos/{repo.owner}/{repo.repo}")
        return data.get("default_branch") or "main"

    async def get_tree(self, repo: RepoLocator, branch: str) -> list[TreeEntry]:
        data = await self._get_json(
            f"/repos/{repo.owner}/{repo.repo}/git/trees/{branch}", recursive="1"
        )
        if data.get("truncated"):
            logger.warning("Tree listing for %s was truncated by GitHub", repo.full_name)
        return [TreeEntry(**item) for item in data.get("tree", [])]

    async def get_file_content(self, entry: TreeEntry) -> str:
        if not entry.url:
            raise ValueError(f"Tree entry {entry.path!r} has no content URL")
        response = await self._client.get(entry.url, headers={"Accept": _RAW_ACCEPT})
        if not response.is_success:
            raise UpstreamUnavailableError(
                response.status_code, _error_message(response), url=entry.url
            )
        # UnicodeDecodeError is a ValueError; the crawler drops the file.
        return response.content.decode("utf-8")

    async def aclose(self) -> None:
        if "_client" in self.__dict__:
            await self._client.aclose()
            del self.__dict__["_client"]
