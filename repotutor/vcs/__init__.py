"""Repository fetching for repotutor."""

import httpx

from repotutor.config.models import FetchConfig
from repotutor.vcs.base import VCSProvider
from repotutor.vcs.crawler import RepoCrawler, is_binary
from repotutor.vcs.github import GitHubProvider, parse_github_locator
from repotutor.vcs.models import RawFile, RepoLocator, TreeEntry


def create_provider(
    config: FetchConfig,
    token: str | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> VCSProvider:
    """Create a code-host provider from config.

    The token is passed explicitly; callers decide where it comes from.
    """
    if config.provider != "github":
        raise ValueError(
            f"Unsupported VCS provider: {config.provider!r}. "
            "Currently only 'github' is supported."
        )
    return GitHubProvider(
        token=token,
        api_url=config.api_url,
        timeout=config.timeout,
        transport=transport,
    )


async def fetch_repository(
    locator: str,
    credential: str | None = None,
    config: FetchConfig | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> list[RawFile]:
    """Fetch a repository's text files. Per-file failures shrink the result."""
    config = config or FetchConfig()
    async with create_provider(config, token=credential, transport=transport) as provider:
        return await RepoCrawler(provider, config).fetch(locator)


__all__ = [
    "GitHubProvider",
    "RawFile",
    "RepoCrawler",
    "RepoLocator",
    "TreeEntry",
    "VCSProvider",
    "create_provider",
    "fetch_repository",
    "is_binary",
    "parse_github_locator",
]
