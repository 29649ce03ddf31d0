"""Repository crawler: branch resolution, tree filtering, batched content fetch."""

from __future__ import annotations

import asyncio
import logging

import httpx

from repotutor.config.models import FetchConfig
from repotutor.errors import UpstreamUnavailableError
from repotutor.vcs.base import VCSProvider
from repotutor.vcs.models import RawFile, TreeEntry

logger = logging.getLogger(__name__)


class RepoCrawler:
    """Turns a repository locator into a bounded list of text files.

    Content requests go out in fixed-size batches so that at most
    ``config.batch_size`` connections are open against the host at once.
    """

    def __init__(self, provider: VCSProvider, config: FetchConfig) -> None:
        self.provider = provider
        self.config = config

    async def fetch(self, locator: str) -> list[RawFile]:
        """Fetch every eligible text file of the repository's default branch."""
        repo = self.provider.parse_locator(locator)
        branch = await self.provider.get_default_branch(repo)
        logger.info("Fetching %s (branch %s)", repo.full_name, branch)

        tree = await self.provider.get_tree(repo, branch)
        entries = self.select_entries(tree)
        logger.info("%d of %d tree entries selected for download", len(entries), len(tree))

        files: list[RawFile] = []
        size = self.config.batch_size
        for start in range(0, len(entries), size):
            batch = entries[start : start + size]
            results = await asyncio.gather(*(self._fetch_one(e) for e in batch))
            files.extend(f for f in results if f is not None)

        logger.info("Fetched %d files from %s", len(files), repo.full_name)
        return files

    def select_entries(self, tree: list[TreeEntry]) -> list[TreeEntry]:
        """Keep blobs under the size limit, capped at max_files in tree order."""
        eligible = [
            e
            for e in tree
            if e.type == "blob" and (e.size or 0) <= self.config.max_file_size
        ]
        if len(eligible) > self.config.max_files:
            logger.debug(
                "Dropping %d files beyond the %d-file cap",
                len(eligible) - self.config.max_files,
                self.config.max_files,
            )
        return eligible[: self.config.max_files]

    async def _fetch_one(self, entry: TreeEntry) -> RawFile | None:
        try:
            content = await self.provider.get_file_content(entry)
        except (httpx.HTTPError, UpstreamUnavailableError, ValueError) as e:
            logger.warning("Skipping %s: %s", entry.path, e)
            return None
        if is_binary(content):
            logger.debug("Skipping binary file: %s", entry.path)
            return None
        return RawFile(path=entry.path, content=content)


def is_binary(content: str) -> bool:
    """Null-byte sniff; text files never contain NUL."""
    return "\x00" in content
