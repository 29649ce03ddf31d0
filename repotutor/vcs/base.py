"""Abstract code-host interface for repotutor."""

from abc import ABC, abstractmethod

from repotutor.vcs.models import RepoLocator, TreeEntry


class VCSProvider(ABC):
    """Abstract base class for code-hosting providers.

    Defines the three calls the crawler needs to turn a locator into file
    contents. Implementations own their HTTP session and must be closed
    with ``aclose()`` (or used as an async context manager).
    """

    @abstractmethod
    def parse_locator(self, locator: str) -> RepoLocator:
        """Parse a user-supplied location string.

        Raises:
            InvalidLocatorError: if the string is not a repository reference.
        """
        ...

    @abstractmethod
    async def get_default_branch(self, repo: RepoLocator) -> str:
        """Resolve the repository's default branch name."""
        ...

    @abstractmethod
    async def get_tree(self, repo: RepoLocator, branch: str) -> list[TreeEntry]:
        """List the full recursive file tree of a branch."""
        ...

    @abstractmethod
    async def get_file_content(self, entry: TreeEntry) -> str:
        """Fetch the raw text content of a tree entry."""
        ...

    async def aclose(self) -> None:
        """Release network resources."""

    async def __aenter__(self) -> "VCSProvider":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()
