"""Pydantic models for repository data."""

from pydantic import BaseModel, ConfigDict, Field


class RepoLocator(BaseModel):
    """A parsed owner/repo reference on a code host."""

    model_config = ConfigDict(frozen=True)

    host: str = "github.com"
    owner: str
    repo: str

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"


class TreeEntry(BaseModel):
    """One entry of a recursive git tree listing."""

    path: str
    type: str = Field(description="blob, tree or commit")
    size: int | None = None
    sha: str | None = None
    url: str | None = Field(default=None, description="API URL for the entry's content")


class RawFile(BaseModel):
    """A fetched text file. Immutable once produced."""

    model_config = ConfigDict(frozen=True)

    path: str
    content: str
