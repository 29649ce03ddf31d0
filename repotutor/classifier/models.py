"""Pydantic models for the classifier subsystem."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

Importance = Literal["core", "secondary", "config", "test", "docs"]


class FileInfo(BaseModel):
    """A classified file. Exactly one per surviving RawFile."""

    path: str
    content: str
    size: int
    language: str | None = None
    importance: Importance = "secondary"


class CodebaseStats(BaseModel):
    total_files: int = 0
    filtered_files: int = 0
    total_size: int = 0
    languages: dict[str, int] = Field(default_factory=dict)
    framework: str | None = None


class FilteredCodebase(BaseModel):
    """Tiered view of a repository, built once per run and read-only afterwards."""

    entry_points: list[FileInfo] = Field(default_factory=list)
    core_files: list[FileInfo] = Field(default_factory=list)
    secondary_files: list[FileInfo] = Field(default_factory=list)
    test_files: list[FileInfo] = Field(default_factory=list)
    config_files: list[FileInfo] = Field(default_factory=list)
    stats: CodebaseStats = Field(default_factory=CodebaseStats)

    def all_files(self) -> list[FileInfo]:
        """Every classified file, bucket by bucket."""
        return [
            *self.entry_points,
            *self.core_files,
            *self.secondary_files,
            *self.test_files,
            *self.config_files,
        ]

    def priority_files(self) -> list[FileInfo]:
        """Entry points then core files, in bucket order."""
        return [*self.entry_points, *self.core_files]
