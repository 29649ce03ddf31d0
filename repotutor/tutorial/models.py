"""Pydantic models for the tutorial subsystem."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

from repotutor.classifier.models import CodebaseStats


class Abstraction(BaseModel):
    """A named architectural concept, grounded in file paths.

    Identity is ``name``, compared case-sensitively.
    """

    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(min_length=1)
    description: str = ""
    files: list[str] = Field(default_factory=list)
    key_code: str | None = Field(default=None, alias="keyCode")

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("abstraction name cannot be empty or whitespace")
        return v

    @field_validator("description", mode="before")
    @classmethod
    def null_description(cls, v: object) -> object:
        return "" if v is None else v

    @field_validator("files", mode="before")
    @classmethod
    def coerce_files(cls, v: object) -> object:
        # Models sometimes answer with a single path or a comma list.
        if v is None:
            return []
        if isinstance(v, str):
            return [p.strip() for p in v.split(",") if p.strip()]
        if isinstance(v, list):
            return [str(p) for p in v if isinstance(p, (str, int))]
        return v


class Relationship(BaseModel):
    """A directed, labelled edge between two abstraction names.

    Names are not validated against the abstraction list; duplicates and
    self-references are kept as given.
    """

    model_config = ConfigDict(populate_by_name=True)

    from_: str = Field(alias="from")
    to: str
    label: str = ""

    @field_validator("label", mode="before")
    @classmethod
    def null_label(cls, v: object) -> object:
        return "" if v is None else v


class RelationshipAnalysis(BaseModel):
    summary: str = ""
    relationships: list[Relationship] = Field(default_factory=list)


class Chapter(BaseModel):
    title: str
    content: str
    filename: str


class TutorialResult(BaseModel):
    """Terminal output of a pipeline run."""

    model_config = ConfigDict(frozen=True)

    project_name: str
    framework: str | None = None
    abstractions: list[Abstraction] = Field(default_factory=list)
    relationships: list[Relationship] = Field(default_factory=list)
    summary: str = ""
    chapters: list[Chapter] = Field(default_factory=list)
    stats: CodebaseStats = Field(default_factory=CodebaseStats)
    provider: str
    model: str
