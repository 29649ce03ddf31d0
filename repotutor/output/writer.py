"""TutorialWriter: writes a TutorialResult to a directory of markdown chapters."""

from __future__ import annotations

import logging
import re
from datetime import datetime, timezone
from pathlib import Path

import yaml

from repotutor.config.models import OutputConfig
from repotutor.tutorial.models import TutorialResult

logger = logging.getLogger(__name__)

INDEX_FILENAME = "tutorial.yaml"


def _sanitize_project_name(name: str) -> str:
    """Make a project name safe for use as a directory name.

    Whitespace becomes ``_``, path separators and ``..`` are removed, and
    characters that are problematic on common filesystems are dropped.
    """
    slug = re.sub(r"\s+", "_", name.strip()).lower()
    slug = slug.replace("/", "_").replace("\\", "_")
    slug = slug.replace("..", "")
    slug = re.sub(r"[^\w\-\.]", "", slug)
    if not slug or slug.strip(".") == "":
        slug = "_unnamed"
    return slug


def build_index(result: TutorialResult) -> dict:
    """Metadata document stored next to the chapters."""
    return {
        "project_name": result.project_name,
        "framework": result.framework,
        "provider": result.provider,
        "model": result.model,
        "summary": result.summary,
        "generated_at": datetime.now(timezone.utc).isoformat(),
        "stats": result.stats.model_dump(),
        "abstractions": [a.model_dump(by_alias=True) for a in result.abstractions],
        "relationships": [r.model_dump(by_alias=True) for r in result.relationships],
        "chapters": [
            {"ordinal": i, "title": c.title, "filename": c.filename}
            for i, c in enumerate(result.chapters, start=1)
        ],
    }


class TutorialWriter:
    """Writes chapters in display order plus an optional YAML index."""

    def __init__(self, config: OutputConfig) -> None:
        self.config = config
        self.base_dir = Path(config.base_dir)

    def output_dir(self, result: TutorialResult) -> Path:
        return self.base_dir / _sanitize_project_name(result.project_name)

    def write(self, result: TutorialResult, *, dry_run: bool = False) -> list[Path]:
        """Write every chapter. Returns chapter paths in chapter order."""
        dest_dir = self.output_dir(result)
        paths = [dest_dir / chapter.filename for chapter in result.chapters]

        if dry_run:
            for path in paths:
                logger.debug("dry-run: would write %s", path)
            return paths

        dest_dir.mkdir(parents=True, exist_ok=True)
        for chapter, path in zip(result.chapters, paths):
            path.write_text(chapter.content, encoding="utf-8")
            logger.info("wrote %s (%d bytes)", path, len(chapter.content))

        if self.config.create_index:
            index_path = dest_dir / INDEX_FILENAME
            index_path.write_text(
                yaml.safe_dump(
                    build_index(result),
                    default_flow_style=False,
                    sort_keys=False,
                    allow_unicode=True,
                ),
                encoding="utf-8",
            )
            logger.debug("wrote index %s", index_path)

        return paths
