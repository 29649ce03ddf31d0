"""Resolving an abstraction's file references against the classified codebase."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence

from repotutor.classifier.models import FileInfo, FilteredCodebase
from repotutor.tutorial.models import Abstraction

logger = logging.getLogger(__name__)


def ranked_files(codebase: FilteredCodebase) -> list[FileInfo]:
    """All files, most important first."""
    return [
        *codebase.entry_points,
        *codebase.core_files,
        *codebase.secondary_files,
        *codebase.config_files,
        *codebase.test_files,
    ]


def _normalize(ref: str) -> str:
    ref = ref.strip().strip("`'\"")
    while ref.startswith("./"):
        ref = ref[2:]
    return ref.lstrip("/")


def _basename(path: str) -> str:
    return path.rsplit("/", 1)[-1]


def _match_one(ref: str, candidates: Sequence[FileInfo]) -> FileInfo | None:
    """Exact path, then substring either way, then same filename."""
    strategies: list[Callable[[FileInfo], bool]] = [
        lambda f: f.path == ref,
        lambda f: ref in f.path or f.path in ref,
        lambda f: _basename(f.path) == _basename(ref),
    ]
    for matches in strategies:
        for f in candidates:
            if matches(f):
                return f
    return None


def resolve_files(
    abstraction: Abstraction,
    codebase: FilteredCodebase,
    limit: int = 5,
    fallback: int = 3,
) -> list[FileInfo]:
    """Map the abstraction's path references onto real files.

    Never returns an empty list while the codebase has files: when nothing
    resolves, the ``fallback`` highest-priority files are used instead.
    """
    candidates = ranked_files(codebase)
    resolved: list[FileInfo] = []
    seen: set[str] = set()

    for raw_ref in abstraction.files:
        ref = _normalize(raw_ref)
        if not ref:
            continue
        match = _match_one(ref, candidates)
        if match is None or match.path in seen:
            continue
        seen.add(match.path)
        resolved.append(match)
        if len(resolved) >= limit:
            break

    if not resolved:
        logger.warning(
            "No files resolved for %r; falling back to the top %d files",
            abstraction.name,
            fallback,
        )
        return candidates[:fallback]
    return resolved
