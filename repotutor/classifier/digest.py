"""Digest rendering: a size-budgeted text view of a classified codebase."""

from __future__ import annotations

from repotutor.classifier.models import FileInfo, FilteredCodebase

CHARS_PER_TOKEN = 4
MAX_CORE_FILES = 20
MAX_SECONDARY_FILES = 10
SECONDARY_BUDGET_RATIO = 0.8
CONFIG_BUDGET_RATIO = 0.95
MANIFEST_FILES = ("package.json", "pyproject.toml", "Cargo.toml", "go.mod")


def estimate_tokens(text: str) -> float:
    """Rough token count at a fixed characters-per-token ratio."""
    return len(text) / CHARS_PER_TOKEN


def format_file_section(file: FileInfo, label: str) -> str:
    return f"\n## [{label}] {file.path}\n```{file.language or ''}\n{file.content}\n```\n"


class _DigestBuilder:
    def __init__(self, max_tokens: int) -> None:
        self.max_tokens = max_tokens
        self.used = 0.0
        self.parts: list[str] = []

    def heading(self, text: str) -> None:
        self.parts.append(text)

    def add_file(self, file: FileInfo, label: str) -> bool:
        """Append a file section; False (and nothing appended) if over budget."""
        section = format_file_section(file, label)
        tokens = estimate_tokens(section)
        if self.used + tokens > self.max_tokens:
            return False
        self.parts.append(section)
        self.used += tokens
        return True

    def add_files(self, files: list[FileInfo], label: str) -> None:
        for file in files:
            if not self.add_file(file, label):
                break


def find_manifest(codebase: FilteredCodebase) -> FileInfo | None:
    """The root package manifest among config files, if any."""
    by_path = {f.path: f for f in codebase.config_files}
    for name in MANIFEST_FILES:
        if name in by_path:
            return by_path[name]
    return None


def render_digest(codebase: FilteredCodebase, max_tokens: int = 100_000) -> str:
    """Render the digest in strict tier order under a token budget.

    Only file sections count against the budget. A file that would push
    usage past ``max_tokens`` ends its tier; later tiers are still tried.
    """
    stats = codebase.stats
    languages = ", ".join(f"{lang}({count})" for lang, count in stats.languages.items())

    builder = _DigestBuilder(max_tokens)
    builder.heading("# Codebase Analysis\n")
    builder.heading(f"Framework: {stats.framework or 'Unknown'}")
    builder.heading(f"Total Files: {stats.filtered_files}")
    builder.heading(f"Languages: {languages}")
    builder.heading("\n---\n")

    builder.heading("\n# Entry Points\n")
    builder.add_files(codebase.entry_points, "ENTRY")

    builder.heading("\n# Core Files\n")
    builder.add_files(codebase.core_files[:MAX_CORE_FILES], "CORE")

    if builder.used < max_tokens * SECONDARY_BUDGET_RATIO:
        builder.heading("\n# Secondary Files\n")
        builder.add_files(codebase.secondary_files[:MAX_SECONDARY_FILES], "SECONDARY")

    manifest = find_manifest(codebase)
    if manifest and builder.used < max_tokens * CONFIG_BUDGET_RATIO:
        builder.heading("\n# Configuration\n")
        builder.add_file(manifest, "CONFIG")

    return "\n".join(builder.parts)
