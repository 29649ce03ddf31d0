"""SmartFilter: tiers fetched files by relevance and detects the framework."""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Sequence
from pathlib import PurePosixPath

from repotutor.classifier import patterns
from repotutor.classifier.digest import render_digest
from repotutor.classifier.models import CodebaseStats, FileInfo, FilteredCodebase
from repotutor.vcs.models import RawFile

logger = logging.getLogger(__name__)


class SmartFilter:
    """Partitions a repository's files into mutually exclusive tiers.

    Classification is a first-match-wins chain:
    ignore → test → config → docs → entry point → core → secondary.
    """

    def classify(self, files: Sequence[RawFile]) -> FilteredCodebase:
        framework = detect_framework(files)
        result = FilteredCodebase(
            stats=CodebaseStats(total_files=len(files), framework=framework)
        )
        stats = result.stats

        for file in files:
            if should_ignore(file.path):
                continue

            language = detect_language(file.path)
            if language:
                stats.languages[language] = stats.languages.get(language, 0) + 1
            size = len(file.content)
            stats.total_size += size
            stats.filtered_files += 1

            info = FileInfo(path=file.path, content=file.content, size=size, language=language)

            if is_test_file(file.path):
                info.importance = "test"
                result.test_files.append(info)
            elif is_config_file(file.path):
                info.importance = "config"
                result.config_files.append(info)
            elif is_docs_file(file.path):
                # Docs have no bucket of their own; kept with secondary for reference.
                info.importance = "docs"
                result.secondary_files.append(info)
            elif is_entry_point(file.path, framework):
                info.importance = "core"
                result.entry_points.append(info)
            elif is_core_file(file.path, file.content):
                info.importance = "core"
                result.core_files.append(info)
            else:
                result.secondary_files.append(info)

        result.core_files.sort(key=lambda f: f.size, reverse=True)
        result.secondary_files.sort(key=lambda f: f.size, reverse=True)

        logger.info(
            "Classified %d/%d files (framework: %s): %d entry, %d core, %d secondary, "
            "%d test, %d config",
            stats.filtered_files,
            stats.total_files,
            framework or "unknown",
            len(result.entry_points),
            len(result.core_files),
            len(result.secondary_files),
            len(result.test_files),
            len(result.config_files),
        )
        return result

    def render(self, codebase: FilteredCodebase, max_tokens: int = 100_000) -> str:
        return render_digest(codebase, max_tokens)


# ---------------------------------------------------------------------------
# Predicates
# ---------------------------------------------------------------------------


def _any(pattern_list: list[re.Pattern[str]], path: str) -> bool:
    return any(p.search(path) for p in pattern_list)


def should_ignore(path: str) -> bool:
    return _any(patterns.IGNORE_PATTERNS, path)


def is_test_file(path: str) -> bool:
    return _any(patterns.TEST_PATTERNS, path)


def is_config_file(path: str) -> bool:
    return _any(patterns.CONFIG_PATTERNS, path)


def is_docs_file(path: str) -> bool:
    return _any(patterns.DOCS_PATTERNS, path)


def is_entry_point(path: str, framework: str | None) -> bool:
    """Match the framework's entry points, or every known set when it has none."""
    dedicated = patterns.ENTRY_POINTS.get(framework) if framework else None
    return _any(dedicated or patterns.ALL_ENTRY_POINTS, path)


def is_core_file(path: str, content: str) -> bool:
    if patterns.SOURCE_ROOT.search(path):
        return not patterns.UTILITY_FILE.search(path)
    if len(content) > patterns.CORE_CONTENT_THRESHOLD:
        return _any(patterns.DECLARATION_PATTERNS, content)
    return False


def detect_language(path: str) -> str | None:
    suffix = PurePosixPath(path).suffix.lower()
    return patterns.LANGUAGE_MAP.get(suffix)


# ---------------------------------------------------------------------------
# Framework detection
# ---------------------------------------------------------------------------


def detect_framework(files: Sequence[RawFile]) -> str | None:
    """Single framework label from manifests, then from path shape."""
    by_path = {f.path: f.content for f in files}

    if "package.json" in by_path:
        label = _framework_from_package_json(by_path["package.json"])
        if label:
            return label

    python_deps: list[str] = []
    if "pyproject.toml" in by_path:
        python_deps.extend(_parse_pyproject_deps(by_path["pyproject.toml"]))
    if "requirements.txt" in by_path:
        python_deps.extend(_parse_requirements_txt(by_path["requirements.txt"]))
    lowered = {d.lower() for d in python_deps}
    for dep, label in patterns.PYTHON_FRAMEWORKS:
        if dep in lowered:
            return label

    for pattern, label in patterns.PATH_FRAMEWORKS:
        if any(pattern.search(p) for p in by_path):
            return label
    return None


def _framework_from_package_json(raw: str) -> str | None:
    try:
        pkg = json.loads(raw)
    except json.JSONDecodeError:
        logger.debug("package.json is not valid JSON; skipping manifest detection")
        return None
    if not isinstance(pkg, dict):
        return None
    deps: dict = {}
    for key in ("dependencies", "devDependencies"):
        section = pkg.get(key)
        if isinstance(section, dict):
            deps.update(section)
    for dep, label in patterns.NPM_FRAMEWORKS:
        if dep in deps:
            return label
    return None


_VERSION_SPLIT = re.compile(r"[>=<!~\[;\s]")
_QUOTED = re.compile(r"""["'][^"']*["']""")


def _parse_requirements_txt(content: str) -> list[str]:
    """Extract package names from requirements.txt content."""
    names: list[str] = []
    for line in content.splitlines():
        line = line.strip()
        if not line or line.startswith("#") or line.startswith("-"):
            continue
        name = _VERSION_SPLIT.split(line, maxsplit=1)[0].strip()
        if name:
            names.append(name)
    return names


def _parse_pyproject_deps(content: str) -> list[str]:
    """Dependency names from the ``dependencies = [...]`` array of pyproject.toml."""
    names: list[str] = []
    in_deps = False
    for line in content.splitlines():
        stripped = line.strip()
        if not in_deps and stripped.startswith("dependencies") and "=" in stripped:
            in_deps = True
            stripped = stripped.split("=", 1)[1]
        if not in_deps:
            continue
        for item in re.findall(r"""["']([^"']+)["']""", stripped):
            name = _VERSION_SPLIT.split(item, maxsplit=1)[0].strip()
            if name:
                names.append(name)
        if "]" in _QUOTED.sub("", stripped):
            in_deps = False
    return names
