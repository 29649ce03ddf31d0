"""Prompt builders for the three generation phases."""

from __future__ import annotations

from collections.abc import Sequence

from repotutor.classifier.models import CodebaseStats, FileInfo
from repotutor.tutorial.models import Abstraction

ABSTRACTIONS_SCHEMA = [
    {
        "name": "string",
        "description": "string",
        "files": ["path/to/file"],
        "keyCode": "short excerpt (optional)",
    }
]

RELATIONSHIPS_SCHEMA = {
    "summary": "string",
    "relationships": [{"from": "AbstractionName", "to": "AbstractionName", "label": "string"}],
}


def _truncate(text: str, limit: int) -> str:
    if len(text) <= limit:
        return text
    return text[:limit] + "\n... (truncated)"


def format_languages(stats: CodebaseStats) -> str:
    if not stats.languages:
        return "unknown"
    ordered = sorted(stats.languages.items(), key=lambda kv: kv[1], reverse=True)
    return ", ".join(f"{lang} ({count} files)" for lang, count in ordered)


def build_abstractions_prompt(
    project_name: str,
    stats: CodebaseStats,
    files: Sequence[FileInfo],
    language: str,
    *,
    file_chars: int = 2000,
    min_count: int = 5,
    max_count: int = 8,
) -> str:
    """Phase 1: ask for the project's core abstractions."""
    sections = "\n".join(
        f"--- {f.path} ---\n```{f.language or ''}\n{_truncate(f.content, file_chars)}\n```"
        for f in files
    )
    return f"""\
You are analyzing the codebase of the project `{project_name}` to write a beginner-friendly tutorial.

## Project Overview
- **Framework:** {stats.framework or "unknown"}
- **Languages:** {format_languages(stats)}
- **Files analyzed:** {stats.filtered_files} of {stats.total_files}

## Most Important Files
{sections}

## Task
Identify the {min_count} to {max_count} most important abstractions (core concepts, \
components or subsystems) a newcomer must understand to work on this codebase.

For each abstraction provide:
1. `name`: a short, concise name (in {language})
2. `description`: what it is and why it matters, with a simple analogy, about 100 words (in {language})
3. `files`: the relevant file paths, copied exactly from the file headers above
4. `keyCode`: optionally, a short (under 15 lines) excerpt that captures the idea

Output a JSON array of {min_count} to {max_count} objects, most fundamental abstraction first."""


def build_relationships_prompt(
    project_name: str,
    abstractions: Sequence[Abstraction],
    language: str,
    *,
    description_chars: int = 200,
) -> str:
    """Phase 2: ask how the abstractions interact."""
    listing = "\n".join(
        f"{i}. {a.name}: {_truncate(a.description, description_chars)}"
        for i, a in enumerate(abstractions, start=1)
    )
    return f"""\
Project `{project_name}` is built from these abstractions:

{listing}

## Task
1. Write a high-level `summary` of the project's purpose and architecture in 2-4 \
sentences (in {language}).
2. List the key `relationships` between the abstractions. Each relationship has \
`from` and `to` (abstraction names exactly as listed above) and a short `label` \
describing the interaction (in {language}), for example "Manages", "Calls", "Configures".

Output a JSON object with the keys `summary` and `relationships`."""


def build_chapter_prompt(
    project_name: str,
    abstraction: Abstraction,
    chapter_number: int,
    files: Sequence[FileInfo],
    related: Sequence[str],
    language: str,
) -> str:
    """Phase 3: one tutorial chapter, grounded in real file contents."""
    code = "\n\n".join(
        f"--- {f.path} ---\n```{f.language or ''}\n{f.content}\n```" for f in files
    )
    related_text = ", ".join(related) if related else "none"
    key_code = ""
    if abstraction.key_code:
        key_code = f"\n## Key Code Identified Earlier\n```\n{abstraction.key_code}\n```\n"
    return f"""\
Write Chapter {chapter_number} of a tutorial about the project `{project_name}`.
This chapter explains the concept: **{abstraction.name}**.

## Concept Description
{abstraction.description}
{key_code}
## Related Concepts
{related_text}

## Source Code
{code}

## Instructions
- Write the whole chapter in {language}.
- Start with a level-1 heading: `# Chapter {chapter_number}: {abstraction.name}`.
- Begin with the problem this concept solves, then walk through how it works.
- Quote short snippets from the source code above (under 20 lines each) and \
explain them line by line. Do not invent code that is not shown.
- Use a Mermaid diagram where a flow or structure is easier to see than to read.
- Mention how it connects to the related concepts where relevant.
- End with a short summary.
- Output Markdown only."""
