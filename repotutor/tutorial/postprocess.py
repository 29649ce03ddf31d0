"""Clean-up of generated chapter markdown."""

from __future__ import annotations

import re

from repotutor.llm.extract import strip_reasoning

BOX_DRAWING = re.compile(r"[\u2500-\u257F]")
DECORATOR_LINE = re.compile(r"^[ \t]*(?:={4,}|-{4,})[ \t]*$")
EXCESS_BLANK_LINES = re.compile(r"\n(?:[ \t]*\n){4,}")
FENCE_LINE = re.compile(r"^[ \t]*(?:```|~~~)")

FENCE_ALIASES: dict[str, str] = {
    "js": "javascript",
    "ts": "typescript",
    "py": "python",
    "sh": "bash",
}
_FENCE_TAG = re.compile(r"^([ \t]*```)([A-Za-z]+)[ \t]*$", re.MULTILINE)


def _canonical_fence(match: re.Match[str]) -> str:
    tag = match.group(2)
    return match.group(1) + FENCE_ALIASES.get(tag.lower(), tag)


def _underlines_text(previous: str) -> bool:
    """True when a rule under ``previous`` would be a setext heading underline."""
    stripped = previous.strip()
    return bool(
        stripped
        and not stripped.startswith("#")
        and not FENCE_LINE.match(previous)
        and not DECORATOR_LINE.match(previous)
    )


def normalize_rules(text: str) -> str:
    """Collapse long ``====``/``----`` decorator lines into ``---``.

    Fenced code and setext heading underlines are left as written.
    """
    lines = text.split("\n")
    in_fence = False
    previous = ""
    for i, line in enumerate(lines):
        if FENCE_LINE.match(line):
            in_fence = not in_fence
        elif not in_fence and DECORATOR_LINE.match(line) and not _underlines_text(previous):
            lines[i] = "---"
        previous = line
    return "\n".join(lines)


def clean_markdown(text: str) -> str:
    """Normalize a chapter reply into publishable markdown."""
    text = text.replace("\r\n", "\n")
    text = strip_reasoning(text)
    text = BOX_DRAWING.sub("", text)
    text = normalize_rules(text)
    text = _FENCE_TAG.sub(_canonical_fence, text)
    text = EXCESS_BLANK_LINES.sub("\n\n\n", text)
    return text.strip() + "\n"
