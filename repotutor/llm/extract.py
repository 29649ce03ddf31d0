"""Recovery of JSON values from free-text generative replies."""

from __future__ import annotations

import json
import re
from typing import Any

from repotutor.errors import MalformedGenerationError

# Reasoning models (DeepSeek R1 and friends) prefix replies with these blocks.
REASONING_BLOCK = re.compile(r"<(think|thinking)>.*?</\1>", re.DOTALL | re.IGNORECASE)

_LEADING_FENCE = re.compile(r"^```[\w-]*[ \t]*\n?")
_TRAILING_FENCE = re.compile(r"\n?```$")


def strip_reasoning(text: str) -> str:
    return REASONING_BLOCK.sub("", text)


def _json_span(text: str) -> str:
    """Slice from the first opening brace/bracket to the last closing one."""
    starts = [i for i in (text.find("{"), text.find("[")) if i != -1]
    if not starts:
        return text
    start = min(starts)
    end = max(text.rfind("}"), text.rfind("]"))
    if end > start:
        return text[start : end + 1]
    return text


def extract_json(raw: str) -> Any:
    """Parse the JSON value embedded in a model reply.

    Raises:
        MalformedGenerationError: if no parseable span exists. The raw
            reply is attached for diagnostics.
    """
    text = raw.strip()
    text = _LEADING_FENCE.sub("", text, count=1)
    text = _TRAILING_FENCE.sub("", text, count=1)
    text = strip_reasoning(text).strip()
    text = _json_span(text)
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise MalformedGenerationError(
            f"Model reply was not valid JSON: {e.msg} (line {e.lineno}, column {e.colno})",
            raw_text=raw,
        ) from e
