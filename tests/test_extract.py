"""Tests for JSON recovery from model replies."""

import pytest

from repotutor.errors import MalformedGenerationError
from repotutor.llm import extract_json, strip_reasoning


class TestExtractJson:
    def test_fenced_object(self):
        assert extract_json('```json\n{"a": 1}\n```') == {"a": 1}

    def test_bare_fence(self):
        assert extract_json('```\n[{"name": "X"}]\n```') == [{"name": "X"}]

    def test_reasoning_block_then_array(self):
        raw = "<think>The user wants a list, maybe {not json}.</think>\n[1,2,3]"
        assert extract_json(raw) == [1, 2, 3]

    def test_thinking_tag_variant(self):
        assert extract_json("<THINKING>hmm</THINKING>{\"ok\": true}") == {"ok": True}

    def test_prose_around_json(self):
        raw = 'Sure! Here is the analysis:\n{"summary": "s", "relationships": []}\nHope it helps.'
        assert extract_json(raw) == {"summary": "s", "relationships": []}

    def test_array_before_object_keeps_outer_array(self):
        assert extract_json('[{"a": 1}, {"b": 2}]') == [{"a": 1}, {"b": 2}]

    def test_no_json_raises_malformed(self):
        with pytest.raises(MalformedGenerationError) as exc_info:
            extract_json("no json here")
        assert exc_info.value.raw_text == "no json here"

    def test_unbalanced_raises_malformed(self):
        with pytest.raises(MalformedGenerationError):
            extract_json('{"a": [1, 2}')

    def test_empty_reply_raises_malformed(self):
        with pytest.raises(MalformedGenerationError):
            extract_json("   ")


def test_strip_reasoning_spans_lines():
    assert strip_reasoning("<think>\nline one\nline two\n</think>answer") == "answer"
