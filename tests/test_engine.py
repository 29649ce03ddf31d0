"""Tests for TutorialEngine: the three generation phases and their failure modes."""

import asyncio
import json

import pytest

from repotutor.classifier import SmartFilter
from repotutor.config.models import GenerationConfig
from repotutor.errors import GenerationFailedError
from repotutor.tutorial import (
    Abstraction,
    TutorialEngine,
    chapter_filename,
    resolve_files,
)
from conftest import ScriptedLLM


CHAPTER_ONE = "# Chapter 1: API Router\n\nRouting explained."
CHAPTER_TWO = "# Chapter 2: Widget Model\n\nModels explained."


@pytest.fixture
def codebase(sample_raw_files):
    return SmartFilter().classify(sample_raw_files)


# ── full run ────────────────────────────────────────────────────────


class TestRun:
    async def test_chapters_follow_abstractions(
        self, sample_raw_files, abstractions_reply, relationships_reply
    ):
        llm = ScriptedLLM([abstractions_reply, relationships_reply, CHAPTER_ONE, CHAPTER_TWO])
        result = await TutorialEngine(llm).run(sample_raw_files, "widgets")

        names = [a.name for a in result.abstractions]
        assert names == ["API Router", "Widget Model"]
        assert [c.title for c in result.chapters] == names
        assert [c.filename for c in result.chapters] == [
            "01_api_router.md",
            "02_widget_model.md",
        ]
        assert result.chapters[0].content == CHAPTER_ONE + "\n"
        assert result.summary.startswith("A small service")
        assert result.relationships[0].from_ == "API Router"
        assert result.framework == "fastapi"
        assert result.stats.filtered_files == 7
        assert (result.provider, result.model) == ("openrouter", "test-model")
        assert len(llm.prompts) == 4

    async def test_prompts_carry_context(
        self, sample_raw_files, abstractions_reply, relationships_reply
    ):
        llm = ScriptedLLM([abstractions_reply, relationships_reply, CHAPTER_ONE, CHAPTER_TWO])
        await TutorialEngine(llm).run(sample_raw_files, "widgets", output_language="spanish")

        identify, relate, first, second = llm.prompts
        assert "--- main.py ---" in identify
        assert "--- app/api.py ---" in identify
        assert "tests/test_api.py" not in identify
        assert "(in spanish)" in identify
        assert "1. API Router: Routes HTTP requests to handlers." in relate
        assert "**API Router**" in first
        assert "--- app/api.py ---" in first
        assert "Widget Model" in first
        assert "class Widget:" in second

    async def test_chapters_are_generated_one_at_a_time(
        self, sample_raw_files, abstractions_reply, relationships_reply
    ):
        class TrackingLLM(ScriptedLLM):
            in_flight = 0
            peak = 0

            async def generate(self, prompt, max_tokens=None):
                TrackingLLM.in_flight += 1
                TrackingLLM.peak = max(TrackingLLM.peak, TrackingLLM.in_flight)
                await asyncio.sleep(0)
                try:
                    return await super().generate(prompt, max_tokens)
                finally:
                    TrackingLLM.in_flight -= 1

        llm = TrackingLLM([abstractions_reply, relationships_reply, CHAPTER_ONE, CHAPTER_TWO])
        await TutorialEngine(llm).run(sample_raw_files, "widgets")
        assert TrackingLLM.peak == 1

    async def test_unparseable_relationships_do_not_abort(
        self, sample_raw_files, abstractions_reply
    ):
        llm = ScriptedLLM([abstractions_reply, "I'd rather not.", CHAPTER_ONE, CHAPTER_TWO])
        result = await TutorialEngine(llm).run(sample_raw_files, "widgets")
        assert result.summary == ""
        assert result.relationships == []
        assert len(result.chapters) == 2

    async def test_identification_failure_aborts_before_chapters(self, sample_raw_files):
        llm = ScriptedLLM(["no json here"])
        with pytest.raises(GenerationFailedError):
            await TutorialEngine(llm).run(sample_raw_files, "widgets")
        assert len(llm.prompts) == 1

    async def test_empty_repository_still_produces_a_tutorial(self):
        llm = ScriptedLLM(['[{"name": "A", "files": ["missing.py"]}]', "[]", "# A\n\nNothing here."])
        result = await TutorialEngine(llm).run([], "empty")

        assert [(c.title, c.filename) for c in result.chapters] == [("A", "01_a.md")]
        assert result.stats.total_files == 0
        assert result.stats.filtered_files == 0
        assert result.framework is None
        assert len(llm.prompts) == 3


# ── identify_abstractions ───────────────────────────────────────────


class TestIdentifyAbstractions:
    async def _identify(self, codebase, reply, config=None):
        engine = TutorialEngine(ScriptedLLM([reply]), config)
        return await engine.identify_abstractions(codebase, "widgets", "english")

    async def test_empty_list_fails(self, codebase):
        with pytest.raises(GenerationFailedError):
            await self._identify(codebase, "[]")

    async def test_non_list_fails(self, codebase):
        with pytest.raises(GenerationFailedError):
            await self._identify(codebase, '{"answer": 42}')

    async def test_all_invalid_fails(self, codebase):
        with pytest.raises(GenerationFailedError):
            await self._identify(codebase, '[{"name": "   "}, {"description": "no name"}]')

    async def test_accepts_wrapped_list(self, codebase):
        reply = json.dumps({"abstractions": [{"name": "Router", "files": "main.py, app/api.py"}]})
        (abstraction,) = await self._identify(codebase, reply)
        assert abstraction.name == "Router"
        assert abstraction.files == ["main.py", "app/api.py"]

    async def test_skips_invalid_and_duplicate_items(self, codebase):
        reply = json.dumps(
            [
                {"name": "Router", "description": "a"},
                {"name": "", "description": "b"},
                "not an object",
                {"name": "Router", "description": "dup"},
                {"name": " Store ", "keyCode": "x = 1"},
            ]
        )
        abstractions = await self._identify(codebase, reply)
        assert [a.name for a in abstractions] == ["Router", "Store"]
        assert abstractions[1].key_code == "x = 1"

    async def test_caps_at_max_abstractions(self, codebase):
        reply = json.dumps([{"name": f"Concept {i}"} for i in range(10)])
        abstractions = await self._identify(codebase, reply, GenerationConfig(max_abstractions=8))
        assert len(abstractions) == 8
        assert abstractions[-1].name == "Concept 7"

    async def test_null_description_is_kept_as_empty(self, codebase):
        reply = json.dumps([{"name": "Router", "description": None, "files": None}])
        (abstraction,) = await self._identify(codebase, reply)
        assert abstraction.description == ""
        assert abstraction.files == []


# ── analyze_relationships ───────────────────────────────────────────


class TestAnalyzeRelationships:
    async def _analyze(self, reply):
        abstractions = [Abstraction(name="A"), Abstraction(name="B")]
        engine = TutorialEngine(ScriptedLLM([reply]))
        return await engine.analyze_relationships(abstractions, "p", "english")

    async def test_bare_list_is_relationships(self):
        analysis = await self._analyze('[{"from": "A", "to": "B", "label": "uses"}]')
        assert analysis.summary == ""
        assert [(r.from_, r.to, r.label) for r in analysis.relationships] == [("A", "B", "uses")]

    async def test_invalid_items_skipped_and_unknown_names_kept(self):
        reply = json.dumps(
            {
                "summary": "s",
                "relationships": [
                    {"from": "A"},
                    {"from": "A", "to": "Ghost", "label": "haunts"},
                    {"from": "B", "to": "B"},
                ],
            }
        )
        analysis = await self._analyze(reply)
        assert [(r.from_, r.to) for r in analysis.relationships] == [("A", "Ghost"), ("B", "B")]

    async def test_wrong_shape_yields_empty_analysis(self):
        analysis = await self._analyze('"just a string"')
        assert analysis.relationships == []

    async def test_null_label_is_kept_as_empty(self):
        analysis = await self._analyze('[{"from": "A", "to": "B", "label": null}]')
        assert [(r.from_, r.to, r.label) for r in analysis.relationships] == [("A", "B", "")]


# ── chapters and file resolution ────────────────────────────────────


class TestChapters:
    def test_chapter_filename(self):
        assert chapter_filename(1, "API Router") == "01_api_router.md"
        assert chapter_filename(12, "Ünïcode & Co.") == "12__n_code___co_.md"

    def test_unresolvable_files_fall_back_to_top_three(self, codebase):
        abstraction = Abstraction(name="Ghost", files=["does/not/exist.xyz"])
        files = resolve_files(abstraction, codebase, fallback=3)
        assert [f.path for f in files] == ["main.py", "app/api.py", "app/models.py"]

    def test_resolution_strategies(self, codebase):
        abstraction = Abstraction(
            name="Mixed",
            files=["./app/api.py", "models.py", "src/app/utils.py", "app/api.py"],
        )
        files = resolve_files(abstraction, codebase)
        assert [f.path for f in files] == ["app/api.py", "app/models.py", "app/utils.py"]

    def test_resolution_respects_limit(self, codebase):
        abstraction = Abstraction(name="All", files=["main.py", "app/api.py", "app/models.py"])
        assert len(resolve_files(abstraction, codebase, limit=2)) == 2

    async def test_chapter_uses_fallback_context_and_cleans_markdown(self, codebase):
        llm = ScriptedLLM(["<think>plan</think>\r\n# Ghost\r\n\r\n```py\nprint(1)\n```\r\n"])
        engine = TutorialEngine(llm)
        ghost = Abstraction(name="Ghost", files=["nowhere.rs"])
        chapter = await engine.generate_chapter(codebase, ghost, 3, [ghost], "widgets", "english")

        assert chapter.title == "Ghost"
        assert chapter.filename == "03_ghost.md"
        assert chapter.content == "# Ghost\n\n```python\nprint(1)\n```\n"
        assert "--- main.py ---" in llm.prompts[0]
        assert "Related Concepts\nnone" in llm.prompts[0]
