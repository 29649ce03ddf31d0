"""Tests for the output subsystem: tutorial writer and index."""

import pytest
import yaml
from pydantic import ValidationError

from repotutor.config.models import OutputConfig
from repotutor.output import TutorialWriter, build_index
from repotutor.output.writer import INDEX_FILENAME, _sanitize_project_name
from repotutor.tutorial import Abstraction, Chapter, Relationship, TutorialResult


def _result(project_name="Widgets API"):
    return TutorialResult(
        project_name=project_name,
        framework="fastapi",
        abstractions=[Abstraction(name="Router", files=["main.py"]), Abstraction(name="Store")],
        relationships=[Relationship(**{"from": "Router", "to": "Store", "label": "reads"})],
        summary="Serves widgets.",
        chapters=[
            Chapter(title="Router", content="# Router\n", filename="01_router.md"),
            Chapter(title="Store", content="# Store\n", filename="02_store.md"),
        ],
        provider="openrouter",
        model="deepseek/deepseek-r1:free",
    )


# ---------------------------------------------------------------------------
# _sanitize_project_name
# ---------------------------------------------------------------------------


class TestSanitizeProjectName:
    def test_spaces_become_underscores(self):
        assert _sanitize_project_name("Widgets API") == "widgets_api"

    def test_strips_dot_dot(self):
        assert ".." not in _sanitize_project_name("../../etc/passwd")

    def test_removes_unsafe_chars(self):
        result = _sanitize_project_name("my<repo>:name")
        assert "<" not in result and ":" not in result

    def test_empty_becomes_unnamed(self):
        assert _sanitize_project_name("") == "_unnamed"
        assert _sanitize_project_name("...") == "_unnamed"


# ---------------------------------------------------------------------------
# TutorialWriter
# ---------------------------------------------------------------------------


class TestTutorialWriter:
    def test_writes_chapters_in_order(self, tmp_path):
        writer = TutorialWriter(OutputConfig(base_dir=str(tmp_path)))
        paths = writer.write(_result())

        assert [p.name for p in paths] == ["01_router.md", "02_store.md"]
        assert paths[0].parent == tmp_path / "widgets_api"
        assert paths[0].read_text() == "# Router\n"

    def test_index_written(self, tmp_path):
        writer = TutorialWriter(OutputConfig(base_dir=str(tmp_path)))
        writer.write(_result())
        index = yaml.safe_load((tmp_path / "widgets_api" / INDEX_FILENAME).read_text())

        assert index["project_name"] == "Widgets API"
        assert index["relationships"] == [{"from": "Router", "to": "Store", "label": "reads"}]
        assert [c["ordinal"] for c in index["chapters"]] == [1, 2]

    def test_index_optional(self, tmp_path):
        writer = TutorialWriter(OutputConfig(base_dir=str(tmp_path), create_index=False))
        writer.write(_result())
        assert not (tmp_path / "widgets_api" / INDEX_FILENAME).exists()

    def test_dry_run_writes_nothing(self, tmp_path):
        writer = TutorialWriter(OutputConfig(base_dir=str(tmp_path / "out")))
        paths = writer.write(_result(), dry_run=True)
        assert len(paths) == 2
        assert not (tmp_path / "out").exists()


def test_build_index_uses_wire_names():
    index = build_index(_result())
    assert index["abstractions"][0] == {
        "name": "Router",
        "description": "",
        "files": ["main.py"],
        "keyCode": None,
    }
    assert index["framework"] == "fastapi"
    assert "generated_at" in index


def test_result_is_immutable():
    result = _result()
    with pytest.raises(ValidationError):
        result.summary = "changed"
