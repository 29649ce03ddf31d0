"""Shared test fixtures for repotutor."""

import json
import logging

import pytest

from repotutor.config.models import GenerationConfig, TutorConfig
from repotutor.llm.base import LLMProvider
from repotutor.llm.models import LLMConfig, LLMResponse, TokenUsage
from repotutor.vcs.models import RawFile


class ScriptedLLM(LLMProvider):
    """Provider double that answers from a fixed list of replies, in order."""

    def __init__(self, replies: list[str], provider: str = "openrouter", model: str = "test-model"):
        super().__init__(LLMConfig(provider=provider, model=model, api_key="test-key"))
        self.replies = list(replies)
        self.prompts: list[str] = []

    async def generate(self, prompt: str, max_tokens: int | None = None) -> LLMResponse:
        self.prompts.append(prompt)
        if not self.replies:
            raise AssertionError("ScriptedLLM ran out of replies")
        return LLMResponse(
            content=self.replies.pop(0),
            usage=TokenUsage(input_tokens=len(prompt) // 4, output_tokens=10),
            model=self.config.model,
        )


def _lines(n: int, text: str = "x = 1") -> str:
    return "\n".join(f"{text}  # line {i}" for i in range(n))


@pytest.fixture(autouse=True)
def _reset_package_logger():
    """CLI tests configure the package logger; undo it so caplog keeps working."""
    yield
    logger = logging.getLogger("repotutor")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def sample_raw_files():
    """A small FastAPI service plus the usual non-source clutter."""
    return [
        RawFile(path="main.py", content="from app.api import router\n" + _lines(40)),
        RawFile(
            path="app/api.py",
            content="from fastapi import APIRouter\nrouter = APIRouter()\n" + _lines(200),
        ),
        RawFile(path="app/models.py", content="class Widget:\n    pass\n" + _lines(60)),
        RawFile(path="app/utils.py", content="def slugify(s):\n    return s\n"),
        RawFile(path="tests/test_api.py", content="def test_ok():\n    assert True\n"),
        RawFile(
            path="pyproject.toml",
            content='[project]\nname = "widgets"\ndependencies = [\n  "fastapi>=0.110",\n]\n',
        ),
        RawFile(path="README.md", content="# Widgets\nA widget service.\n"),
        RawFile(path="poetry.lock", content="# lock\n"),
        RawFile(path="docs/logo.png", content="PNG"),
    ]


@pytest.fixture
def abstractions_reply():
    return json.dumps(
        [
            {
                "name": "API Router",
                "description": "Routes HTTP requests to handlers.",
                "files": ["app/api.py", "main.py"],
            },
            {
                "name": "Widget Model",
                "description": "The domain object.",
                "files": ["app/models.py"],
                "keyCode": "class Widget:",
            },
        ]
    )


@pytest.fixture
def relationships_reply():
    return json.dumps(
        {
            "summary": "A small service that serves widgets over HTTP.",
            "relationships": [{"from": "API Router", "to": "Widget Model", "label": "Returns"}],
        }
    )


@pytest.fixture
def scripted_llm():
    return ScriptedLLM


@pytest.fixture
def generation_config():
    return GenerationConfig()


@pytest.fixture
def sample_config(tmp_path):
    cfg = TutorConfig()
    return cfg.model_copy(
        update={"output": cfg.output.model_copy(update={"base_dir": str(tmp_path / "out")})}
    )
