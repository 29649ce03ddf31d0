"""Tests for the repotutor CLI commands."""

from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest
from typer.testing import CliRunner

from repotutor.cli import app
from repotutor.errors import InvalidLocatorError, UpstreamUnavailableError
from repotutor.tutorial import Chapter, TutorialResult
from repotutor.vcs.models import RawFile

runner = CliRunner()


@pytest.fixture(autouse=True)
def isolated_cwd(tmp_path, monkeypatch):
    """Run every command in an empty directory with no user-global config."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr("pathlib.Path.home", lambda: tmp_path / "home")
    return tmp_path


def _result():
    return TutorialResult(
        project_name="widgets",
        framework="fastapi",
        chapters=[
            Chapter(title="Router", content="# Router\n\nIt routes.\n", filename="01_router.md"),
            Chapter(title="Store", content="# Store\n", filename="02_store.md"),
        ],
        provider="openrouter",
        model="deepseek/deepseek-r1:free",
    )


# ---------------------------------------------------------------------------
# generate
# ---------------------------------------------------------------------------


class TestGenerate:
    def test_writes_chapters(self, isolated_cwd):
        mock_generate = AsyncMock(return_value=_result())
        with patch("repotutor.cli.generate_tutorial", mock_generate):
            result = runner.invoke(
                app, ["generate", "https://github.com/acme/widgets", "--output", "out"]
            )

        assert result.exit_code == 0, result.output
        assert "Tutorial Complete" in result.output
        assert (isolated_cwd / "out" / "widgets" / "01_router.md").read_text() == (
            "# Router\n\nIt routes.\n"
        )
        assert (isolated_cwd / "out" / "widgets" / "tutorial.yaml").exists()
        args = mock_generate.call_args.args
        assert args == ("https://github.com/acme/widgets", "widgets", None, None, None)

    def test_overrides_forwarded(self):
        mock_generate = AsyncMock(return_value=_result())
        with patch("repotutor.cli.generate_tutorial", mock_generate):
            result = runner.invoke(
                app,
                [
                    "generate",
                    "github.com/acme/widgets.git",
                    "--name",
                    "Widgets",
                    "--language",
                    "german",
                    "--provider",
                    "anthropic",
                    "--model",
                    "claude-sonnet-4",
                    "--dry-run",
                ],
            )
        assert result.exit_code == 0, result.output
        assert mock_generate.call_args.args == (
            "github.com/acme/widgets.git",
            "Widgets",
            "german",
            "anthropic",
            "claude-sonnet-4",
        )

    def test_dry_run_writes_nothing(self, isolated_cwd):
        with patch("repotutor.cli.generate_tutorial", AsyncMock(return_value=_result())):
            result = runner.invoke(app, ["generate", "github.com/acme/widgets", "--dry-run"])
        assert result.exit_code == 0, result.output
        assert "It routes." in result.output
        assert not (isolated_cwd / "tutorials").exists()

    def test_failure_exits_nonzero(self):
        mock_generate = AsyncMock(side_effect=InvalidLocatorError("nope"))
        with patch("repotutor.cli.generate_tutorial", mock_generate):
            result = runner.invoke(app, ["generate", "nope"])
        assert result.exit_code == 1
        assert "Generation failed" in result.output

    def test_unreachable_host_exits_nonzero(self):
        mock_generate = AsyncMock(side_effect=UpstreamUnavailableError(0, "ConnectError: boom"))
        with patch("repotutor.cli.generate_tutorial", mock_generate):
            result = runner.invoke(app, ["generate", "github.com/acme/widgets"])
        assert result.exit_code == 1
        assert "Generation failed" in result.output


# ---------------------------------------------------------------------------
# digest
# ---------------------------------------------------------------------------


class TestDigest:
    def test_writes_digest_file(self, isolated_cwd):
        files = [
            RawFile(path="main.go", content="package main\nfunc main() {}\n"),
            RawFile(path="go.mod", content="module example.com/widgets\n"),
        ]
        with patch("repotutor.cli.fetch_repository", AsyncMock(return_value=files)):
            result = runner.invoke(
                app, ["digest", "github.com/acme/widgets", "--output", "digest.md"]
            )
        assert result.exit_code == 0, result.output
        assert "Tiers" in result.output
        text = (isolated_cwd / "digest.md").read_text()
        assert text.startswith("# Codebase Analysis")
        assert "## [ENTRY] main.go" in text
        assert "## [CONFIG] go.mod" in text

    def test_fetch_failure_exits_nonzero(self):
        mock_fetch = AsyncMock(side_effect=InvalidLocatorError("nope"))
        with patch("repotutor.cli.fetch_repository", mock_fetch):
            result = runner.invoke(app, ["digest", "nope"])
        assert result.exit_code == 1
        assert "Fetch failed" in result.output

    def test_unreachable_host_exits_nonzero(self):
        mock_fetch = AsyncMock(side_effect=UpstreamUnavailableError(0, "ConnectError: boom"))
        with patch("repotutor.cli.fetch_repository", mock_fetch):
            result = runner.invoke(app, ["digest", "github.com/acme/widgets"])
        assert result.exit_code == 1
        assert "Fetch failed" in result.output
        assert "boom" in result.output


# ---------------------------------------------------------------------------
# models
# ---------------------------------------------------------------------------


class TestModels:
    def test_lists_free_models_without_network(self):
        with patch("repotutor.cli.create_llm_provider") as mock_create:
            result = runner.invoke(app, ["models"])
        assert result.exit_code == 0, result.output
        assert "meta-llama/llama-3.3-70b-instruct:free" in result.output
        mock_create.assert_not_called()

    def test_check_reports_model_count(self, monkeypatch):
        monkeypatch.setenv("OPENROUTER_API_KEY", "or-key")
        mock_list = AsyncMock(return_value=["openai/gpt-4o", "deepseek/deepseek-r1:free"])
        with patch("repotutor.cli.OpenAIProvider.list_models", mock_list):
            result = runner.invoke(app, ["models", "--check"])
        assert result.exit_code == 0, result.output
        assert "Connection OK" in result.output
        assert "2 available" in result.output
        mock_list.assert_awaited_once()

    def test_check_without_key_fails(self, monkeypatch):
        monkeypatch.delenv("OPENROUTER_API_KEY", raising=False)
        result = runner.invoke(app, ["models", "--check"])
        assert result.exit_code == 1
        assert "Check failed" in result.output

    def test_check_rejects_non_openai_compatible_provider(self):
        result = runner.invoke(app, ["models", "--check", "--provider", "anthropic"])
        assert result.exit_code == 1
        assert "not supported" in result.output


# ---------------------------------------------------------------------------
# config
# ---------------------------------------------------------------------------


class TestConfigCommands:
    def test_init_creates_file(self, isolated_cwd):
        result = runner.invoke(app, ["config", "init"])
        assert result.exit_code == 0
        assert (isolated_cwd / "repotutor.yaml").exists()

    def test_init_refuses_to_overwrite(self, isolated_cwd):
        (isolated_cwd / "repotutor.yaml").write_text("llm:\n  provider: openai\n")
        result = runner.invoke(app, ["config", "init"])
        assert result.exit_code == 1
        assert "already exists" in result.output

        result = runner.invoke(app, ["config", "init", "--force"])
        assert result.exit_code == 0
        assert "openrouter" in (isolated_cwd / "repotutor.yaml").read_text()

    def test_show_uses_cli_config_path(self, isolated_cwd):
        cfg = isolated_cwd / "custom.yaml"
        cfg.write_text("llm:\n  provider: ollama\n  model: llama3\n")
        result = runner.invoke(app, ["--config", str(cfg), "config", "show"])
        assert result.exit_code == 0, result.output
        assert "llama3" in result.output

    def test_missing_config_file_exits(self):
        result = runner.invoke(app, ["-c", str(Path("missing.yaml")), "config", "show"])
        assert result.exit_code == 1
        assert "not found" in result.output
