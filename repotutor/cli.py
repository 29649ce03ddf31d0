"""CLI entry point for repotutor."""

from __future__ import annotations

import asyncio
import os
from pathlib import Path
from typing import Annotated

import typer
import yaml
from rich import print as rprint
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table

from repotutor.classifier import FilteredCodebase, SmartFilter, estimate_tokens
from repotutor.config import TutorConfig, load_config
from repotutor.config.loader import DEFAULT_CONFIG_TEMPLATE
from repotutor.errors import TutorError
from repotutor.llm import LLMError, OpenAIProvider, create_llm_provider
from repotutor.llm.openrouter import FREE_MODELS
from repotutor.log import configure_logging
from repotutor.output import TutorialWriter
from repotutor.pipeline import generate_tutorial, resolve_llm_settings
from repotutor.tutorial import TutorialResult
from repotutor.vcs import fetch_repository

app = typer.Typer(
    name="repotutor",
    help="Turn a GitHub repository into a multi-chapter tutorial.",
)

config_app = typer.Typer(help="Manage repotutor configuration.")
app.add_typer(config_app, name="config")

# Global state
_config: TutorConfig | None = None


def _get_config() -> TutorConfig:
    if _config is None:
        return load_config()
    return _config


@app.callback()
def main(
    config: Annotated[
        str | None, typer.Option("--config", "-c", help="Path to repotutor.yaml")
    ] = None,
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Enable debug logging")
    ] = False,
) -> None:
    """Global options."""
    global _config
    try:
        _config = load_config(config)
    except TutorError as e:
        rprint(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    configure_logging("debug" if verbose else _config.log_level, _config.log_format)


def _project_name_from(source: str) -> str:
    """Default project label: the repository name."""
    return source.rstrip("/").rsplit("/", 1)[-1].removesuffix(".git") or "Project"


def _display_stats(codebase: FilteredCodebase) -> None:
    stats = codebase.stats
    langs = ", ".join(
        f"{lang} ({n})"
        for lang, n in sorted(stats.languages.items(), key=lambda kv: kv[1], reverse=True)
    )
    rprint(
        Panel(
            f"[dim]Framework:[/dim]  {stats.framework or 'unknown'}\n"
            f"[dim]Files:[/dim]      {stats.filtered_files} kept of {stats.total_files}\n"
            f"[dim]Size:[/dim]       {stats.total_size} chars\n"
            f"[dim]Languages:[/dim]  {langs or '-'}",
            title="Codebase",
            border_style="blue",
        )
    )
    table = Table(title="Tiers")
    table.add_column("Tier", style="cyan")
    table.add_column("Files", justify="right")
    table.add_column("Largest", style="green")
    for label, bucket in [
        ("entry points", codebase.entry_points),
        ("core", codebase.core_files),
        ("secondary", codebase.secondary_files),
        ("test", codebase.test_files),
        ("config", codebase.config_files),
    ]:
        table.add_row(label, str(len(bucket)), bucket[0].path if bucket else "-")
    rprint(table)


def _display_result(result: TutorialResult) -> None:
    table = Table(title=f"{result.project_name}: {len(result.chapters)} chapters")
    table.add_column("#", justify="right")
    table.add_column("Chapter", style="cyan")
    table.add_column("File", style="green")
    table.add_column("Size", justify="right")
    for i, chapter in enumerate(result.chapters, start=1):
        table.add_row(str(i), chapter.title, chapter.filename, f"{len(chapter.content)} chars")
    rprint(table)
    if result.relationships:
        rprint(f"[dim]Relationships:[/dim] {len(result.relationships)}")


@app.command()
def generate(
    source: str = typer.Argument(..., help="Repository URL, e.g. https://github.com/owner/repo"),
    name: Annotated[
        str | None, typer.Option("--name", "-n", help="Project name (default: repo name)")
    ] = None,
    language: Annotated[
        str | None, typer.Option("--language", "-l", help="Output language")
    ] = None,
    provider: Annotated[
        str | None, typer.Option("--provider", "-p", help="LLM provider override")
    ] = None,
    model: Annotated[str | None, typer.Option("--model", "-m", help="Model override")] = None,
    output: Annotated[
        str | None, typer.Option("--output", "-o", help="Override output directory")
    ] = None,
    dry_run: bool = typer.Option(False, "--dry-run", help="Preview without writing"),
) -> None:
    """Generate a tutorial for a repository."""
    cfg = _get_config()
    project = name or _project_name_from(source)
    rprint(
        f"[bold]Generating[/bold] tutorial for {source} "
        f"(llm: {provider or cfg.llm.provider}/{model or cfg.llm.model})..."
    )

    try:
        result = asyncio.run(
            generate_tutorial(source, project, language, provider, model, config=cfg)
        )
    except (TutorError, LLMError, ValueError) as e:
        rprint(f"[red]Generation failed:[/red] {e}")
        raise typer.Exit(1)

    _display_result(result)

    if dry_run:
        for chapter in result.chapters:
            rprint(Syntax(chapter.content, "markdown", theme="monokai"))
        return

    out_cfg = cfg.output
    if output:
        out_cfg = out_cfg.model_copy(update={"base_dir": output})
    writer = TutorialWriter(out_cfg)
    paths = writer.write(result)
    rprint(
        Panel(
            f"[dim]Directory:[/dim]  {writer.output_dir(result)}\n"
            f"[dim]Chapters:[/dim]   {len(paths)}\n"
            f"[dim]Framework:[/dim]  {result.framework or 'unknown'}",
            title="Tutorial Complete",
            border_style="green",
        )
    )


@app.command()
def digest(
    source: str = typer.Argument(..., help="Repository URL, e.g. https://github.com/owner/repo"),
    max_tokens: Annotated[
        int | None, typer.Option("--max-tokens", help="Digest token budget")
    ] = None,
    output: Annotated[
        str | None, typer.Option("--output", "-o", help="Write the digest to a file")
    ] = None,
) -> None:
    """Fetch and classify a repository, then print its digest."""
    cfg = _get_config()
    credential = os.environ.get(cfg.fetch.token_env) or None

    try:
        files = asyncio.run(fetch_repository(source, credential=credential, config=cfg.fetch))
    except TutorError as e:
        rprint(f"[red]Fetch failed:[/red] {e}")
        raise typer.Exit(1)

    smart_filter = SmartFilter()
    codebase = smart_filter.classify(files)
    _display_stats(codebase)

    text = smart_filter.render(codebase, max_tokens or cfg.digest.max_tokens)
    if output:
        Path(output).write_text(text, encoding="utf-8")
        rprint(f"[green]Written to[/green] {output} (~{int(estimate_tokens(text))} tokens)")
    else:
        rprint(Syntax(text, "markdown", theme="monokai"))


@app.command()
def models(
    check: bool = typer.Option(False, "--check", help="Verify the API key with a live request"),
    provider: Annotated[
        str | None, typer.Option("--provider", "-p", help="LLM provider override")
    ] = None,
) -> None:
    """List free OpenRouter models and optionally check provider connectivity."""
    table = Table(title="Free OpenRouter models")
    table.add_column("Model", style="cyan")
    table.add_column("Description")
    for model_id, label in FREE_MODELS.items():
        table.add_row(model_id, label)
    rprint(table)

    if not check:
        return

    cfg = _get_config()
    try:
        llm = create_llm_provider(resolve_llm_settings(cfg.llm, provider))
    except ValueError as e:
        rprint(f"[red]Check failed:[/red] {e}")
        raise typer.Exit(1)
    if not isinstance(llm, OpenAIProvider):
        rprint(f"[red]Check failed:[/red] --check is not supported for {llm.name!r}")
        raise typer.Exit(1)

    try:
        available = asyncio.run(llm.list_models())
    except (TutorError, LLMError) as e:
        rprint(f"[red]Check failed:[/red] {e}")
        raise typer.Exit(1)

    sample = ", ".join(available[:5]) or "-"
    rprint(
        Panel(
            f"[dim]Provider:[/dim]  {llm.name}\n"
            f"[dim]Models:[/dim]    {len(available)} available\n"
            f"[dim]Sample:[/dim]    {sample}",
            title="Connection OK",
            border_style="green",
        )
    )


@config_app.command("show")
def config_show() -> None:
    """Show current resolved configuration."""
    cfg = _get_config()
    rprint(Syntax(yaml.dump(cfg.model_dump(), default_flow_style=False), "yaml"))


@config_app.command("init")
def config_init(
    force: bool = typer.Option(False, "--force", help="Overwrite existing config"),
) -> None:
    """Create default repotutor.yaml in current directory."""
    target = Path("repotutor.yaml")
    if target.exists() and not force:
        rprint("[yellow]repotutor.yaml already exists.[/yellow] Use --force to overwrite.")
        raise typer.Exit(1)
    target.write_text(DEFAULT_CONFIG_TEMPLATE)
    rprint(f"[green]Created[/green] {target}")
