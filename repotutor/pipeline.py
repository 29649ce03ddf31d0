"""End-to-end entry point: repository locator in, TutorialResult out."""

from __future__ import annotations

import os

import httpx

from repotutor.config.models import LLMSettings, TutorConfig
from repotutor.llm import DEFAULT_API_KEY_ENVS, LLMProvider, create_llm_provider
from repotutor.tutorial import TutorialEngine, TutorialResult
from repotutor.vcs import fetch_repository


def resolve_llm_settings(
    base: LLMSettings, provider: str | None = None, model: str | None = None
) -> LLMSettings:
    """Apply per-call provider/model overrides to the configured settings.

    Switching provider also switches to that provider's conventional key
    variable, since the configured one belongs to the old provider.
    """
    updates: dict = {}
    if provider and provider != base.provider:
        updates["provider"] = provider
        updates["api_key_env"] = DEFAULT_API_KEY_ENVS.get(provider, base.api_key_env)
    if model:
        updates["model"] = model
    return base.model_copy(update=updates) if updates else base


async def generate_tutorial(
    source: str,
    project_name: str,
    language: str | None = None,
    provider: str | None = None,
    model: str | None = None,
    *,
    config: TutorConfig | None = None,
    credential: str | None = None,
    llm: LLMProvider | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> TutorialResult:
    """Fetch, classify and narrate a repository.

    Every call builds its own fetcher, engine and provider; nothing is
    shared between concurrent runs. Either a complete result is returned
    or the first fatal error propagates.

    Args:
        source: Repository locator, e.g. ``https://github.com/owner/repo``.
        project_name: Label used in prompts and in the result.
        language: Output language for names, descriptions and chapters.
        provider: LLM provider id overriding the configured one.
        model: Model id overriding the configured one.
        config: Full configuration; defaults apply when omitted.
        credential: Code-host token; read from ``fetch.token_env`` when omitted.
        llm: Pre-built provider, bypassing provider/model resolution.
        transport: Optional httpx transport for the code-host client.
    """
    config = config or TutorConfig()
    if credential is None:
        credential = os.environ.get(config.fetch.token_env) or None

    if llm is None:
        settings = resolve_llm_settings(config.llm, provider, model)
        llm = create_llm_provider(settings)

    files = await fetch_repository(
        source, credential=credential, config=config.fetch, transport=transport
    )
    engine = TutorialEngine(llm, config.generation)
    return await engine.run(files, project_name, language or config.generation.language)
