"""LLM provider abstraction layer."""

import os

from repotutor.config.models import LLMSettings
from repotutor.llm.base import LLMProvider
from repotutor.llm.claude import ClaudeProvider
from repotutor.llm.extract import extract_json, strip_reasoning
from repotutor.llm.gemini import GeminiProvider
from repotutor.llm.models import LLMConfig, LLMError, LLMResponse, TokenUsage
from repotutor.llm.ollama import OllamaProvider
from repotutor.llm.openai_adapter import OpenAIProvider
from repotutor.llm.openrouter import OpenRouterProvider

_PROVIDER_MAP: dict[str, type[LLMProvider]] = {
    "openrouter": OpenRouterProvider,
    "openai": OpenAIProvider,
    "anthropic": ClaudeProvider,
    "google": GeminiProvider,
    "ollama": OllamaProvider,
}

# Conventional key variable per provider, used when the provider is chosen
# at call time rather than in the config file.
DEFAULT_API_KEY_ENVS: dict[str, str] = {
    "openrouter": "OPENROUTER_API_KEY",
    "openai": "OPENAI_API_KEY",
    "anthropic": "ANTHROPIC_API_KEY",
    "google": "GEMINI_API_KEY",
    "ollama": "",
}


def create_llm_provider(settings: LLMSettings, api_key: str | None = None) -> LLMProvider:
    """Create an LLM provider from app-level settings.

    The key is taken from ``api_key`` or, failing that, from the environment
    variable named in ``settings.api_key_env``. A missing key is not an
    error here: the provider raises MissingCredentialError on its first call.
    """
    cls = _PROVIDER_MAP.get(settings.provider)
    if cls is None:
        raise ValueError(
            f"Unsupported LLM provider: {settings.provider!r}. "
            f"Supported: {', '.join(_PROVIDER_MAP)}"
        )

    if api_key is None and settings.provider != "ollama":
        api_key = os.environ.get(settings.api_key_env) or None

    llm_config = LLMConfig(
        provider=settings.provider,
        model=settings.model,
        max_tokens=settings.max_tokens,
        temperature=settings.temperature,
        api_key=api_key,
        api_key_env=settings.api_key_env,
        base_url=settings.base_url,
        timeout=settings.timeout,
    )
    return cls(llm_config)


__all__ = [
    "DEFAULT_API_KEY_ENVS",
    "ClaudeProvider",
    "GeminiProvider",
    "LLMConfig",
    "LLMError",
    "LLMProvider",
    "LLMResponse",
    "OllamaProvider",
    "OpenAIProvider",
    "OpenRouterProvider",
    "TokenUsage",
    "create_llm_provider",
    "extract_json",
    "strip_reasoning",
]
