"""Pydantic models for the LLM subsystem."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel

ProviderName = Literal["openrouter", "openai", "anthropic", "google", "ollama"]


class LLMError(Exception):
    """Wraps provider-specific exceptions with context."""

    def __init__(
        self, provider: str, operation: str, cause: Exception, retryable: bool = False
    ) -> None:
        self.provider = provider
        self.operation = operation
        self.retryable = retryable
        super().__init__(f"{provider} {operation} failed: {cause}")
        self.__cause__ = cause


class LLMConfig(BaseModel):
    """Configuration for an LLM provider.

    ``api_key`` is resolved by the caller; ``api_key_env`` is only used to
    word the error raised when the key is missing.
    """

    provider: ProviderName
    model: str
    max_tokens: int = 4096
    temperature: float = 0.7
    api_key: str | None = None
    api_key_env: str | None = None
    base_url: str | None = None
    timeout: float = 120.0


class TokenUsage(BaseModel):
    """Token usage stats from a single LLM call."""

    input_tokens: int = 0
    output_tokens: int = 0


class LLMResponse(BaseModel):
    """Structured response from an LLM provider."""

    content: str
    usage: TokenUsage
    model: str
