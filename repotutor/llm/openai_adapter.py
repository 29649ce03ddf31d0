"""OpenAI adapter for repotutor."""

from __future__ import annotations

from functools import cached_property

from openai import APIError, AsyncOpenAI, RateLimitError

from repotutor.llm.base import LLMProvider
from repotutor.llm.models import LLMError, LLMResponse, TokenUsage


class OpenAIProvider(LLMProvider):
    """OpenAI chat-completions adapter using the async SDK.

    The SDK client is created on first use so that a missing key surfaces
    as MissingCredentialError at call time.
    """

    error_label = "openai"

    def _client_kwargs(self) -> dict:
        kwargs: dict = {
            "api_key": self._require_api_key(),
            "max_retries": 2,
            "timeout": self.config.timeout,
        }
        if self.config.base_url:
            kwargs["base_url"] = self.config.base_url
        return kwargs

    @cached_property
    def _client(self) -> AsyncOpenAI:
        return AsyncOpenAI(**self._client_kwargs())

    async def generate(self, prompt: str, max_tokens: int | None = None) -> LLMResponse:
        client = self._client
        try:
            response = await client.chat.completions.create(
                model=self.config.model,
                max_tokens=self._max_tokens(max_tokens),
                temperature=self.config.temperature,
                messages=[{"role": "user", "content": prompt}],
            )
        except APIError as e:
            raise LLMError(
                self.error_label, "generate", e, retryable=isinstance(e, RateLimitError)
            ) from e

        if not response.choices:
            raise LLMError(
                self.error_label, "generate", ValueError("No choices in response")
            )
        usage = response.usage
        return LLMResponse(
            content=response.choices[0].message.content or "",
            usage=TokenUsage(
                input_tokens=usage.prompt_tokens if usage else 0,
                output_tokens=usage.completion_tokens if usage else 0,
            ),
            model=response.model or self.config.model,
        )

    async def list_models(self) -> list[str]:
        """Model ids served by the endpoint. Fails if the key is rejected."""
        client = self._client
        try:
            page = await client.models.list()
        except APIError as e:
            raise LLMError(
                self.error_label, "list_models", e, retryable=isinstance(e, RateLimitError)
            ) from e
        return [m.id for m in page.data]
