"""Anthropic Claude adapter for repotutor."""

from __future__ import annotations

from functools import cached_property

from anthropic import APIError, AsyncAnthropic, RateLimitError

from repotutor.llm.base import LLMProvider
from repotutor.llm.models import LLMError, LLMResponse, TokenUsage


class ClaudeProvider(LLMProvider):
    """Claude adapter using the Anthropic async SDK."""

    @cached_property
    def _client(self) -> AsyncAnthropic:
        return AsyncAnthropic(
            api_key=self._require_api_key(),
            max_retries=2,
            timeout=self.config.timeout,
        )

    async def generate(self, prompt: str, max_tokens: int | None = None) -> LLMResponse:
        client = self._client
        try:
            message = await client.messages.create(
                model=self.config.model,
                max_tokens=self._max_tokens(max_tokens),
                temperature=self.config.temperature,
                messages=[{"role": "user", "content": prompt}],
            )
        except APIError as e:
            raise LLMError(
                "claude", "generate", e, retryable=isinstance(e, RateLimitError)
            ) from e

        text = "".join(
            block.text for block in message.content if getattr(block, "type", "") == "text"
        )
        if not text:
            raise LLMError(
                "claude", "generate", ValueError("No text content in Claude response")
            )
        return LLMResponse(
            content=text,
            usage=TokenUsage(
                input_tokens=message.usage.input_tokens,
                output_tokens=message.usage.output_tokens,
            ),
            model=message.model,
        )
