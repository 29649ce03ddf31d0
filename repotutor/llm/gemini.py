"""Google Gemini adapter for repotutor."""

from __future__ import annotations

from functools import cached_property

import google.generativeai as genai
from google.api_core import exceptions as google_exceptions

from repotutor.llm.base import LLMProvider
from repotutor.llm.models import LLMError, LLMResponse, TokenUsage


class GeminiProvider(LLMProvider):
    """Gemini adapter using the google-generativeai async SDK."""

    @cached_property
    def _model(self) -> genai.GenerativeModel:
        genai.configure(api_key=self._require_api_key())
        return genai.GenerativeModel(self.config.model)

    async def generate(self, prompt: str, max_tokens: int | None = None) -> LLMResponse:
        model = self._model
        try:
            response = await model.generate_content_async(
                prompt,
                generation_config=genai.types.GenerationConfig(
                    max_output_tokens=self._max_tokens(max_tokens),
                    temperature=self.config.temperature,
                ),
            )
        except google_exceptions.GoogleAPIError as e:
            raise LLMError(
                "gemini",
                "generate",
                e,
                retryable=isinstance(e, google_exceptions.ResourceExhausted),
            ) from e

        if not response.text:
            raise ValueError("No text content in Gemini response")
        usage = response.usage_metadata
        return LLMResponse(
            content=response.text,
            usage=TokenUsage(
                input_tokens=usage.prompt_token_count,
                output_tokens=usage.candidates_token_count,
            ),
            model=self.config.model,
        )
