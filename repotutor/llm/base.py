"""Abstract LLM interface for repotutor."""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from typing import Any

from repotutor.errors import MalformedGenerationError, MissingCredentialError
from repotutor.llm.extract import extract_json
from repotutor.llm.models import LLMConfig, LLMResponse

logger = logging.getLogger(__name__)

STRUCTURED_SUFFIX = (
    "\n\nIMPORTANT: Return ONLY a valid JSON object (or array) matching this schema: "
    "{schema}. Do not include Markdown formatting or explanations."
)


class LLMProvider(ABC):
    """Provider-agnostic interface for tutorial generation.

    Adapters only implement ``generate``; plain-text and structured calls
    are built on top of it so every backend parses replies identically.
    Construction never touches the network or validates credentials.
    """

    def __init__(self, config: LLMConfig) -> None:
        self.config = config

    @property
    def name(self) -> str:
        return self.config.provider

    @property
    def model(self) -> str:
        return self.config.model

    @abstractmethod
    async def generate(self, prompt: str, max_tokens: int | None = None) -> LLMResponse:
        """Send ``prompt`` as a single user message and return the reply."""
        ...

    async def generate_text(self, prompt: str) -> str:
        response = await self.generate(prompt)
        logger.debug(
            "%s/%s: %d input tokens, %d output tokens",
            self.name,
            self.model,
            response.usage.input_tokens,
            response.usage.output_tokens,
        )
        return response.content

    async def generate_structured(self, prompt: str, schema_hint: Any) -> Any:
        """Request JSON-only output and parse it.

        Raises:
            MalformedGenerationError: if the reply holds no parseable JSON.
        """
        hint = schema_hint if isinstance(schema_hint, str) else json.dumps(schema_hint)
        raw = await self.generate_text(prompt + STRUCTURED_SUFFIX.format(schema=hint))
        try:
            return extract_json(raw)
        except MalformedGenerationError:
            logger.warning(
                "Unparseable structured reply from %s/%s: %.300r", self.name, self.model, raw
            )
            raise

    def _require_api_key(self) -> str:
        """Return the configured key or fail with a typed configuration error."""
        if not self.config.api_key:
            raise MissingCredentialError(self.config.provider, self.config.api_key_env)
        return self.config.api_key

    def _max_tokens(self, max_tokens: int | None) -> int:
        return max_tokens or self.config.max_tokens
