"""Ollama adapter for repotutor."""

from __future__ import annotations

import logging
from urllib.parse import urlparse

import httpx

from repotutor.llm.base import LLMProvider
from repotutor.llm.models import LLMConfig, LLMError, LLMResponse, TokenUsage

logger = logging.getLogger(__name__)

_DEFAULT_BASE_URL = "http://localhost:11434"
_LOCAL_HOSTS = frozenset({"localhost", "127.0.0.1", "::1", "0.0.0.0"})


def _validate_base_url(url: str) -> str:
    """Reject non-http(s) or header-splitting URLs; warn when the host is not local."""
    if "\r" in url or "\n" in url:
        raise ValueError("Ollama base_url must not contain line breaks")
    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https"):
        raise ValueError(f"Ollama base_url must be http(s), got {parsed.scheme!r}")
    if parsed.hostname not in _LOCAL_HOSTS:
        logger.warning(
            "Ollama host %s is not local; prompts and source code will leave this machine",
            parsed.hostname,
        )
    return url


class OllamaProvider(LLMProvider):
    """Ollama adapter using its REST chat API via httpx. Needs no API key."""

    def __init__(self, config: LLMConfig) -> None:
        super().__init__(config)
        raw_url = (config.base_url or _DEFAULT_BASE_URL).rstrip("/")
        self._base_url = _validate_base_url(raw_url)

    async def generate(self, prompt: str, max_tokens: int | None = None) -> LLMResponse:
        payload = {
            "model": self.config.model,
            "messages": [{"role": "user", "content": prompt}],
            "stream": False,
            "options": {
                "temperature": self.config.temperature,
                "num_predict": self._max_tokens(max_tokens),
            },
        }
        try:
            async with httpx.AsyncClient() as client:
                resp = await client.post(
                    f"{self._base_url}/api/chat",
                    json=payload,
                    timeout=self.config.timeout,
                )
                resp.raise_for_status()
                data = resp.json()
        except httpx.HTTPError as e:
            raise LLMError(
                "ollama",
                "generate",
                e,
                retryable=isinstance(e, (httpx.TimeoutException, httpx.ConnectError)),
            ) from e

        content = data.get("message", {}).get("content", "")
        if not content:
            raise ValueError("No content in Ollama response")
        return LLMResponse(
            content=content,
            usage=TokenUsage(
                input_tokens=data.get("prompt_eval_count", 0),
                output_tokens=data.get("eval_count", 0),
            ),
            model=self.config.model,
        )
