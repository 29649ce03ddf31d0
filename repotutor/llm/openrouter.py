"""OpenRouter adapter: OpenAI-compatible chat completions across many models."""

from __future__ import annotations

from repotutor.llm.models import LLMConfig
from repotutor.llm.openai_adapter import OpenAIProvider

OPENROUTER_BASE_URL = "https://openrouter.ai/api/v1"
DEFAULT_REFERER = "https://github.com/repotutor/repotutor"
DEFAULT_TITLE = "repotutor"

# A few free models worth knowing about; any OpenRouter model id works.
FREE_MODELS: dict[str, str] = {
    "deepseek/deepseek-r1:free": "DeepSeek R1 (reasoning)",
    "deepseek/deepseek-chat:free": "DeepSeek Chat",
    "meta-llama/llama-3.3-70b-instruct:free": "Llama 3.3 70B",
    "qwen/qwen-2.5-72b-instruct:free": "Qwen 2.5 72B",
    "google/gemma-2-9b-it:free": "Gemma 2 9B",
    "mistralai/mistral-7b-instruct:free": "Mistral 7B",
}


class OpenRouterProvider(OpenAIProvider):
    """OpenRouter speaks the OpenAI wire format; only the endpoint and headers differ."""

    error_label = "openrouter"

    def __init__(
        self,
        config: LLMConfig,
        referer: str = DEFAULT_REFERER,
        title: str = DEFAULT_TITLE,
    ) -> None:
        super().__init__(config)
        self._referer = referer
        self._title = title

    def _client_kwargs(self) -> dict:
        kwargs = super()._client_kwargs()
        kwargs.setdefault("base_url", OPENROUTER_BASE_URL)
        kwargs["default_headers"] = {"HTTP-Referer": self._referer, "X-Title": self._title}
        return kwargs
