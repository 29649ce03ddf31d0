from typing import Literal

from pydantic import BaseModel, Field


class LLMSettings(BaseModel):
    provider: Literal["openrouter", "openai", "anthropic", "google", "ollama"] = "openrouter"
    model: str = "deepseek/deepseek-r1:free"
    api_key_env: str = "OPENROUTER_API_KEY"
    max_tokens: int = Field(default=4096, gt=0)
    temperature: float = Field(default=0.7, ge=0)
    timeout: int = Field(default=120, gt=0)
    base_url: str | None = None


class FetchConfig(BaseModel):
    provider: Literal["github"] = "github"
    token_env: str = "GITHUB_TOKEN"
    api_url: str = "https://api.github.com"
    max_file_size: int = Field(default=500_000, gt=0)
    max_files: int = Field(default=100, gt=0)
    batch_size: int = Field(default=10, gt=0)
    timeout: int = Field(default=30, gt=0)


class DigestConfig(BaseModel):
    max_tokens: int = Field(default=100_000, gt=0)


class GenerationConfig(BaseModel):
    language: str = "english"
    min_abstractions: int = Field(default=5, gt=0)
    max_abstractions: int = Field(default=8, gt=0)
    max_context_files: int = Field(default=15, gt=0)
    context_file_chars: int = Field(default=2000, gt=0)
    max_chapter_files: int = Field(default=5, gt=0)
    fallback_files: int = Field(default=3, gt=0)
    relationship_description_chars: int = Field(default=200, gt=0)


class OutputConfig(BaseModel):
    base_dir: str = "tutorials"
    create_index: bool = True


class TutorConfig(BaseModel):
    llm: LLMSettings = Field(default_factory=LLMSettings)
    fetch: FetchConfig = Field(default_factory=FetchConfig)
    digest: DigestConfig = Field(default_factory=DigestConfig)
    generation: GenerationConfig = Field(default_factory=GenerationConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    log_level: Literal["debug", "info", "warn", "error"] = "info"
    log_format: Literal["text", "json"] = "text"
