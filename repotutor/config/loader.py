"""Config file discovery and loading, with ${VAR} expansion."""

import os
import re
from pathlib import Path

import yaml
from pydantic import ValidationError

from repotutor.errors import ConfigurationError

from .models import TutorConfig

_ENV_REF = re.compile(r"\$\{(\w+)\}")


def _candidate_paths(cli_path: str | None) -> list[Path]:
    """Search order: CLI path, project-local file, user-global file."""
    paths = [Path("repotutor.yaml"), Path.home() / ".repotutor" / "config.yaml"]
    if cli_path:
        paths.insert(0, Path(cli_path))
    return paths


def load_config(cli_path: str | None = None) -> TutorConfig:
    """Return the first non-empty config file found, or the built-in defaults.

    Raises:
        ConfigurationError: if ``cli_path`` does not exist, or the chosen file
            is not valid YAML or does not match the schema.
    """
    if cli_path and not Path(cli_path).exists():
        raise ConfigurationError(f"Config file not found: {cli_path}")

    for path in _candidate_paths(cli_path):
        if not path.exists():
            continue
        try:
            raw = yaml.safe_load(path.read_text())
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {path}: {e}") from e
        if raw is None:
            continue
        try:
            return TutorConfig(**_expand_env_vars(raw))
        except (ValidationError, TypeError) as e:
            raise ConfigurationError(f"Invalid config in {path}: {e}") from e

    return TutorConfig()


def _expand_env_vars(obj: object) -> object:
    """Replace ${VAR} in every string of a parsed YAML tree; unset vars become ''."""
    if isinstance(obj, str):
        return _ENV_REF.sub(lambda m: os.environ.get(m.group(1), ""), obj)
    if isinstance(obj, dict):
        return {k: _expand_env_vars(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_expand_env_vars(v) for v in obj]
    return obj


# Default YAML template for `repotutor config init`
DEFAULT_CONFIG_TEMPLATE = """\
# repotutor.yaml

# Generative backend
llm:
  provider: "openrouter"       # openrouter | openai | anthropic | google | ollama
  model: "deepseek/deepseek-r1:free"
  api_key_env: "OPENROUTER_API_KEY"
  max_tokens: 4096
  temperature: 0.7
  timeout: 120
  # base_url: "http://localhost:11434"

# Repository fetching
fetch:
  provider: "github"
  token_env: "GITHUB_TOKEN"
  api_url: "https://api.github.com"
  max_file_size: 500000        # bytes per file
  max_files: 100
  batch_size: 10               # concurrent content requests per batch
  timeout: 30

# Digest budget
digest:
  max_tokens: 100000

# Tutorial generation
generation:
  language: "english"
  min_abstractions: 5
  max_abstractions: 8
  max_context_files: 15
  context_file_chars: 2000
  max_chapter_files: 5
  fallback_files: 3
  relationship_description_chars: 200

# Output
output:
  base_dir: "tutorials"
  create_index: true

# Logging
log_level: "info"              # debug | info | warn | error
log_format: "text"             # text | json
"""
