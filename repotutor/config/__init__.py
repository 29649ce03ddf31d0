from .loader import load_config
from .models import (
    DigestConfig,
    FetchConfig,
    GenerationConfig,
    LLMSettings,
    OutputConfig,
    TutorConfig,
)

__all__ = [
    "DigestConfig",
    "FetchConfig",
    "GenerationConfig",
    "LLMSettings",
    "OutputConfig",
    "TutorConfig",
    "load_config",
]
