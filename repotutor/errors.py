"""Error taxonomy for the tutorial pipeline."""

from __future__ import annotations


class TutorError(Exception):
    """Base class for every error the pipeline surfaces to its caller."""


class InvalidLocatorError(TutorError):
    """The repository reference could not be parsed into owner/repo."""

    def __init__(self, locator: str) -> None:
        self.locator = locator
        super().__init__(
            f"Invalid repository locator {locator!r}: expected github.com/owner/repo"
        )


class UpstreamUnavailableError(TutorError):
    """The code-hosting API answered with a non-success status.

    A transport failure (DNS, connect, timeout) is reported with status 0.
    """

    def __init__(self, status: int, message: str, url: str = "") -> None:
        self.status = status
        self.message = message
        self.url = url
        super().__init__(f"Upstream request failed ({status}): {message}")


class GenerationFailedError(TutorError):
    """The abstraction-identification phase produced nothing usable."""


class MalformedGenerationError(TutorError):
    """A generative reply did not contain a parseable JSON value."""

    def __init__(self, message: str, raw_text: str) -> None:
        self.raw_text = raw_text
        super().__init__(message)


class ConfigurationError(TutorError):
    """Invalid or incomplete configuration."""


class MissingCredentialError(ConfigurationError):
    """A provider was called without the credential it needs."""

    def __init__(self, provider: str, env_var: str | None = None) -> None:
        self.provider = provider
        self.env_var = env_var
        hint = f" Set the {env_var} environment variable." if env_var else ""
        super().__init__(f"Missing API key for provider {provider!r}.{hint}")
