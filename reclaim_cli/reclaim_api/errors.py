"""
Error types raised by the Reclaim API layer and the command handlers.

Every error carries a human-readable message and an optional remediation
hint. The CLI prints both and exits non-zero; nothing in the API layer
retries or recovers locally.
"""

from typing import Optional


class CliError(Exception):
    """Base error for everything the CLI reports to the user."""

    default_hint: Optional[str] = None

    def __init__(self, message: str, hint: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self._hint = hint

    @property
    def hint(self) -> Optional[str]:
        return self._hint if self._hint is not None else self.default_hint

    def __str__(self) -> str:
        return self.message


class MissingApiKeyError(CliError):
    default_hint = "Set RECLAIM_API_KEY or pass --api-key. You can find your key in Reclaim settings."

    def __init__(self):
        super().__init__("Missing Reclaim API key.")


class InvalidBaseUrlError(CliError):
    default_hint = "Use a valid URL, e.g. --base-url https://api.app.reclaim.ai/api"

    def __init__(self, url: str):
        super().__init__(f"Invalid base URL: {url}")
        self.url = url


class InvalidInputError(CliError):
    """Local validation failure; the request is never sent."""


class TransportError(CliError):
    """The request failed before a usable HTTP response was received."""


class ApiError(CliError):
    """The API answered with a non-2xx status."""

    def __init__(self, status: int, message: str, hint: Optional[str] = None):
        super().__init__(message, hint)
        self.status = status

    def __str__(self) -> str:
        return f"Reclaim API returned HTTP {self.status}: {self.message}"


class ResponseParseError(CliError):
    """A 2xx response whose body could not be decoded into the expected shape."""


class OutputError(CliError):
    """Rendering a result for display failed."""
