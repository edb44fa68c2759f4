"""
Error types for the ContentChef client.

Every failure is raised as a ContentChefError subclass so callers can catch
the whole family or a single kind.
"""

from typing import Any


class ContentChefError(Exception):
    """Base error class for client errors."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for JSON output."""
        result: dict[str, Any] = {"error": self.message}
        if self.details:
            result["details"] = self.details
        return result


class ConfigurationError(ContentChefError):
    """Invalid client or channel configuration, or a call made without a context."""


class EncodingError(ContentChefError):
    """Query options, path or request body could not be encoded."""


class TransportError(ContentChefError):
    """The HTTP transport failed before a response was received."""


class ContextCancelledError(TransportError):
    """The call context was cancelled."""


class DeadlineExceededError(TransportError):
    """The call context deadline expired."""


class DecodeError(ContentChefError):
    """A successful response body was not valid JSON."""


class APIError(ContentChefError):
    """Non-2xx API response with the originating request and best-effort message."""

    def __init__(
        self,
        message: str,
        method: str = "",
        url: str = "",
        status: int = 0,
        reason: str = "",
        details: dict | None = None,
    ):
        super().__init__(message, details)
        self.method = method
        self.url = url
        self.status = status
        self.reason = reason

    def __str__(self) -> str:
        return f"{self.method} {self.url}: {self.status} {self.message}"

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for JSON output."""
        result = super().to_dict()
        if self.status:
            result["status"] = self.status
        result["request"] = f"{self.method} {self.url}"
        return result
