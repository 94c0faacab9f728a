"""
Error kinds raised by the bambou client.

Every operation either succeeds or raises exactly one of these. Nothing is
retried or swallowed inside the library.
"""

from typing import Any


class BambouError(Exception):
    """Base error class for bambou errors."""

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


class TransportError(BambouError):
    """Network, TLS, DNS, timeout or malformed URL failure."""


class RequestFailed(BambouError):
    """The server answered with a status code other than the expected one."""

    def __init__(self, body: str, status: int, details: dict | None = None, content: bytes | None = None):
        super().__init__(f"Request failed: status code: {status}, message: {body}", details)
        self.body = body
        self.status = status
        # Raw bytes as sent by the server
        self.content = content if content is not None else body.encode("utf-8")

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for JSON output."""
        result = super().to_dict()
        result["status"] = self.status
        result["body"] = self.body
        return result


class InvalidResponse(BambouError):
    """The response was well formed but did not hold the expected entity."""


class ParseError(BambouError):
    """The response body could not be decoded into the expected shape."""


class MissingIdentifier(BambouError):
    """An identifier-scoped operation was attempted on an entity without an ID."""


class NoSession(BambouError):
    """The entity does not hold any session so it cannot perform any request."""

    def __init__(self, message: str = "The entity does not hold any session so it cannot perform any request"):
        super().__init__(message)


class ValidationError(BambouError):
    """Validation error for local input/data issues (not API errors)."""
