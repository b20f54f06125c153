"""Normalized error types for multitts.

Every expected failure surfaces as a ``TTSError`` carrying an ``ErrorCode``.
Anything else raised out of the library is a fault (a bug or a deployment
misconfiguration such as ``ConfigError``) and is never folded into
``TTSError``.
"""

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Taxonomy tags carried by ``TTSError.code``."""

    VALIDATION_ERROR = "validation_error"
    NETWORK_ERROR = "network_error"
    HTTP_ERROR = "http_error"
    RATE_LIMITED = "rate_limited"
    NOT_IMPLEMENTED = "not_implemented"
    INVALID_RETURN = "invalid_return"
    INVALID_PROVIDER_RESULT = "invalid_provider_result"
    ERROR = "error"


class TTSError(Exception):
    """The single error shape returned to callers of multitts.

    Attributes:
        code: Taxonomy tag (see ``ErrorCode``).
        message: Human-readable description.
        provider: Provider name, when known.
        status: HTTP status code, when a response was received.
        headers: Raw response headers, when a response was received.
    """

    def __init__(
        self,
        code: ErrorCode | str,
        message: str,
        *,
        provider: str | None = None,
        status: int | None = None,
        headers: Any = None,
    ) -> None:
        super().__init__(message)
        self.code = ErrorCode(code)
        self.message = message
        self.provider = provider
        self.status = status
        self.headers = headers

    def with_provider(self, provider: str | None) -> "TTSError":
        """Fill in ``provider`` if it is not already set and return self."""
        if self.provider is None and provider is not None:
            self.provider = provider
        return self

    def to_dict(self) -> dict[str, Any]:
        """Return the error as a plain mapping."""
        return {
            "code": self.code.value,
            "message": self.message,
            "provider": self.provider,
            "status": self.status,
            "headers": dict(self.headers) if self.headers is not None else None,
        }

    def __repr__(self) -> str:
        return (
            f"TTSError(code={self.code.value!r}, message={self.message!r}, "
            f"provider={self.provider!r}, status={self.status!r})"
        )


class ConfigError(Exception):
    """Raised when required configuration (e.g. an environment variable) is missing.

    This is a deployment fault, not a generation failure, so it is never
    converted into a ``TTSError``.
    """
