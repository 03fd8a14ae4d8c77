"""Client-level exception types.

Every failure surfaced by this package is a ``RegistryError`` subclass so
callers can branch on the kind of failure and apply their own retry policy.
Nothing in this package retries.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, NotRequired, TypedDict


class ErrorDetails(TypedDict, total=False):
    """Structured error context for observability and callers."""

    url: str
    reason: str
    http_status: int
    api_errors: list[str]
    setting: str
    context: NotRequired[dict[str, Any]]


@dataclass
class RegistryError(Exception):
    """Base error for registry client failures.

    Attributes:
        code: Stable, machine-readable error code.
        message: Human-readable error message.
        details: Optional structured details for debugging/observability.
    """

    code: str
    message: str
    details: ErrorDetails | None = None

    def __post_init__(self) -> None:
        # Populate Exception args so str(error) is useful in logs/tracebacks.
        super().__init__(self.message)

    def _detail(self, key: str) -> Any:
        return (self.details or {}).get(key)


class NotFoundError(RegistryError):
    """Raised when the registry answers 404 for the requested URL."""

    @classmethod
    def for_url(cls, url: str) -> "NotFoundError":
        return cls(
            code="not_found",
            message=f"Resource at {url} was not found",
            details={"url": url, "http_status": 404},
        )

    @property
    def url(self) -> str | None:
        return self._detail("url")


class PermissionDeniedError(RegistryError):
    """Raised on 403; ``reason`` carries the raw response body."""

    @classmethod
    def with_reason(cls, reason: str) -> "PermissionDeniedError":
        return cls(
            code="permission_denied",
            message=f"Permission denied: {reason}" if reason else "Permission denied",
            details={"reason": reason, "http_status": 403},
        )

    @property
    def reason(self) -> str:
        return self._detail("reason") or ""


class ApiError(RegistryError):
    """Raised when a successful response carries a domain error envelope."""

    @classmethod
    def from_messages(cls, messages: list[str]) -> "ApiError":
        summary = "; ".join(messages) if messages else "unknown error"
        return cls(
            code="api_error",
            message=f"Registry reported an error: {summary}",
            details={"api_errors": messages},
        )

    @property
    def messages(self) -> list[str]:
        return list(self._detail("api_errors") or [])


class TransportError(RegistryError):
    """Raised on network, protocol or decode failures and unexpected statuses."""

    @property
    def status_code(self) -> int | None:
        return self._detail("http_status")


class ConfigurationError(RegistryError):
    """Raised when the client is constructed with invalid settings."""
