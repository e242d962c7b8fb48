"""Errors raised by the admin client for failed backend calls."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass
class ApiError(Exception):
    code: str
    message: str
    details: object | None
    trace_id: str | None
    status_code: int
    raw_payload: object | None = None
    method: str | None = None
    path: str | None = None

    def __str__(self) -> str:
        target = f"{self.method} {self.path} " if self.method and self.path else ""
        suffix = f" (trace {self.trace_id})" if self.trace_id else ""
        return f"{target}HTTP {self.status_code} {self.code}: {self.message}{suffix}"

    @property
    def field_errors(self) -> dict[str, str]:
        """Per-field messages from a bean-validation style ``fieldErrors`` list."""
        errors: dict[str, str] = {}
        if not isinstance(self.details, list):
            return errors
        for item in self.details:
            if isinstance(item, dict) and item.get("field"):
                errors[str(item["field"])] = str(item.get("message") or "invalid")
        return errors


class AuthError(ApiError):
    """401: missing or expired credentials."""


class ForbiddenError(ApiError):
    """403: the account may not perform the call."""


class NotFoundError(ApiError):
    pass


class ValidationError(ApiError):
    """400/422: the backend rejected the submitted record."""


class ConflictError(ApiError):
    pass


class RateLimitError(ApiError):
    pass


class ServerError(ApiError):
    pass


class TransportError(ApiError):
    """No HTTP response was received."""

    @classmethod
    def from_exception(cls, exc: Exception, *, trace_id: str | None, method: str, path: str) -> "TransportError":
        details: dict[str, Any] = {"type": type(exc).__name__}
        return cls(
            code="TRANSPORT_ERROR",
            message=str(exc) or type(exc).__name__,
            details=details,
            trace_id=trace_id,
            status_code=0,
            method=method,
            path=path,
        )
