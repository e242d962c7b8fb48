from __future__ import annotations

from dataclasses import dataclass, field

from .exceptions import (
    ApiError,
    AuthError,
    ForbiddenError,
    NotFoundError,
    RateLimitError,
    ServerError,
    TransportError,
)

GENERIC_MESSAGE = "Request failed"

_FALLBACK_MESSAGES: tuple[tuple[type[ApiError], str], ...] = (
    (TransportError, "Could not reach the server. Check your connection and try again."),
    (AuthError, "Your session has expired. Sign in again."),
    (ForbiddenError, "You are not allowed to do this."),
    (NotFoundError, "The record no longer exists."),
    (RateLimitError, "Too many requests. Wait a moment and try again."),
    (ServerError, "The server could not complete the request."),
)


@dataclass(frozen=True)
class UserFacingError:
    """Notification-ready view of an :class:`ApiError`."""

    message: str
    technical_details: str
    trace_id: str | None = None
    field_errors: dict[str, str] = field(default_factory=dict)


def _fallback(exc: ApiError) -> str:
    for error_type, message in _FALLBACK_MESSAGES:
        if isinstance(exc, error_type):
            return message
    return GENERIC_MESSAGE


def to_user_facing_error(exc: ApiError) -> UserFacingError:
    backend_message = exc.message.strip()
    if isinstance(exc, TransportError) or backend_message in ("", GENERIC_MESSAGE):
        message = _fallback(exc)
    else:
        message = backend_message
    technical = f"HTTP {exc.status_code} {exc.code}"
    if isinstance(exc, TransportError):
        technical = f"{exc.code}: {exc.message}"
    return UserFacingError(
        message=message,
        technical_details=technical,
        trace_id=exc.trace_id,
        field_errors=exc.field_errors,
    )
