from __future__ import annotations

from typing import Mapping

from .exceptions import (
    ApiError,
    AuthError,
    ConflictError,
    ForbiddenError,
    NotFoundError,
    RateLimitError,
    ServerError,
    ValidationError,
)

ERRORS_BY_STATUS: dict[int, type[ApiError]] = {
    400: ValidationError,
    401: AuthError,
    403: ForbiddenError,
    404: NotFoundError,
    409: ConflictError,
    422: ValidationError,
    429: RateLimitError,
}

# Problem+json bodies carry title/detail/fieldErrors; the rest use code/message/details.
_CODE_KEYS = ("code", "errorKey", "title")
_MESSAGE_KEYS = ("detail", "message")
_DETAIL_KEYS = ("fieldErrors", "details")
_TRACE_KEYS = ("traceId", "trace_id")


def error_class_for(status_code: int) -> type[ApiError]:
    if status_code >= 500:
        return ServerError
    return ERRORS_BY_STATUS.get(status_code, ApiError)


def _first(payload: Mapping[str, object], keys: tuple[str, ...]) -> object | None:
    for key in keys:
        value = payload.get(key)
        if value not in (None, ""):
            return value
    return None


def map_error(
    status_code: int,
    payload: Mapping[str, object] | None,
    trace_id: str | None,
    *,
    method: str | None = None,
    path: str | None = None,
) -> ApiError:
    body = dict(payload or {})
    body_trace_id = _first(body, _TRACE_KEYS)
    return error_class_for(status_code)(
        code=str(_first(body, _CODE_KEYS) or f"HTTP_{status_code}"),
        message=str(_first(body, _MESSAGE_KEYS) or "Request failed"),
        details=_first(body, _DETAIL_KEYS),
        trace_id=str(body_trace_id) if body_trace_id is not None else trace_id,
        status_code=status_code,
        raw_payload=body,
        method=method,
        path=path,
    )
