from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class ViewStatus(str, Enum):
    LOADING = "loading"
    EMPTY = "empty"
    SUCCESS = "success"
    ERROR = "error"


_STATUS_MESSAGES = {
    ViewStatus.LOADING: "Loading",
    ViewStatus.EMPTY: "No records",
    ViewStatus.SUCCESS: "Ready",
}


@dataclass(frozen=True)
class ViewState:
    status: ViewStatus
    message: str
    trace_id: str | None = None

    def render(self) -> dict[str, Any]:
        return {"status": self.status.value, "message": self.message, "trace_id": self.trace_id}


def _status_for(loading: bool, has_data: bool, error: str | None) -> ViewStatus:
    if loading:
        return ViewStatus.LOADING
    if has_data:
        return ViewStatus.SUCCESS
    return ViewStatus.ERROR if error else ViewStatus.EMPTY


def resolve_view_state(*, loading: bool, has_data: bool, error: str | None, trace_id: str | None = None) -> ViewState:
    """Pick what a screen shows; an error only replaces the screen when there is no data left to show."""
    status = _status_for(loading, has_data, error)
    message = error if status is ViewStatus.ERROR and error else _STATUS_MESSAGES.get(status, "")
    return ViewState(status=status, message=message, trace_id=trace_id)
