"""Toasts raised by list, edit and delete screens, newest last."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class NotificationLevel(str, Enum):
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class Notification:
    level: NotificationLevel
    message: str
    trace_id: str | None = None
    details: dict[str, Any] = field(default_factory=dict)

    def as_dict(self) -> dict[str, Any]:
        return {
            "level": self.level.value,
            "message": self.message,
            "trace_id": self.trace_id,
            "details": dict(self.details),
        }


@dataclass
class NotificationCenter:
    history: list[Notification] = field(default_factory=list)

    def notify(
        self,
        level: NotificationLevel,
        message: str,
        *,
        trace_id: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> Notification:
        notification = Notification(level, message, trace_id, dict(details or {}))
        self.history.append(notification)
        return notification

    def success(self, message: str, **kwargs: Any) -> Notification:
        return self.notify(NotificationLevel.SUCCESS, message, **kwargs)

    def warning(self, message: str, **kwargs: Any) -> Notification:
        return self.notify(NotificationLevel.WARNING, message, **kwargs)

    def error(self, message: str, **kwargs: Any) -> Notification:
        return self.notify(NotificationLevel.ERROR, message, **kwargs)

    @property
    def last(self) -> dict[str, Any] | None:
        if not self.history:
            return None
        return self.history[-1].as_dict()

    def render(self) -> dict[str, Any]:
        return {"count": len(self.history), "messages": [item.as_dict() for item in self.history]}

    def clear(self) -> None:
        self.history.clear()
