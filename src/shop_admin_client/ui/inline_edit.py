from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..models import AuditedEntity


@dataclass
class InlineEditSession:
    """At most one editable row, with a working copy and a saving guard.

    ``is_saving`` arms when a save is issued and only a success observed while
    armed closes the session, so a success flag left over from an unrelated
    mutation cannot end the edit early.
    """

    editing_id: str | None = None
    working_copy: dict[str, Any] | None = None
    is_saving: bool = False

    @property
    def active(self) -> bool:
        return self.editing_id is not None

    def is_editing(self, entity_id: str | None) -> bool:
        return entity_id is not None and entity_id == self.editing_id

    def start(self, entity: AuditedEntity) -> None:
        # Any unsaved working copy of another row is dropped here.
        self.editing_id = entity.id or None
        self.working_copy = entity.model_dump()
        self.is_saving = False

    def change(self, field: str, value: Any) -> None:
        if self.working_copy is None:
            raise RuntimeError("No row is being edited")
        self.working_copy[field] = value

    def cancel(self) -> None:
        self.editing_id = None
        self.working_copy = None
        self.is_saving = False

    def arm(self) -> None:
        self.is_saving = True

    def disarm(self) -> None:
        self.is_saving = False

    def observe_update_success(self, update_success: bool) -> bool:
        if self.is_saving and update_success:
            self.cancel()
            return True
        return False
