from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Generic, Mapping

from ..exceptions import ApiError
from ..logger import get_logger, log_action
from ..models import E, PageRequest
from ..resources import ResourceSpec
from ..store import EntityState, EntityStore
from ..ui_errors import to_user_facing_error
from ..validation import ClientValidationError, validate_values
from .notifications import NotificationCenter
from .view_state import resolve_view_state

logger = get_logger(__name__)


def _friendly(exc: Exception) -> tuple[str, str | None]:
    if isinstance(exc, ApiError):
        friendly = to_user_facing_error(exc)
        return friendly.message, friendly.trace_id
    return str(exc), None


@dataclass
class EntityDetailView(Generic[E]):
    store: EntityStore[E]
    error_message: str | None = None
    trace_id: str | None = None

    @property
    def spec(self) -> ResourceSpec[E]:
        return self.store.spec

    def load(self, entity_id: str) -> bool:
        self.error_message = None
        try:
            self.store.fetch_entity(entity_id)
        except (ApiError, ValueError) as exc:
            self.error_message, self.trace_id = _friendly(exc)
            log_action(logger, self.spec.name, f"{self.spec.name}_detail.load", "error", self.trace_id, entity_id=entity_id)
            return False
        self.trace_id = self.store.state.last_trace_id
        return True

    def render(self) -> dict[str, Any]:
        state = self.store.state
        entity = state.entity
        view = resolve_view_state(
            loading=state.loading,
            has_data=bool(entity.id),
            error=self.error_message,
            trace_id=self.trace_id,
        )
        return {
            "title": self.spec.title,
            "name": self.spec.name_of(entity) if entity.id else None,
            "fields": entity.model_dump(mode="json", exclude_none=True) if entity.id else {},
            "view": view.render(),
        }


@dataclass
class EntityEditView(Generic[E]):
    """Create/update form for one entity.

    ``open(None)`` starts a new entity from the resource defaults. ``submit``
    validates locally first; invalid values never reach the network. The view
    closes once the store reports ``update_success`` for this submit.
    """

    store: EntityStore[E]
    lookup_store: EntityStore[Any] | None = None
    notifications: NotificationCenter = field(default_factory=NotificationCenter)
    entity_id: str | None = field(default=None, init=False)
    is_new: bool = field(default=True, init=False)
    errors: dict[str, list[str]] = field(default_factory=dict, init=False)
    submitted: bool = field(default=False, init=False)
    closed: bool = field(default=False, init=False)
    _unsubscribe: Callable[[], None] | None = field(default=None, init=False, repr=False)

    @property
    def spec(self) -> ResourceSpec[E]:
        return self.store.spec

    def open(self, entity_id: str | None = None) -> bool:
        self.entity_id = entity_id
        self.is_new = entity_id is None
        self.errors = {}
        self.submitted = False
        self.closed = False
        if self._unsubscribe is None:
            self._unsubscribe = self.store.subscribe(self._on_store_change)
        self._load_lookup()
        if entity_id is None:
            self.store.reset()
            return True
        try:
            self.store.fetch_entity(entity_id)
        except (ApiError, ValueError) as exc:
            message, trace_id = _friendly(exc)
            self.notifications.error(f"Error loading {self.spec.name}", trace_id=trace_id, details={"error": message})
            return False
        return True

    def _load_lookup(self) -> None:
        lookup = self.spec.edit_lookup
        if lookup is None or self.lookup_store is None:
            return
        try:
            self.lookup_store.fetch_entities(PageRequest(page=0, size=lookup.size, sort=lookup.sort))
        except (ApiError, ValueError) as exc:
            log_action(logger, self.spec.name, f"{self.spec.name}_edit.lookup", "error", None, error=str(exc))

    def lookup_options(self) -> list[tuple[str, str]]:
        if self.lookup_store is None:
            return []
        lookup_spec = self.lookup_store.spec
        return [(item.id, lookup_spec.name_of(item)) for item in self.lookup_store.state.entities if item.id]

    def default_values(self) -> dict[str, Any]:
        return self.spec.initial_values(self.store.state.entity, self.is_new)

    def submit(self, values: Mapping[str, Any]) -> bool:
        merged = {**self.store.state.entity.model_dump(), **values}
        if self.is_new:
            merged["id"] = None
        issues = validate_values(merged, self.spec.rules)
        if issues:
            self.errors = ClientValidationError(issues).by_field()
            return False
        self.errors = {}
        try:
            entity = self.spec.build(merged)
        except ValueError as exc:
            self.notifications.error(f"Error saving {self.spec.name}", details={"error": str(exc)})
            return False
        self.submitted = True
        try:
            if self.is_new:
                self.store.create(entity)
            else:
                self.store.update(entity)
        except (ApiError, ValueError) as exc:
            self.submitted = False
            message, trace_id = _friendly(exc)
            self.notifications.error(f"Error saving {self.spec.name}", trace_id=trace_id, details={"error": message})
            return False
        self._on_store_change(self.store.state)
        return True

    def _on_store_change(self, state: EntityState[E]) -> None:
        if self.submitted and state.update_success:
            self.submitted = False
            self.closed = True

    def dispose(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def render(self) -> dict[str, Any]:
        return {
            "title": f"Create or edit a {self.spec.title}",
            "is_new": self.is_new,
            "loading": self.store.state.loading,
            "updating": self.store.state.updating,
            "values": self.default_values(),
            "errors": dict(self.errors),
            "lookup": self.lookup_options(),
            "closed": self.closed,
        }


@dataclass
class DeleteDialog(Generic[E]):
    store: EntityStore[E]
    notifications: NotificationCenter = field(default_factory=NotificationCenter)
    entity_id: str | None = field(default=None, init=False)
    closed: bool = field(default=False, init=False)

    @property
    def spec(self) -> ResourceSpec[E]:
        return self.store.spec

    @property
    def question(self) -> str:
        return f'Are you sure you want to delete "{self.spec.name_of(self.store.state.entity)}"?'

    def open(self, entity_id: str) -> bool:
        self.entity_id = entity_id
        self.closed = False
        try:
            self.store.fetch_entity(entity_id)
        except (ApiError, ValueError) as exc:
            message, trace_id = _friendly(exc)
            self.notifications.error(f"Error loading {self.spec.name}", trace_id=trace_id, details={"error": message})
            return False
        return True

    def confirm(self) -> bool:
        if not self.entity_id:
            return False
        display_name = self.spec.name_of(self.store.state.entity)
        try:
            self.store.delete(self.entity_id)
        except (ApiError, ValueError) as exc:
            message, trace_id = _friendly(exc)
            self.notifications.error(f"Error deleting {self.spec.name}", trace_id=trace_id, details={"error": message})
            return False
        self.closed = self.store.state.update_success
        self.notifications.success(f'{self.spec.title} "{display_name}" deleted successfully')
        return True

    def cancel(self) -> None:
        self.closed = True
