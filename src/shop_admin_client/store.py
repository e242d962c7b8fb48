"""State container for one admin resource.

The store keeps an immutable :class:`EntityState` snapshot that is replaced
whenever a request completes, and pushes each new snapshot to subscribers.
Writes follow a refresh-after-write policy: a successful create, update,
partial update, delete or bulk delete re-requests the unfiltered list and the
statistics instead of patching the local copy.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Generic, Mapping, Sequence

from .clients.resource_client import ResourceClient
from .exceptions import ApiError
from .logger import get_logger, log_action
from .models import E, ExportFormat, PageRequest, PageResult, SearchFilters
from .ui_errors import to_user_facing_error

Listener = Callable[["EntityState[Any]"], None]


@dataclass(frozen=True)
class EntityState(Generic[E]):
    entity: E
    entities: tuple[E, ...] = ()
    loading: bool = False
    updating: bool = False
    update_success: bool = False
    total_items: int = 0
    statistics: dict[str, Any] | None = None
    error_message: str | None = None
    last_trace_id: str | None = field(default=None, compare=False)


def _error_message(exc: Exception) -> str:
    if isinstance(exc, ApiError):
        return to_user_facing_error(exc).message
    return str(exc) or type(exc).__name__


class EntityStore(Generic[E]):
    def __init__(self, client: ResourceClient[E], *, logger: logging.Logger | None = None) -> None:
        self.client = client
        self.spec = client.spec
        self.logger = logger or get_logger(f"shop_admin_client.store.{self.spec.name}")
        self._listeners: list[Listener] = []
        self._state: EntityState[E] = self._initial_state()

    def _initial_state(self) -> EntityState[E]:
        return EntityState(entity=self.spec.default_entity())

    @property
    def state(self) -> EntityState[E]:
        return self._state

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _commit(self, **changes: Any) -> None:
        self._state = replace(self._state, **changes)
        for listener in list(self._listeners):
            listener(self._state)

    def _trace_id(self) -> str | None:
        last = self.client.http.last_operation
        return last.trace_id if last else None

    def _log(self, action: str, outcome: str, **context: Any) -> None:
        log_action(self.logger, self.spec.name, f"{self.spec.name}.{action}", outcome, self._trace_id(), **context)

    # reads

    def fetch_entities(self, page_request: PageRequest | None = None) -> PageResult[E]:
        self._commit(loading=True, error_message=None)
        try:
            page = self.client.list(page_request)
        except (ApiError, ValueError) as exc:
            self._commit(loading=False, error_message=_error_message(exc), last_trace_id=self._trace_id())
            self._log("list", "error", error=str(exc))
            raise
        self._commit(
            loading=False,
            entities=tuple(page.items),
            total_items=page.total_items,
            last_trace_id=self._trace_id(),
        )
        return page

    def search(
        self,
        filters: SearchFilters | Mapping[str, Any],
        page_request: PageRequest | None = None,
    ) -> PageResult[E]:
        self._commit(loading=True, error_message=None)
        try:
            page = self.client.search(filters, page_request)
        except (ApiError, ValueError) as exc:
            self._commit(loading=False, error_message=_error_message(exc), last_trace_id=self._trace_id())
            self._log("search", "error", error=str(exc))
            raise
        self._commit(
            loading=False,
            entities=tuple(page.items),
            total_items=page.total_items,
            last_trace_id=self._trace_id(),
        )
        return page

    def fetch_entity(self, entity_id: str) -> E:
        self._commit(loading=True, error_message=None)
        try:
            entity = self.client.get(entity_id)
        except (ApiError, ValueError) as exc:
            self._commit(loading=False, error_message=_error_message(exc), last_trace_id=self._trace_id())
            self._log("get", "error", entity_id=entity_id, error=str(exc))
            raise
        self._commit(loading=False, entity=entity, last_trace_id=self._trace_id())
        return entity

    def fetch_statistics(self) -> dict[str, Any]:
        # Statistics are a side channel and never touch the loading flag.
        try:
            statistics = self.client.statistics()
        except (ApiError, ValueError) as exc:
            self._commit(error_message=_error_message(exc))
            self._log("statistics", "error", error=str(exc))
            raise
        self._commit(statistics=statistics)
        return statistics

    # writes

    def create(self, entity: E | Mapping[str, Any]) -> E:
        return self._mutate("create", lambda: self.client.create(entity))

    def update(self, entity: E | Mapping[str, Any]) -> E:
        return self._mutate("update", lambda: self.client.update(entity))

    def partial_update(self, entity: E | Mapping[str, Any]) -> E:
        return self._mutate("partial_update", lambda: self.client.partial_update(entity))

    def delete(self, entity_id: str) -> None:
        self._mutate("delete", lambda: self.client.delete(entity_id), entity_id=entity_id)

    def delete_many(self, ids: Sequence[str]) -> None:
        self._mutate("bulk_delete", lambda: self.client.bulk_delete(ids), count=len(ids))

    def _mutate(self, action: str, call: Callable[[], Any], **context: Any) -> Any:
        self._commit(updating=True, update_success=False, error_message=None)
        try:
            result = call()
        except (ApiError, ValueError) as exc:
            self._commit(updating=False, error_message=_error_message(exc), last_trace_id=self._trace_id())
            self._log(action, "error", error=str(exc), **context)
            raise
        entity = result if isinstance(result, self.spec.entity_type) else self.spec.default_entity()
        self._commit(updating=False, update_success=True, entity=entity, last_trace_id=self._trace_id())
        self._log(action, "success", **context)
        self._refresh_after_write()
        return result

    def _refresh_after_write(self) -> None:
        # Both follow-ups are independent; one failing does not skip the other.
        for refresh in (self.fetch_entities, self.fetch_statistics):
            try:
                refresh()
            except (ApiError, ValueError):
                self.logger.warning("refresh after %s write failed", self.spec.name)

    # misc

    def export(self, export_format: ExportFormat | str = ExportFormat.TXT) -> bytes:
        exporter = getattr(self.client, "export", None)
        if exporter is None:
            raise ValueError(f"{self.spec.name} does not support export")
        export_format = ExportFormat(export_format)
        try:
            payload = exporter(export_format)
        except (ApiError, ValueError) as exc:
            self._log("export", "error", format=export_format.value, error=str(exc))
            raise
        self._log("export", "success", format=export_format.value, size=len(payload))
        return payload

    def reset(self) -> None:
        initial = self._initial_state()
        self._commit(**{name: getattr(initial, name) for name in EntityState.__dataclass_fields__})
