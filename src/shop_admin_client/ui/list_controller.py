from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Generic

from ..exceptions import ApiError
from ..export import save_export
from ..logger import get_logger, log_action
from ..models import DEFAULT_PAGE_SIZE, AuditedEntity, E, ExportFormat, PageRequest, SearchFilters
from ..resources import ResourceSpec
from ..store import EntityState, EntityStore
from ..ui_errors import to_user_facing_error
from .filters import apply_filter, clean_filters
from .inline_edit import InlineEditSession
from .location import Location
from .notifications import NotificationCenter
from .pagination import (
    PaginationState,
    goto_page,
    next_page,
    pagination_from_query,
    prev_page,
    sort_by,
    total_pages,
)
from .view_state import resolve_view_state

logger = get_logger(__name__)

Confirm = Callable[[str], bool]


class ListPhase(str, Enum):
    IDLE = "idle"
    FETCHING = "fetching"
    SEARCH_FETCHING = "search_fetching"


def deny_all(message: str) -> bool:
    return False


@dataclass
class ListViewController(Generic[E]):
    """Paged, sortable, searchable table over one resource.

    Every change to page, sort field, sort direction or search mode issues
    exactly one fetch. Search mode sticks until the filters are cleared. After
    each fetch the location query is rewritten to ``?page=N&sort=field,dir``
    when it differs, and navigation that carries both parameters feeds back
    into the pagination state.
    """

    store: EntityStore[E]
    location: Location = field(default_factory=Location)
    notifications: NotificationCenter = field(default_factory=NotificationCenter)
    confirm: Confirm = deny_all
    lookup_store: EntityStore[Any] | None = None
    export_dir: Path | None = None
    items_per_page: int = DEFAULT_PAGE_SIZE
    pagination: PaginationState = field(init=False)
    filters: SearchFilters = field(init=False)
    search_mode: bool = field(default=False, init=False)
    selected_ids: list[str] = field(default_factory=list, init=False)
    edit: InlineEditSession = field(default_factory=InlineEditSession, init=False)
    phase: ListPhase = field(default=ListPhase.IDLE, init=False)
    last_export_path: Path | None = field(default=None, init=False)
    _unsubscribers: list[Callable[[], None]] = field(default_factory=list, init=False, repr=False)

    def __post_init__(self) -> None:
        if self.location.pathname == "/":
            self.location.pathname = f"/{self.spec.name}"
        self.pagination = pagination_from_query(
            self.location.search,
            PaginationState(items_per_page=self.items_per_page),
        )
        self.filters = self.spec.search_type()

    @property
    def spec(self) -> ResourceSpec[E]:
        return self.store.spec

    @property
    def state(self) -> EntityState[E]:
        return self.store.state

    @property
    def mounted(self) -> bool:
        return bool(self._unsubscribers)

    # lifecycle

    def mount(self) -> None:
        if self.mounted:
            return
        self._unsubscribers = [
            self.store.subscribe(self._on_store_change),
            self.location.subscribe(self.on_location_change),
        ]
        self._load_statistics()
        self._load_lookup()
        self._fetch()

    def unmount(self) -> None:
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers = []

    def refresh(self) -> None:
        self._fetch()

    def _load_statistics(self) -> None:
        try:
            self.store.fetch_statistics()
        except (ApiError, ValueError) as exc:
            self._log("statistics", "error", error=str(exc))

    def _load_lookup(self) -> None:
        lookup = self.spec.list_lookup
        if lookup is None or self.lookup_store is None:
            return
        try:
            self.lookup_store.fetch_entities(PageRequest(page=0, size=lookup.size, sort=lookup.sort))
        except (ApiError, ValueError) as exc:
            self._log("lookup", "error", resource=lookup.resource, error=str(exc))

    def lookup_options(self) -> list[tuple[str, str]]:
        if self.lookup_store is None:
            return []
        lookup_spec = self.lookup_store.spec
        return [(item.id, lookup_spec.name_of(item)) for item in self.lookup_store.state.entities if item.id]

    # fetching

    def _fetch(self) -> None:
        searching = self.search_mode and self.filters.is_active()
        page_request = self.pagination.to_page_request()
        self.phase = ListPhase.SEARCH_FETCHING if searching else ListPhase.FETCHING
        try:
            if searching:
                self.store.search(self.filters, page_request)
            else:
                self.store.fetch_entities(page_request)
        except (ApiError, ValueError) as exc:
            self._log("search" if searching else "list", "error", error=str(exc))
        else:
            self._prune_selection()
        finally:
            self.phase = ListPhase.IDLE
        self._sync_location()

    def _sync_location(self) -> None:
        target = self.pagination.to_query()
        if self.location.search != target:
            self.location.navigate(f"{self.location.pathname}{target}")

    def _apply(
        self,
        *,
        pagination: PaginationState | None = None,
        search_mode: bool | None = None,
        force: bool = False,
    ) -> bool:
        changed = False
        if pagination is not None and pagination != self.pagination:
            self.pagination = pagination
            changed = True
        if search_mode is not None and search_mode != self.search_mode:
            self.search_mode = search_mode
            changed = True
        if changed or force:
            self._fetch()
            return True
        return False

    def on_location_change(self, query: str) -> bool:
        return self._apply(pagination=pagination_from_query(query, self.pagination))

    # search

    def set_filter(self, field_name: str, value: Any) -> None:
        self.filters = apply_filter(self.filters, field_name, value)

    def search(self) -> None:
        self._apply(
            pagination=goto_page(self.pagination, 1),
            search_mode=self.filters.is_active(),
            force=True,
        )

    def clear_filters(self) -> None:
        self.filters = self.filters.cleared()
        self._apply(pagination=goto_page(self.pagination, 1), search_mode=False, force=True)

    # paging and sorting

    @property
    def total_pages(self) -> int:
        return total_pages(self.state.total_items, self.pagination.items_per_page)

    @property
    def has_next(self) -> bool:
        return self.pagination.active_page < self.total_pages

    def go_to_page(self, page: int) -> bool:
        return self._apply(pagination=goto_page(self.pagination, page))

    def next_page(self) -> bool:
        return self._apply(pagination=next_page(self.pagination, self.has_next))

    def prev_page(self) -> bool:
        return self._apply(pagination=prev_page(self.pagination))

    def sort_by(self, field_name: str) -> bool:
        return self._apply(pagination=sort_by(self.pagination, field_name))

    def row_number(self, index: int) -> str:
        ordinal = (self.pagination.active_page - 1) * self.pagination.items_per_page + index + 1
        return str(ordinal).zfill(4)

    # selection

    def _page_ids(self) -> list[str]:
        return [item.id for item in self.state.entities if item.id]

    def _prune_selection(self) -> None:
        page_ids = set(self._page_ids())
        self.selected_ids = [entity_id for entity_id in self.selected_ids if entity_id in page_ids]

    def toggle_select(self, entity_id: str) -> bool:
        if entity_id not in self._page_ids():
            return False
        if entity_id in self.selected_ids:
            self.selected_ids.remove(entity_id)
        else:
            self.selected_ids.append(entity_id)
        return True

    def select_all(self, checked: bool) -> None:
        self.selected_ids = self._page_ids() if checked else []

    @property
    def all_selected(self) -> bool:
        page_ids = self._page_ids()
        return bool(page_ids) and set(page_ids) == set(self.selected_ids)

    # deletes

    def delete(self, entity: AuditedEntity) -> bool:
        if not entity.id:
            return False
        display_name = self.spec.name_of(entity)
        if not self.confirm(f'Are you sure you want to delete "{display_name}"?'):
            return False
        try:
            self.store.delete(entity.id)
        except (ApiError, ValueError) as exc:
            self._notify_error(f"Error deleting {self.spec.name}", exc)
            return False
        self.notifications.success(f'{self.spec.title} "{display_name}" deleted successfully')
        self.refresh()
        return True

    def delete_selected(self) -> bool:
        if not self.selected_ids:
            self.notifications.warning(f"Please select {self.spec.plural} to delete")
            return False
        ids = list(self.selected_ids)
        if not self.confirm(f"Are you sure you want to delete {len(ids)} {self.spec.plural_label}?"):
            return False
        try:
            self.store.delete_many(ids)
        except (ApiError, ValueError) as exc:
            self._notify_error(f"Error deleting {self.spec.plural}", exc)
            return False
        self.selected_ids = []
        self.notifications.success(f"{len(ids)} {self.spec.plural_label} deleted successfully")
        self.refresh()
        return True

    # inline edit

    def start_edit(self, entity: AuditedEntity) -> None:
        self.edit.start(entity)

    def change_field(self, field_name: str, value: Any) -> None:
        self.edit.change(field_name, value)

    def cancel_edit(self) -> None:
        self.edit.cancel()

    def save_edit(self) -> bool:
        if not self.edit.active or self.edit.working_copy is None:
            return False
        try:
            payload = self.spec.build(self.edit.working_copy)
        except ValueError as exc:
            self._notify_error(f"Error updating {self.spec.name}", exc)
            return False
        self.edit.arm()
        try:
            self.store.update(payload)
        except (ApiError, ValueError) as exc:
            self.edit.disarm()
            self._notify_error(f"Error updating {self.spec.name}", exc)
            return False
        # Unmounted controllers receive no store callbacks.
        self.edit.observe_update_success(self.state.update_success)
        self.notifications.success(f'{self.spec.title} "{self.spec.name_of(payload)}" updated successfully')
        self.refresh()
        return True

    def _on_store_change(self, state: EntityState[E]) -> None:
        self.edit.observe_update_success(state.update_success)

    # export

    def export(self, export_format: ExportFormat | str = ExportFormat.TXT, directory: Path | None = None) -> Path | None:
        if not self.spec.exportable:
            raise ValueError(f"{self.spec.name} does not support export")
        export_format = ExportFormat(export_format)
        try:
            payload = self.store.export(export_format)
            output_dir = directory or self.export_dir or self.store.client.http.config.resolved_export_dir()
            path = save_export(payload, prefix=self.spec.plural, export_format=export_format, output_dir=output_dir)
        except (ApiError, OSError, ValueError) as exc:
            self._notify_error(f"Error exporting {self.spec.plural}", exc)
            return None
        self.last_export_path = path
        self.notifications.success(f"{self.spec.plural.capitalize()} exported as {export_format.value.upper()} successfully")
        return path

    # rendering

    def _notify_error(self, message: str, exc: Exception) -> None:
        if isinstance(exc, ApiError):
            friendly = to_user_facing_error(exc)
            self.notifications.error(message, trace_id=friendly.trace_id, details={"error": friendly.message})
        else:
            self.notifications.error(message, details={"error": str(exc)})

    def _log(self, action: str, outcome: str, **context: Any) -> None:
        log_action(logger, self.spec.name, f"{self.spec.name}_list.{action}", outcome, self.state.last_trace_id, **context)

    def render(self) -> dict[str, Any]:
        state = self.state
        rows = []
        for index, item in enumerate(state.entities):
            editing = self.edit.is_editing(item.id)
            rows.append(
                {
                    "number": self.row_number(index),
                    "id": item.id,
                    "name": self.spec.name_of(item),
                    "selected": item.id in self.selected_ids,
                    "editing": editing,
                    "values": dict(self.edit.working_copy or {}) if editing else item.model_dump(mode="json"),
                }
            )
        view = resolve_view_state(
            loading=state.loading,
            has_data=bool(state.entities),
            error=state.error_message,
            trace_id=state.last_trace_id,
        )
        return {
            "title": self.spec.title,
            "phase": self.phase.value,
            "view": view.render(),
            "rows": rows,
            "total_items": state.total_items,
            "pagination": {
                "active_page": self.pagination.active_page,
                "items_per_page": self.pagination.items_per_page,
                "total_pages": self.total_pages,
                "sort": self.pagination.sort,
                "order": self.pagination.order.value,
            },
            "search_mode": self.search_mode,
            "filters": clean_filters(self.filters.model_dump()),
            "selected_ids": list(self.selected_ids),
            "all_selected": self.all_selected,
            "editing_id": self.edit.editing_id,
            "is_saving": self.edit.is_saving,
            "updating": state.updating,
            "statistics": state.statistics,
            "lookup": self.lookup_options(),
            "notifications": self.notifications.render(),
        }
