from __future__ import annotations

from dataclasses import dataclass, replace
from urllib.parse import parse_qs

from ..models import DEFAULT_PAGE_SIZE, DEFAULT_SORT_FIELD, PageRequest, SortOrder

PAGE_PARAM = "page"
SORT_PARAM = "sort"


@dataclass(frozen=True)
class PaginationState:
    """List view paging; ``active_page`` is one-based."""

    active_page: int = 1
    items_per_page: int = DEFAULT_PAGE_SIZE
    sort: str = DEFAULT_SORT_FIELD
    order: SortOrder = SortOrder.ASC

    def __post_init__(self) -> None:
        object.__setattr__(self, "active_page", max(1, int(self.active_page)))
        object.__setattr__(self, "order", SortOrder(self.order))

    @property
    def sort_param(self) -> str:
        return f"{self.sort},{self.order.value}"

    def to_page_request(self) -> PageRequest:
        return PageRequest(page=self.active_page - 1, size=self.items_per_page, sort=self.sort_param)

    def to_query(self) -> str:
        return f"?{PAGE_PARAM}={self.active_page}&{SORT_PARAM}={self.sort_param}"


def sort_by(state: PaginationState, field: str) -> PaginationState:
    if field == state.sort:
        return replace(state, order=state.order.toggled())
    return replace(state, sort=field, order=SortOrder.ASC)


def next_page(state: PaginationState, has_next: bool | None) -> PaginationState:
    if has_next is False:
        return state
    return replace(state, active_page=state.active_page + 1)


def prev_page(state: PaginationState) -> PaginationState:
    return replace(state, active_page=max(1, state.active_page - 1))


def goto_page(state: PaginationState, page: int) -> PaginationState:
    return replace(state, active_page=max(1, page))


def total_pages(total_items: int, items_per_page: int) -> int:
    if items_per_page < 1:
        return 0
    return (max(total_items, 0) + items_per_page - 1) // items_per_page


def pagination_from_query(query: str, state: PaginationState) -> PaginationState:
    """Override page and sort from a query string when both are present."""
    params = parse_qs(query.lstrip("?"))
    raw_page = (params.get(PAGE_PARAM) or [""])[0]
    raw_sort = (params.get(SORT_PARAM) or [""])[0]
    if not raw_page or not raw_sort:
        return state
    try:
        page = int(raw_page)
    except ValueError:
        return state
    field, _, direction = raw_sort.partition(",")
    if not field:
        return state
    order = SortOrder.DESC if direction.strip().lower() == SortOrder.DESC.value else SortOrder.ASC
    return replace(state, active_page=page, sort=field.strip(), order=order)
