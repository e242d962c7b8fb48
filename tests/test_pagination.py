from __future__ import annotations

import pytest

from shop_admin_client.models import ProductSearch, SortOrder
from shop_admin_client.ui.filters import apply_filter, clean_filters
from shop_admin_client.ui.location import Location
from shop_admin_client.ui.pagination import (
    PaginationState,
    goto_page,
    next_page,
    pagination_from_query,
    prev_page,
    sort_by,
    total_pages,
)


@pytest.mark.parametrize(
    ("page", "size", "sort", "order"),
    [(1, 20, "id", SortOrder.ASC), (2, 20, "name", SortOrder.ASC), (7, 5, "price", SortOrder.DESC)],
)
def test_page_request_is_zero_based(page: int, size: int, sort: str, order: SortOrder) -> None:
    state = PaginationState(active_page=page, items_per_page=size, sort=sort, order=order)
    request = state.to_page_request()
    assert request.list_params() == {"page": str(page - 1), "size": str(size), "sort": f"{sort},{order.value}"}


def test_query_string_uses_one_based_page() -> None:
    state = PaginationState(active_page=3, sort="name", order=SortOrder.DESC)
    assert state.to_query() == "?page=3&sort=name,desc"


def test_sort_toggles_on_same_field_and_resets_on_new_field() -> None:
    state = PaginationState(sort="name", order=SortOrder.ASC)
    once = sort_by(state, "name")
    twice = sort_by(once, "name")
    assert once.order is SortOrder.DESC
    assert twice.order is SortOrder.ASC

    switched = sort_by(once, "price")
    assert switched.sort == "price"
    assert switched.order is SortOrder.ASC


def test_page_navigation_is_clamped() -> None:
    state = PaginationState()
    assert goto_page(state, 0).active_page == 1
    assert prev_page(state).active_page == 1
    assert next_page(state, has_next=False) is state
    assert next_page(state, has_next=True).active_page == 2
    assert total_pages(41, 20) == 3
    assert total_pages(0, 20) == 0


def test_query_overrides_only_when_page_and_sort_present() -> None:
    state = PaginationState()
    assert pagination_from_query("?page=4", state) is state
    assert pagination_from_query("?sort=name,desc", state) is state
    assert pagination_from_query("?page=x&sort=name,desc", state) is state

    restored = pagination_from_query("?page=4&sort=name,desc", state)
    assert (restored.active_page, restored.sort, restored.order) == (4, "name", SortOrder.DESC)


def test_location_records_history_and_notifies() -> None:
    location = Location(pathname="/product")
    seen: list[str] = []
    location.subscribe(seen.append)

    location.navigate("/product?page=2&sort=id,asc")
    assert location.search == "?page=2&sort=id,asc"
    assert location.back() is True
    assert location.search == ""
    assert seen == ["?page=2&sort=id,asc", ""]


def test_apply_filter_treats_empty_input_as_unset() -> None:
    filters = apply_filter(ProductSearch(active=True), "active", "")
    assert filters.active is None
    filters = apply_filter(filters, "min_price", "12")
    assert filters.min_price == 12.0
    with pytest.raises(KeyError):
        apply_filter(filters, "colour", "red")


def test_clean_filters_drops_blank_values() -> None:
    assert clean_filters({"name": "", "active": False, "min_price": None}) == {"active": False}
