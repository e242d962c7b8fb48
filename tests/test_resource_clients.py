from __future__ import annotations

import json

import pytest
import responses

from shop_admin_client.clients import ProductsClient, ResourceClient, parse_total_count
from shop_admin_client.models import (
    Category,
    CategorySearch,
    CustomerSearch,
    ExportFormat,
    OrderSearch,
    PageRequest,
    Product,
    ProductSearch,
)
from shop_admin_client.resources import CATEGORY, CUSTOMER, ORDER, PRODUCT
from shop_admin_client.validation import ClientValidationError

from shop_helpers import make_http, product_row, query_of, url


def _products() -> ProductsClient:
    return ProductsClient(make_http(), access_token="token-1")


@responses.activate
def test_list_sends_zero_based_page_and_sort() -> None:
    responses.add(
        responses.GET,
        url("api/products"),
        json=[product_row("1", "Lamp"), product_row("2", "Desk")],
        headers={"X-Total-Count": "42"},
    )
    page = _products().list(PageRequest(page=1, size=20, sort="name,asc"))

    assert query_of(responses.calls[0]) == {"page": "1", "size": "20", "sort": "name,asc"}
    assert responses.calls[0].request.headers["Authorization"] == "Bearer token-1"
    assert [item.name for item in page.items] == ["Lamp", "Desk"]
    assert page.items[0].stock_quantity == 3
    assert page.total_items == 42


@responses.activate
def test_list_without_sort_sends_no_params_and_falls_back_to_item_count() -> None:
    responses.add(responses.GET, url("api/products"), json=[product_row("1", "Lamp")])
    page = _products().list()

    assert query_of(responses.calls[0]) == {}
    assert page.total_items == 1


def test_parse_total_count_ignores_garbage() -> None:
    assert parse_total_count({"X-Total-Count": "abc"}, 5) == 5
    assert parse_total_count({}, 0) == 0


@responses.activate
def test_search_drops_empty_filters_and_keeps_paging() -> None:
    responses.add(responses.GET, url("api/products/search"), json=[])
    _products().search(ProductSearch(name="", active=True), PageRequest(page=0, size=20, sort="id,asc"))

    params = query_of(responses.calls[0])
    assert params == {"page": "0", "size": "20", "sort": "id,asc", "active": "true"}
    assert "name" not in params


@responses.activate
def test_search_sends_false_and_zero() -> None:
    responses.add(responses.GET, url("api/products/search"), json=[])
    _products().search({"active": False, "min_price": 0, "max_price": 99.5})

    params = query_of(responses.calls[0])
    assert params["active"] == "false"
    assert params["minPrice"] == "0"
    assert params["maxPrice"] == "99.5"


@responses.activate
def test_order_search_trims_text_filters() -> None:
    client = ResourceClient(make_http(), resource=ORDER)
    responses.add(responses.GET, url("api/orders/search"), json=[])
    client.search(OrderSearch(customer_id="  ", status=" SHIPPED "))

    params = query_of(responses.calls[0])
    assert params["status"] == "SHIPPED"
    assert "customerId" not in params


@responses.activate
def test_customer_search_trims_text_filters() -> None:
    client = ResourceClient(make_http(), resource=CUSTOMER)
    responses.add(responses.GET, url("api/customers/search"), json=[])
    client.search(CustomerSearch(name="   ", email="  bob@x.io "))

    params = query_of(responses.calls[0])
    assert params == {"email": "bob@x.io"}


def test_whitespace_only_category_filters_are_not_predicates() -> None:
    assert CategorySearch(slug="  ").is_active() is False
    assert CategorySearch(name=" Lamps ", slug="  ").query_params() == {"name": "Lamps"}


@responses.activate
def test_create_posts_camel_case_body() -> None:
    responses.add(responses.POST, url("api/products"), json=product_row("7", "Chair", categoryId="c1"), status=201)
    created = _products().create(Product(name="Chair", price=12.5, stock_quantity=4, category_id="c1"))

    body = json.loads(responses.calls[0].request.body)
    assert body == {"name": "Chair", "price": 12.5, "stockQuantity": 4, "categoryId": "c1"}
    assert created.id == "7"
    assert created.category_id == "c1"


@responses.activate
def test_update_and_partial_update_target_the_entity() -> None:
    responses.add(responses.PUT, url("api/categories/c1"), json={"id": "c1", "name": "Tools"})
    responses.add(responses.PATCH, url("api/categories/c1"), json={"id": "c1", "name": "Tools", "active": False})
    client = ResourceClient(make_http(), resource=CATEGORY)

    updated = client.update(Category(id="c1", name="Tools"))
    patched = client.partial_update({"id": "c1", "active": False})

    assert isinstance(updated, Category)
    assert patched.active is False
    assert responses.calls[1].request.headers["Content-Type"] == "application/merge-patch+json"


def test_update_requires_id() -> None:
    client = ResourceClient(make_http(), resource=CATEGORY)
    with pytest.raises(ValueError, match="id"):
        client.update(Category(name="No id"))


def test_resource_client_requires_spec() -> None:
    with pytest.raises(ValueError):
        ResourceClient(make_http())


@responses.activate
def test_bulk_delete_sends_ids_in_body() -> None:
    responses.add(responses.DELETE, url("api/products/bulk"), status=204)
    _products().bulk_delete(["1", "2", "3"])

    assert json.loads(responses.calls[0].request.body) == ["1", "2", "3"]


def test_bulk_delete_rejects_empty_ids() -> None:
    with pytest.raises(ClientValidationError):
        _products().bulk_delete([])


@responses.activate
def test_statistics_returns_opaque_mapping() -> None:
    responses.add(responses.GET, url("api/products/statistics"), json={"totalProducts": 12, "lowStock": 2})
    assert _products().statistics() == {"totalProducts": 12, "lowStock": 2}


@responses.activate
def test_export_downloads_requested_format() -> None:
    responses.add(responses.GET, url("api/products/export"), body=b"PK\x03\x04")
    payload = _products().export(ExportFormat.XLSX)

    assert payload == b"PK\x03\x04"
    assert query_of(responses.calls[0]) == {"format": "xlsx"}


def test_export_rejects_unknown_format() -> None:
    with pytest.raises(ValueError):
        _products().export("pdf")


@responses.activate
def test_write_with_empty_success_body_returns_submitted_entity() -> None:
    client = ResourceClient(make_http(), resource=CATEGORY)
    responses.add(responses.PUT, url("api/categories/4"), status=200)
    responses.add(responses.POST, url("api/categories"), status=201)

    updated = client.update(Category(id="4", name="Lamps"))
    created = client.create(Category(name="Desks"))

    assert (updated.id, updated.name) == ("4", "Lamps")
    assert created.name == "Desks"


def test_display_name_falls_back_only_when_name_is_missing() -> None:
    assert CATEGORY.name_of(Category(name="", slug="lamps")) == "this category"
    assert CATEGORY.name_of(Category(slug="lamps")) == "lamps"
    assert PRODUCT.name_of(Product(category_name="Lighting")) == "Lighting"
    assert PRODUCT.name_of(Product(name="  ", category_name="Lighting")) == "this product"
