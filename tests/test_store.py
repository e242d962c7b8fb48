from __future__ import annotations

import pytest
import responses

from shop_admin_client.clients import ProductsClient, ResourceClient
from shop_admin_client.exceptions import ConflictError, ServerError
from shop_admin_client.models import PageRequest, Product
from shop_admin_client.resources import CATEGORY
from shop_admin_client.store import EntityState, EntityStore

from shop_helpers import calls_to, make_http, product_row, url


def _store() -> EntityStore[Product]:
    return EntityStore(ProductsClient(make_http()))


@responses.activate
def test_fetch_entities_replaces_snapshot_and_notifies() -> None:
    responses.add(responses.GET, url("api/products"), json=[product_row("1", "Lamp")], headers={"X-Total-Count": "9"})
    store = _store()
    seen: list[EntityState[Product]] = []
    unsubscribe = store.subscribe(seen.append)
    before = store.state

    store.fetch_entities(PageRequest(page=0, size=20, sort="id,asc"))

    assert [state.loading for state in seen] == [True, False]
    assert store.state is not before
    assert store.state.total_items == 9
    assert store.state.entities[0].name == "Lamp"

    unsubscribe()
    store.reset()
    assert len(seen) == 2


@responses.activate
def test_failed_fetch_keeps_previous_entities() -> None:
    responses.add(responses.GET, url("api/products"), json=[product_row("1", "Lamp")])
    responses.add(responses.GET, url("api/products"), json={"message": "down"}, status=500)
    store = _store()
    store.fetch_entities()

    with pytest.raises(ServerError):
        store.fetch_entities()

    assert store.state.loading is False
    assert store.state.entities[0].id == "1"
    assert store.state.error_message == "down"


@responses.activate
def test_statistics_do_not_touch_loading() -> None:
    responses.add(responses.GET, url("api/products/statistics"), json={"total": 3})
    store = _store()
    seen: list[bool] = []
    store.subscribe(lambda state: seen.append(state.loading))

    assert store.fetch_statistics() == {"total": 3}
    assert seen == [False]


@responses.activate
def test_update_refreshes_list_and_statistics() -> None:
    responses.add(responses.PUT, url("api/products/1"), json=product_row("1", "Lamp XL"))
    responses.add(responses.GET, url("api/products"), json=[product_row("1", "Lamp XL")])
    responses.add(responses.GET, url("api/products/statistics"), json={"total": 1})
    store = _store()
    flags: list[tuple[bool, bool]] = []
    store.subscribe(lambda state: flags.append((state.updating, state.update_success)))

    store.update(Product(id="1", name="Lamp XL", price=10, stock_quantity=1))

    assert flags[0] == (True, False)
    assert (False, True) in flags
    assert store.state.update_success is True
    assert store.state.entity.name == "Lamp XL"
    assert store.state.entities[0].name == "Lamp XL"
    assert store.state.statistics == {"total": 1}
    assert len(calls_to("GET", "api/products")) == 1
    assert len(calls_to("GET", "api/products/statistics")) == 1


@responses.activate
def test_failed_mutation_changes_nothing_and_reraises() -> None:
    responses.add(responses.GET, url("api/products"), json=[product_row("1", "Lamp")])
    responses.add(responses.DELETE, url("api/products/1"), json={"message": "in use"}, status=409)
    store = _store()
    store.fetch_entities()

    with pytest.raises(ConflictError):
        store.delete("1")

    assert store.state.updating is False
    assert store.state.update_success is False
    assert [item.id for item in store.state.entities] == ["1"]
    assert len(calls_to("GET", "api/products")) == 1


@responses.activate
def test_failed_refresh_keeps_update_success() -> None:
    responses.add(responses.DELETE, url("api/products/bulk"), status=204)
    responses.add(responses.GET, url("api/products"), json={"message": "down"}, status=500)
    responses.add(responses.GET, url("api/products/statistics"), json={"total": 0})
    store = _store()

    store.delete_many(["1", "2"])

    assert store.state.update_success is True
    assert store.state.error_message == "down"
    assert store.state.statistics == {"total": 0}


@responses.activate
def test_create_sets_entity_and_reset_restores_defaults() -> None:
    responses.add(responses.POST, url("api/products"), json=product_row("5", "Stool"), status=201)
    responses.add(responses.GET, url("api/products"), json=[product_row("5", "Stool")])
    responses.add(responses.GET, url("api/products/statistics"), json={})
    store = _store()

    created = store.create({"name": "Stool", "price": 5, "stock_quantity": 2})

    assert created.id == "5"
    assert store.state.entity.id == "5"
    store.reset()
    assert store.state.entity.id == ""
    assert store.state.entities == ()
    assert store.state.update_success is False


@responses.activate
def test_export_leaves_flags_alone() -> None:
    responses.add(responses.GET, url("api/products/export"), body=b"data")
    store = _store()
    seen: list[EntityState[Product]] = []
    store.subscribe(seen.append)

    assert store.export("txt") == b"data"
    assert seen == []


@responses.activate
def test_update_with_empty_body_counts_as_success() -> None:
    responses.add(responses.PUT, url("api/products/3"), status=204)
    responses.add(responses.GET, url("api/products"), json=[product_row("3", "Desk")])
    responses.add(responses.GET, url("api/products/statistics"), json={})
    store = _store()

    updated = store.update(Product(id="3", name="Desk", price=10, stock_quantity=1))

    assert updated.name == "Desk"
    assert store.state.update_success is True
    assert store.state.error_message is None
    assert len(calls_to("GET", "api/products")) == 1


def test_export_is_rejected_for_resources_without_it() -> None:
    store = EntityStore(ResourceClient(make_http(), resource=CATEGORY))
    with pytest.raises(ValueError, match="does not support export"):
        store.export("txt")
