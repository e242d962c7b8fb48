"""Per-resource wiring for the four admin entities.

A :class:`ResourceSpec` holds everything that differs between the category,
customer, order and product screens: REST path, models, labels, how a row
is named in confirmations, how an inline-edit working copy is coerced before
it is sent, and which fields are validated locally.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Any, Callable, Generic, Mapping

from .models import (
    AuditedEntity,
    Category,
    CategorySearch,
    Customer,
    CustomerSearch,
    E,
    Order,
    OrderSearch,
    Product,
    ProductSearch,
    SearchFilters,
    default_category,
    default_customer,
    default_order,
    default_product,
)
from .validation import FieldRule

ORDER_STATUSES = ("PENDING", "PROCESSING", "COMPLETED", "CANCELLED", "SHIPPED")


@dataclass(frozen=True)
class LookupSpec:
    resource: str
    sort: str
    size: int = 1000


@dataclass(frozen=True)
class ResourceSpec(Generic[E]):
    name: str
    path: str
    entity_type: type[E]
    search_type: type[SearchFilters]
    default_entity: Callable[[], E]
    title: str
    plural: str
    plural_label: str
    fallback_name: str
    display_name: Callable[[E], str]
    coerce: Callable[[dict[str, Any]], dict[str, Any]]
    rules: tuple[FieldRule, ...] = ()
    list_lookup: LookupSpec | None = None
    edit_lookup: LookupSpec | None = None
    exportable: bool = False
    form_values: Callable[[E, bool], dict[str, Any]] | None = None

    def name_of(self, entity: E) -> str:
        return self.display_name(entity).strip() or self.fallback_name

    def build(self, values: Mapping[str, Any]) -> E:
        return self.entity_type.model_validate(self.coerce(dict(values)))

    def initial_values(self, entity: E, is_new: bool) -> dict[str, Any]:
        if self.form_values is not None:
            return self.form_values(entity, is_new)
        return entity.model_dump()


def _to_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "on"}
    return bool(value)


def _to_float(value: Any) -> float | None:
    if value is None or value == "":
        return None
    return float(value)


def _to_int(value: Any) -> int | None:
    if value is None or value == "":
        return None
    return int(float(value))


def format_utc_timestamp(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    stamp = value.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%f")
    return f"{stamp[:-3]}Z"


def normalize_order_date(value: Any) -> str | None:
    """Normalize an edited order date to an ISO-8601 UTC timestamp.

    ``YYYY-MM-DD`` becomes midnight UTC, full timestamps are converted to UTC,
    naive timestamps are read as UTC, and anything unparseable becomes ``None``.
    """
    if not value:
        return None
    if isinstance(value, datetime):
        return format_utc_timestamp(value)
    if isinstance(value, date):
        return format_utc_timestamp(datetime(value.year, value.month, value.day, tzinfo=timezone.utc))
    if isinstance(value, str):
        text = value.strip()
        try:
            if "T" in text:
                return format_utc_timestamp(datetime.fromisoformat(text.replace("Z", "+00:00")))
            parsed = date.fromisoformat(text)
        except ValueError:
            return None
        return format_utc_timestamp(datetime(parsed.year, parsed.month, parsed.day, tzinfo=timezone.utc))
    return None


def _coerce_active_only(values: dict[str, Any]) -> dict[str, Any]:
    return {**values, "active": _to_bool(values.get("active"))}


def _coerce_order(values: dict[str, Any]) -> dict[str, Any]:
    return {
        **values,
        "total_amount": _to_float(values.get("total_amount")),
        "order_date": normalize_order_date(values.get("order_date")),
    }


def _coerce_product(values: dict[str, Any]) -> dict[str, Any]:
    category_id = values.get("category_id")
    return {
        **values,
        "price": _to_float(values.get("price")),
        "stock_quantity": _to_int(values.get("stock_quantity")),
        "active": _to_bool(values.get("active")),
        "category_id": None if category_id == "" else category_id,
    }


def _order_form_values(entity: Order, is_new: bool) -> dict[str, Any]:
    values = entity.model_dump()
    if is_new:
        values["order_date"] = datetime.now(timezone.utc).date().isoformat()
        values["status"] = "PENDING"
    elif entity.order_date is not None:
        order_date = entity.order_date
        if order_date.tzinfo is not None:
            order_date = order_date.astimezone(timezone.utc)
        values["order_date"] = order_date.date().isoformat()
    return values


def _first_present(*values: str | None) -> str:
    for value in values:
        if value is not None:
            return value
    return ""


def _category_name(entity: Category) -> str:
    return _first_present(entity.name, entity.slug)


def _customer_name(entity: Customer) -> str:
    full_name = " ".join(part for part in (entity.first_name, entity.last_name) if part).strip()
    return full_name or entity.email or ""


def _order_name(entity: Order) -> str:
    return " • ".join(part for part in (entity.customer_name, entity.payment_method, entity.status) if part)


def _product_name(entity: Product) -> str:
    return _first_present(entity.name, entity.category_name)


CATEGORY = ResourceSpec(
    name="category",
    path="api/categories",
    entity_type=Category,
    search_type=CategorySearch,
    default_entity=default_category,
    title="Category",
    plural="categories",
    plural_label="category(ies)",
    fallback_name="this category",
    display_name=_category_name,
    coerce=_coerce_active_only,
    rules=(
        FieldRule("name", required=True, min_length=1, max_length=100),
        FieldRule("description", max_length=500),
        FieldRule("slug", max_length=50),
        FieldRule("image_url", max_length=255),
    ),
)

CUSTOMER = ResourceSpec(
    name="customer",
    path="api/customers",
    entity_type=Customer,
    search_type=CustomerSearch,
    default_entity=default_customer,
    title="Customer",
    plural="customers",
    plural_label="customer(s)",
    fallback_name="this customer",
    display_name=_customer_name,
    coerce=_coerce_active_only,
    rules=(
        FieldRule("first_name", required=True, min_length=1, max_length=100),
        FieldRule("last_name", required=True, min_length=1, max_length=100),
        FieldRule("email", required=True, max_length=100, email=True),
        FieldRule("phone", max_length=20),
        FieldRule("address", max_length=255),
        FieldRule("city", max_length=100),
        FieldRule("country", max_length=50),
    ),
)

ORDER = ResourceSpec(
    name="order",
    path="api/orders",
    entity_type=Order,
    search_type=OrderSearch,
    default_entity=default_order,
    title="Order",
    plural="orders",
    plural_label="order(s)",
    fallback_name="this order",
    display_name=_order_name,
    coerce=_coerce_order,
    rules=(
        FieldRule("customer_id", required=True),
        FieldRule("order_date", required=True),
        FieldRule("total_amount", required=True, min_value=0),
        FieldRule("status", required=True, max_length=50),
        FieldRule("shipping_address", max_length=500),
        FieldRule("payment_method", max_length=100),
        FieldRule("notes", max_length=500),
    ),
    edit_lookup=LookupSpec(resource="customer", sort="firstName,asc"),
    form_values=_order_form_values,
)

PRODUCT = ResourceSpec(
    name="product",
    path="api/products",
    entity_type=Product,
    search_type=ProductSearch,
    default_entity=default_product,
    title="Product",
    plural="products",
    plural_label="product(s)",
    fallback_name="this product",
    display_name=_product_name,
    coerce=_coerce_product,
    rules=(
        FieldRule("name", required=True, max_length=100),
        FieldRule("description", max_length=500),
        FieldRule("price", required=True, min_value=0),
        FieldRule("stock_quantity", required=True, min_value=0),
        FieldRule("image_url", max_length=255),
    ),
    list_lookup=LookupSpec(resource="category", sort="name,asc"),
    edit_lookup=LookupSpec(resource="category", sort="name,asc"),
    exportable=True,
)

RESOURCES: dict[str, ResourceSpec[Any]] = {
    spec.name: spec for spec in (CATEGORY, CUSTOMER, ORDER, PRODUCT)
}


def get_resource(name: str) -> ResourceSpec[AuditedEntity]:
    try:
        return RESOURCES[name]
    except KeyError as exc:
        raise KeyError(f"Unknown resource: {name}") from exc
