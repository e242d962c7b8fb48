from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, ClassVar, Generic, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

DEFAULT_PAGE_SIZE = 20
DEFAULT_SORT_FIELD = "id"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"

    def toggled(self) -> "SortOrder":
        return SortOrder.DESC if self is SortOrder.ASC else SortOrder.ASC


class ExportFormat(str, Enum):
    TXT = "txt"
    XLSX = "xlsx"


class AuditedEntity(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True, alias_generator=to_camel)

    id: str | None = None
    created_by: str | None = None
    created_date: datetime | None = None
    last_modified_by: str | None = None
    last_modified_date: datetime | None = None

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json", exclude_none=True)


class Category(AuditedEntity):
    name: str | None = None
    description: str | None = None
    slug: str | None = None
    active: bool | None = None
    image_url: str | None = None


class Customer(AuditedEntity):
    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None
    phone: str | None = None
    address: str | None = None
    city: str | None = None
    country: str | None = None
    active: bool | None = None


class Order(AuditedEntity):
    customer_id: str | None = None
    customer_name: str | None = None
    order_date: datetime | None = None
    total_amount: float | None = None
    status: str | None = None
    shipping_address: str | None = None
    payment_method: str | None = None
    notes: str | None = None


class Product(AuditedEntity):
    name: str | None = None
    description: str | None = None
    price: float | None = None
    stock_quantity: int | None = None
    category_id: str | None = None
    category_name: str | None = None
    image_url: str | None = None
    active: bool | None = None


def default_category() -> Category:
    return Category(id="", name="", description="", slug="", active=True, image_url="")


def default_customer() -> Customer:
    return Customer(
        id="",
        first_name="",
        last_name="",
        email="",
        phone="",
        address="",
        city="",
        country="",
        active=True,
    )


def default_order() -> Order:
    return Order(
        id="",
        customer_id="",
        order_date=None,
        total_amount=0,
        status="PENDING",
        shipping_address="",
        payment_method="",
        notes="",
    )


def default_product() -> Product:
    return Product(
        id="",
        name="",
        description="",
        price=0,
        stock_quantity=0,
        category_id="",
        category_name="",
        image_url="",
        active=True,
    )


def encode_query_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)


class SearchFilters(BaseModel):
    """Optional field predicates for a resource's search endpoint.

    Empty strings and ``None`` mean "no predicate"; everything else, including
    ``False`` and ``0``, is sent.
    """

    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel, validate_assignment=True)

    trimmed_fields: ClassVar[frozenset[str]] = frozenset()

    def query_params(self) -> dict[str, str]:
        params: dict[str, str] = {}
        for name, info in type(self).model_fields.items():
            value = getattr(self, name)
            if isinstance(value, str) and name in self.trimmed_fields:
                value = value.strip()
            if value is None or value == "":
                continue
            params[info.alias or name] = encode_query_value(value)
        return params

    def is_active(self) -> bool:
        return bool(self.query_params())

    def cleared(self) -> "SearchFilters":
        return type(self)()


class CategorySearch(SearchFilters):
    trimmed_fields: ClassVar[frozenset[str]] = frozenset({"name", "slug"})

    name: str | None = ""
    slug: str | None = ""
    active: bool | None = None


class CustomerSearch(SearchFilters):
    trimmed_fields: ClassVar[frozenset[str]] = frozenset({"name", "email", "city", "country"})

    name: str | None = ""
    email: str | None = ""
    city: str | None = ""
    country: str | None = ""
    active: bool | None = None


class OrderSearch(SearchFilters):
    trimmed_fields: ClassVar[frozenset[str]] = frozenset({"customer_id", "status", "payment_method"})

    customer_id: str | None = ""
    status: str | None = ""
    payment_method: str | None = ""
    start_date: str | None = ""
    end_date: str | None = ""
    min_total: float | None = None
    max_total: float | None = None


class ProductSearch(SearchFilters):
    name: str | None = ""
    category_id: str | None = ""
    active: bool | None = None
    min_price: float | None = None
    max_price: float | None = None


@dataclass(frozen=True)
class PageRequest:
    """Wire-level page request; ``page`` is zero-based."""

    page: int = 0
    size: int = DEFAULT_PAGE_SIZE
    sort: str | None = None

    def __post_init__(self) -> None:
        if self.page < 0:
            raise ValueError("page must be >= 0")
        if self.size < 1:
            raise ValueError("size must be >= 1")

    def list_params(self) -> dict[str, str]:
        if not self.sort:
            return {}
        return {"page": str(self.page), "size": str(self.size), "sort": self.sort}

    def search_params(self) -> dict[str, str]:
        params = {"page": str(self.page), "size": str(self.size)}
        if self.sort:
            params["sort"] = self.sort
        return params


E = TypeVar("E", bound=AuditedEntity)


@dataclass
class PageResult(Generic[E]):
    items: list[E] = field(default_factory=list)
    total_items: int = 0
