from __future__ import annotations

from typing import Any
from urllib.parse import parse_qsl, urlparse

import responses

from shop_admin_client import load_config
from shop_admin_client.http_client import HttpClient
from shop_admin_client.tracing import TraceContext

BASE_URL = "https://shop.example.com"


def make_http() -> HttpClient:
    return HttpClient(load_config(), trace=TraceContext())


def url(path: str) -> str:
    return f"{BASE_URL}/{path.lstrip('/')}"


def query_of(call: Any) -> dict[str, str]:
    return dict(parse_qsl(urlparse(call.request.url).query))


def calls_to(method: str, path: str) -> list[Any]:
    target = urlparse(url(path)).path
    return [
        call
        for call in responses.calls
        if call.request.method == method and urlparse(call.request.url).path == target
    ]


def product_row(entity_id: str, name: str, **extra: Any) -> dict[str, Any]:
    row: dict[str, Any] = {"id": entity_id, "name": name, "price": 10.0, "stockQuantity": 3, "active": True}
    row.update(extra)
    return row
