from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Generic, Mapping, Sequence

import requests

from ..models import AuditedEntity, E, PageRequest, PageResult, SearchFilters
from ..resources import ResourceSpec
from ..validation import ClientValidationError, ValidationIssue
from .base import BaseClient

TOTAL_COUNT_HEADER = "X-Total-Count"


def parse_total_count(headers: Mapping[str, str], fallback: int) -> int:
    raw = headers.get(TOTAL_COUNT_HEADER)
    if raw:
        try:
            return int(raw)
        except ValueError:
            pass
    return fallback


@dataclass
class ResourceClient(BaseClient, Generic[E]):
    """REST gateway for one admin resource (``api/<plural>``)."""

    resource: ResourceSpec[E] | None = field(default=None, kw_only=True)

    def __post_init__(self) -> None:
        if self.resource is None:
            raise ValueError("ResourceClient requires a resource spec")

    @property
    def spec(self) -> ResourceSpec[E]:
        if self.resource is None:
            raise ValueError("ResourceClient requires a resource spec")
        return self.resource

    @property
    def path(self) -> str:
        return self.spec.path

    def list(self, page_request: PageRequest | None = None) -> PageResult[E]:
        params = page_request.list_params() if page_request else {}
        return self._fetch_page(self.path, params or None, operation="list")

    def search(self, filters: SearchFilters | Mapping[str, Any], page_request: PageRequest | None = None) -> PageResult[E]:
        search = _coerce_filters(filters, self.spec.search_type)
        params = page_request.search_params() if page_request else {}
        params.update(search.query_params())
        return self._fetch_page(f"{self.path}/search", params, operation="search")

    def get(self, entity_id: str) -> E:
        data = self._request("GET", f"{self.path}/{entity_id}", module=self.spec.name, operation="get")
        return self._parse_entity(data, "get")

    def create(self, entity: E | Mapping[str, Any]) -> E:
        payload = self._coerce_entity(entity)
        data = self._request("POST", self.path, json_body=payload.to_wire(), module=self.spec.name, operation="create")
        return self._parse_entity(data, "create", payload)

    def update(self, entity: E | Mapping[str, Any]) -> E:
        payload = self._coerce_entity(entity)
        entity_id = _require_id(payload)
        data = self._request(
            "PUT",
            f"{self.path}/{entity_id}",
            json_body=payload.to_wire(),
            module=self.spec.name,
            operation="update",
        )
        return self._parse_entity(data, "update", payload)

    def partial_update(self, entity: E | Mapping[str, Any]) -> E:
        payload = self._coerce_entity(entity)
        entity_id = _require_id(payload)
        data = self._request(
            "PATCH",
            f"{self.path}/{entity_id}",
            json_body=payload.to_wire(),
            headers={"Content-Type": "application/merge-patch+json"},
            module=self.spec.name,
            operation="partial_update",
        )
        return self._parse_entity(data, "partial_update", payload)

    def delete(self, entity_id: str) -> None:
        self._request("DELETE", f"{self.path}/{entity_id}", module=self.spec.name, operation="delete")

    def bulk_delete(self, ids: Sequence[str]) -> None:
        if not ids:
            raise ClientValidationError([ValidationIssue(field="ids", reason="ids must not be empty")])
        self._request(
            "DELETE",
            f"{self.path}/bulk",
            json_body=list(ids),
            module=self.spec.name,
            operation="bulk_delete",
        )

    def statistics(self) -> dict[str, Any]:
        data = self._request("GET", f"{self.path}/statistics", module=self.spec.name, operation="statistics")
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ValueError(f"Expected {self.spec.name} statistics to be a JSON object")
        return data

    def _fetch_page(self, path: str, params: dict[str, str] | None, *, operation: str) -> PageResult[E]:
        captured: dict[str, Mapping[str, str]] = {}

        def _capture_headers(response: requests.Response) -> None:
            captured["headers"] = response.headers

        data = self._request(
            "GET",
            path,
            params=params,
            response_hook=_capture_headers,
            module=self.spec.name,
            operation=operation,
        )
        if data is None:
            data = []
        if not isinstance(data, list):
            raise ValueError(f"Expected {self.spec.name} {operation} response to be a JSON array")
        items = [self.spec.entity_type.model_validate(item) for item in data]
        return PageResult(items=items, total_items=parse_total_count(captured.get("headers", {}), len(items)))

    def _coerce_entity(self, entity: E | Mapping[str, Any]) -> E:
        if isinstance(entity, self.spec.entity_type):
            return entity
        return self.spec.entity_type.model_validate(entity)

    def _parse_entity(self, data: Any, operation: str, submitted: E | None = None) -> E:
        if data is None and submitted is not None:
            # Empty 2xx body: the write went through, keep what was sent.
            return submitted
        if not isinstance(data, dict):
            raise ValueError(f"Expected {self.spec.name} {operation} response to be a JSON object")
        return self.spec.entity_type.model_validate(data)


def _require_id(entity: AuditedEntity) -> str:
    if not entity.id:
        raise ValueError("Entity id is required for updates")
    return entity.id


def _coerce_filters(value: SearchFilters | Mapping[str, Any], model_type: type[SearchFilters]) -> SearchFilters:
    if isinstance(value, model_type):
        return value
    return model_type.model_validate(value)
