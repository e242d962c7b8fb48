from __future__ import annotations

from typing import Any, Mapping

from ..models import SearchFilters


def clean_filters(filters: Mapping[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in filters.items() if value not in (None, "")}


def apply_filter(filters: SearchFilters, field: str, value: Any) -> SearchFilters:
    """Return a copy of ``filters`` with one field changed from form input.

    An empty input on a field whose unset value is ``None`` (booleans, numbers)
    clears the predicate instead of failing validation.
    """
    model_fields = type(filters).model_fields
    if field not in model_fields:
        raise KeyError(f"Unknown filter field: {field}")
    if value == "" and model_fields[field].default is None:
        value = None
    data = filters.model_dump()
    data[field] = value
    return type(filters).model_validate(data)
