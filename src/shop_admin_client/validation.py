from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Mapping, Sequence

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


@dataclass(frozen=True)
class ValidationIssue:
    field: str
    reason: str


class ClientValidationError(ValueError):
    def __init__(self, issues: list[ValidationIssue]) -> None:
        self.issues = issues
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        if not self.issues:
            return "Validation failed"
        issue = self.issues[0]
        return f"{issue.field}: {issue.reason}"

    def by_field(self) -> dict[str, list[str]]:
        grouped: dict[str, list[str]] = {}
        for issue in self.issues:
            grouped.setdefault(issue.field, []).append(issue.reason)
        return grouped


@dataclass(frozen=True)
class FieldRule:
    field: str
    required: bool = False
    min_length: int | None = None
    max_length: int | None = None
    min_value: float | None = None
    email: bool = False


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def check_field(rule: FieldRule, value: Any) -> list[ValidationIssue]:
    if _is_blank(value):
        if rule.required:
            return [ValidationIssue(field=rule.field, reason="This field is required.")]
        return []

    issues: list[ValidationIssue] = []
    if isinstance(value, str):
        if rule.min_length is not None and len(value) < rule.min_length:
            issues.append(
                ValidationIssue(field=rule.field, reason=f"This field is required to be at least {rule.min_length} characters.")
            )
        if rule.max_length is not None and len(value) > rule.max_length:
            issues.append(
                ValidationIssue(field=rule.field, reason=f"This field cannot be longer than {rule.max_length} characters.")
            )
        if rule.email and not _EMAIL_RE.match(value.strip()):
            issues.append(ValidationIssue(field=rule.field, reason="This field should be a valid email address."))
    if rule.min_value is not None:
        try:
            number = float(value)
        except (TypeError, ValueError):
            issues.append(ValidationIssue(field=rule.field, reason="This field should be a number."))
        else:
            if number < rule.min_value:
                issues.append(
                    ValidationIssue(field=rule.field, reason=f"This field should be at least {rule.min_value:g}.")
                )
    return issues


def validate_values(values: Mapping[str, Any], rules: Sequence[FieldRule]) -> list[ValidationIssue]:
    issues: list[ValidationIssue] = []
    for rule in rules:
        issues.extend(check_field(rule, values.get(rule.field)))
    return issues


def ensure_valid(values: Mapping[str, Any], rules: Sequence[FieldRule]) -> None:
    issues = validate_values(values, rules)
    if issues:
        raise ClientValidationError(issues)
