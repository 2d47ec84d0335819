"""Non-empty field check tests."""

from __future__ import annotations

import pytest
from fintech_api_tester.response_validation.non_empty_fields import validate_non_empty_fields
from fintech_api_tester.response_validation.validation_outcomes import NonEmptyFieldError


def test_accepts_populated_values_of_every_kind() -> None:
    body = {
        "name": "Alice",
        "items": [1],
        "meta": {"k": "v"},
        "count": 0,
        "active": False,
        "nested": {"ids": ["a"]},
    }

    validate_non_empty_fields(body, ["name", "items", "meta", "count", "active", "nested.ids[0]"])


@pytest.mark.parametrize(
    ("body", "field", "message"),
    [
        ({}, "accountId", "Field 'accountId' should exist"),
        ({"accountId": None}, "accountId", "Field 'accountId' should not be null"),
        ({"name": "   "}, "name", "String field 'name' should not be empty"),
        ({"items": []}, "items", "Array field 'items' should not be empty"),
        ({"meta": {}}, "meta", "Object field 'meta' should not be empty"),
        ({"rate": float("nan")}, "rate", "Number field 'rate' should not be NaN"),
        ({"data": {"rows": [{}]}}, "data.rows[0].id", "Field 'data.rows[0].id' should exist"),
    ],
)
def test_rejects_missing_or_empty_values(body: dict, field: str, message: str) -> None:
    with pytest.raises(NonEmptyFieldError) as excinfo:
        validate_non_empty_fields(body, [field])

    assert str(excinfo.value) == message
    assert excinfo.value.field_path == field


def test_reports_first_failing_field_in_declaration_order() -> None:
    with pytest.raises(NonEmptyFieldError, match="Field 'b' should exist"):
        validate_non_empty_fields({"a": "x"}, ["a", "b", "c"])
