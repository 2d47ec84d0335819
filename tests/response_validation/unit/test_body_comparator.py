"""Structural body comparison tests."""

from __future__ import annotations

import pytest
from fintech_api_tester.response_validation.body_comparator import (
    MatchMode,
    compare_body,
    strictly_equal,
)
from fintech_api_tester.response_validation.field_paths import parse_field_paths
from fintech_api_tester.response_validation.validation_outcomes import (
    ShapeViolationError,
    ValueViolationError,
    WarningCategory,
    WarningCollector,
)


def test_exact_match_passes_silently() -> None:
    warnings = WarningCollector()
    body = {"status": "ok", "id": "ABC123456"}

    compare_body(body, {"status": "ok", "id": "ABC123456"}, MatchMode.EXACT, warnings=warnings)

    assert warnings.warnings == ()


def test_missing_property_fails() -> None:
    with pytest.raises(ShapeViolationError, match="Missing property: b"):
        compare_body({"a": 1}, {"a": 1, "b": 2}, MatchMode.EXACT)


def test_non_empty_field_skips_value_comparison() -> None:
    compare_body(
        {"createdAt": "2025-06-01"},
        {"createdAt": "2024-01-01"},
        MatchMode.EXACT,
        non_empty_fields=parse_field_paths(["createdAt"]),
    )


def test_array_template_values_are_compared_against_every_item() -> None:
    expected = {"items": [{"id": "x", "qty": 1}]}
    actual = {"items": [{"id": "a", "qty": 5}, {"id": "b", "qty": 2}]}

    with pytest.raises(ValueViolationError) as excinfo:
        compare_body(actual, expected, MatchMode.EXACT)

    assert str(excinfo.value) == "Value mismatch for id. Expected: x, Got: a"
    assert excinfo.value.field_path == "items[0].id"


def test_array_template_passes_when_items_share_template_values() -> None:
    expected = {"items": [{"id": "x", "qty": 1}]}
    actual = {"items": [{"id": "x", "qty": 1}, {"id": "x", "qty": 1}, {"id": "x", "qty": 1}]}

    compare_body(actual, expected, MatchMode.EXACT)


def test_array_template_shape_only_when_leaves_are_non_empty_fields() -> None:
    expected = {"items": [{"id": "x", "qty": 1}]}
    actual = {"items": [{"id": "a", "qty": 5}, {"id": "b", "qty": 2}]}
    non_empty = parse_field_paths(["items[0].id", "items[0].qty", "items[1].id", "items[1].qty"])

    compare_body(actual, expected, MatchMode.EXACT, non_empty_fields=non_empty)


def test_array_item_missing_template_key_fails() -> None:
    expected = {"items": [{"id": "x"}]}
    actual = {"items": [{"id": "x"}, {"name": "y"}]}

    with pytest.raises(ShapeViolationError, match="Missing property: id"):
        compare_body(actual, expected, MatchMode.EXACT)


def test_empty_expected_array_accepts_any_items() -> None:
    compare_body({"items": [1, "two", None]}, {"items": []}, MatchMode.EXACT)


def test_primitive_array_items_must_share_template_kind() -> None:
    with pytest.raises(ShapeViolationError, match="Array item 1 type mismatch in tags"):
        compare_body({"tags": ["a", 2]}, {"tags": ["a"]}, MatchMode.EXACT)


def test_container_kind_mismatches_fail() -> None:
    with pytest.raises(ShapeViolationError, match="items should be an array"):
        compare_body({"items": {"id": 1}}, {"items": [{"id": 1}]}, MatchMode.EXACT)
    with pytest.raises(ShapeViolationError, match="account should be an object"):
        compare_body({"account": [1]}, {"account": {"id": 1}}, MatchMode.EXACT)
    with pytest.raises(ShapeViolationError, match="Response body should be an object"):
        compare_body([{"id": 1}], {"id": 1}, MatchMode.EXACT)


def test_null_expected_leaf_requires_null_actual() -> None:
    compare_body({"reason": None}, {"reason": None}, MatchMode.EXACT)
    with pytest.raises(ValueViolationError, match="Null/undefined mismatch for reason"):
        compare_body({"reason": "x"}, {"reason": None}, MatchMode.EXACT)


def test_extra_properties_warn_in_exact_mode_only() -> None:
    actual = {"a": 1, "b": 2, "nested": {"c": 3, "d": 4}}
    expected = {"a": 1, "nested": {"c": 3}}

    exact_warnings = WarningCollector()
    compare_body(actual, expected, MatchMode.EXACT, warnings=exact_warnings)
    subset_warnings = WarningCollector()
    compare_body(actual, expected, MatchMode.SUBSET, warnings=subset_warnings)

    messages = [warning.message for warning in exact_warnings.warnings]
    assert messages == [
        "Extra properties found in response: b",
        "Extra properties found in response at 'nested': d",
    ]
    assert all(w.category == WarningCategory.EXTRA_PROPERTIES for w in exact_warnings.warnings)
    assert subset_warnings.warnings == ()


def test_subset_mode_still_compares_declared_values() -> None:
    with pytest.raises(ValueViolationError, match="Value mismatch for currency"):
        compare_body(
            {"currency": "USD", "amount": 1}, {"currency": "INR"}, MatchMode.SUBSET
        )


def test_root_array_applies_first_item_template() -> None:
    assert compare_body([{"id": "x"}, {"id": "x"}], [{"id": "x"}], MatchMode.EXACT) is True

    with pytest.raises(ShapeViolationError, match="Missing property: id") as excinfo:
        compare_body([{"other": 1}], [{"id": "x"}], MatchMode.EXACT)
    assert str(excinfo.value.field_path) == "[0].id"
    with pytest.raises(ShapeViolationError, match="Response body should be an array"):
        compare_body({"id": "x"}, [{"id": "x"}], MatchMode.SUBSET)


def test_scalar_or_empty_root_expectation_compares_nothing() -> None:
    assert compare_body({"anything": True}, [], MatchMode.EXACT) is False
    assert compare_body("text", "other", MatchMode.EXACT) is False


def test_dotted_body_key_is_exempted_by_matching_declared_path() -> None:
    non_empty = parse_field_paths(["a.b"])

    compare_body({"a.b": "2025"}, {"a.b": "2024"}, MatchMode.EXACT, non_empty_fields=non_empty)
    with pytest.raises(ValueViolationError, match="Value mismatch for a.b"):
        compare_body({"a.b": "2025"}, {"a.b": "2024"}, MatchMode.EXACT)


def test_null_array_template_only_matches_null_items() -> None:
    compare_body({"refs": [None, None]}, {"refs": [None]}, MatchMode.EXACT)
    with pytest.raises(ShapeViolationError, match="Array item 1 type mismatch in refs"):
        compare_body({"refs": [None, {"id": 1}]}, {"refs": [None]}, MatchMode.EXACT)


@pytest.mark.parametrize(
    ("left", "right", "equal"),
    [
        (1, 1.0, True),
        (True, 1, False),
        ("1", 1, False),
        (None, None, True),
        ([1, 2], [1, 2], True),
        ({"a": 1}, {"a": 1}, True),
    ],
)
def test_strict_equality_respects_json_kinds(left: object, right: object, equal: bool) -> None:
    assert strictly_equal(left, right) is equal


def test_value_compared_against_itself_never_fails() -> None:
    body = {
        "id": "TX123456",
        "amount": 10.5,
        "flags": [True, False],
        "nested": {"list": [{"k": 1}, {"k": 1}], "none": None},
    }

    compare_body(body, body, MatchMode.EXACT)
