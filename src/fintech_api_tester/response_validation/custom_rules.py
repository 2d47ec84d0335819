"""Ad hoc custom rules and array-level constraints."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence

from .body_comparator import MatchMode, compare_body, strictly_equal
from .expectation_rules import ArrayExpectation, CustomRuleType, CustomValidationRule
from .field_classifiers import parse_amount
from .field_paths import ROOT, FieldPath, resolve
from .json_kinds import JsonKind, json_kind, json_type_name
from .validation_outcomes import (
    CustomRuleViolationError,
    ShapeViolationError,
    WarningCategory,
    WarningCollector,
    display_value,
)

logger = logging.getLogger(__name__)


def apply_custom_rule(
    actual: object, rule: CustomValidationRule, warnings: WarningCollector
) -> None:
    """Apply one custom rule to the value at `rule.field`.

    Unknown rule types are reported as notices and otherwise ignored.

    Raises:
      CustomRuleViolationError: When a known rule does not hold.
    """
    value = resolve(actual, rule.field)
    try:
        rule_type = CustomRuleType(rule.type)
    except ValueError:
        warnings.warn(
            WarningCategory.UNKNOWN_CUSTOM_RULE,
            f"Unknown validation type: {rule.type}",
            field_path=rule.field,
        )
        return

    if rule_type == CustomRuleType.ARRAY_LENGTH:
        _check_array_length(rule, value)
    elif rule_type == CustomRuleType.CONTAINS:
        _check_contains(rule, value)
    elif rule_type == CustomRuleType.GREATER_THAN:
        _check_greater_than(rule, value)
    elif rule_type == CustomRuleType.DATA_TYPE:
        _check_data_type(rule, value)
    logger.debug("Custom rule %s passed for %s", rule.type, rule.field)


def _check_array_length(rule: CustomValidationRule, value: object) -> None:
    if json_kind(value) != JsonKind.ARRAY:
        raise CustomRuleViolationError(
            f"{rule.field} is not an array", field_path=rule.field, actual=value
        )
    assert isinstance(value, Sequence)
    if len(value) != rule.expected_length:
        raise CustomRuleViolationError(
            f"Array {rule.field} has length {len(value)}, expected {rule.expected_length}",
            field_path=rule.field,
            expected=rule.expected_length,
            actual=len(value),
        )


def _check_contains(rule: CustomValidationRule, value: object) -> None:
    kind = json_kind(value)
    if kind == JsonKind.STRING:
        assert isinstance(value, str)
        found = isinstance(rule.expected_value, str) and rule.expected_value in value
    elif kind == JsonKind.ARRAY:
        assert isinstance(value, Sequence)
        found = any(strictly_equal(item, rule.expected_value) for item in value)
    else:
        raise CustomRuleViolationError(
            f"Field {rule.field} is not an array or string",
            field_path=rule.field,
            expected=rule.expected_value,
            actual=value,
        )
    if not found:
        raise CustomRuleViolationError(
            f"Field {rule.field} does not contain {display_value(rule.expected_value)}",
            field_path=rule.field,
            expected=rule.expected_value,
            actual=value,
        )


def _check_greater_than(rule: CustomValidationRule, value: object) -> None:
    actual_number = parse_amount(value)
    threshold = parse_amount(rule.expected_value)
    if actual_number is None or threshold is None or not actual_number > threshold:
        raise CustomRuleViolationError(
            f"Field {rule.field} ({display_value(value)}) is not greater than "
            f"{display_value(rule.expected_value)}",
            field_path=rule.field,
            expected=rule.expected_value,
            actual=value,
        )


def _check_data_type(rule: CustomValidationRule, value: object) -> None:
    actual_type = json_type_name(value)
    if actual_type != rule.expected_type:
        raise CustomRuleViolationError(
            f"Type mismatch for {rule.field}. Expected: {rule.expected_type}, Got: {actual_type}",
            field_path=rule.field,
            expected=rule.expected_type,
            actual=actual_type,
        )


def validate_array_response(
    actual: object, expectation: ArrayExpectation, warnings: WarningCollector
) -> None:
    """Check length bounds of an array and compare each item with `item_structure`.

    Raises:
      ShapeViolationError: When the addressed value is not an array or an item is misshapen.
      CustomRuleViolationError: When a length bound does not hold.
      ValueViolationError: When an item value differs from `item_structure`.
    """
    path = FieldPath.parse(expectation.field) if expectation.field else ROOT
    value = resolve(actual, path)
    label = "Response" if path.is_root else str(path)
    if json_kind(value) != JsonKind.ARRAY:
        raise ShapeViolationError(f"{label} is not an array", field_path=path, actual=value)
    assert isinstance(value, Sequence)

    length = len(value)
    if expectation.min_length is not None and length < expectation.min_length:
        raise CustomRuleViolationError(
            f"Array length {length} is less than {expectation.min_length}",
            field_path=path,
            expected=expectation.min_length,
            actual=length,
        )
    if expectation.max_length is not None and length > expectation.max_length:
        raise CustomRuleViolationError(
            f"Array length {length} is greater than {expectation.max_length}",
            field_path=path,
            expected=expectation.max_length,
            actual=length,
        )
    if expectation.exact_length is not None and length != expectation.exact_length:
        raise CustomRuleViolationError(
            f"Array length {length} does not equal {expectation.exact_length}",
            field_path=path,
            expected=expectation.exact_length,
            actual=length,
        )

    if isinstance(expectation.item_structure, Mapping):
        for index, item in enumerate(value):
            compare_body(
                item,
                expectation.item_structure,
                MatchMode.EXACT,
                warnings=warnings,
                current_path=path.item(index),
            )
