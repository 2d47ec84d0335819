"""Recursive structural comparison of response bodies against expectations."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from enum import Enum

from .field_paths import MISSING, ROOT, FieldPath
from .json_kinds import JsonKind, json_kind
from .validation_outcomes import (
    ShapeViolationError,
    ValueViolationError,
    WarningCategory,
    WarningCollector,
    display_value,
)

logger = logging.getLogger(__name__)


class MatchMode(str, Enum):
    """How strictly the actual body must follow the expected body."""

    EXACT = "exact"
    SUBSET = "subset"


def compare_body(
    actual: object,
    expected: object,
    mode: MatchMode,
    non_empty_fields: frozenset[FieldPath] = frozenset(),
    warnings: WarningCollector | None = None,
    current_path: FieldPath = ROOT,
) -> bool:
    """Compare `actual` against the shape and values declared in `expected`.

    Only the expected side is walked. Extra keys on the actual side are
    reported as warnings in EXACT mode and ignored in SUBSET mode. Arrays,
    including a root array, use the first expected element as a template for
    every actual element. Leaf values under a path listed in
    `non_empty_fields` are not compared; paths match on their rendered text,
    so a declared `a.b` also covers a body key literally named "a.b".

    Returns:
      False when `expected` is neither an object nor a non-empty array and
      nothing was compared.

    Raises:
      ShapeViolationError: On a missing property or wrong container kind.
      ValueViolationError: On the first differing leaf value.
    """
    expected_kind = json_kind(expected)
    if expected_kind not in (JsonKind.OBJECT, JsonKind.ARRAY):
        return False
    if expected_kind == JsonKind.ARRAY and not expected:
        return False

    label = "Response body" if current_path.is_root else current_path.leaf_name
    if json_kind(actual) != expected_kind:
        raise ShapeViolationError(
            f"{label} should be an {expected_kind.value}",
            field_path=current_path,
            expected=expected,
            actual=actual,
        )
    walk = _Walk(
        mode=mode,
        exempt_paths=frozenset(str(path) for path in non_empty_fields),
        warnings=warnings if warnings is not None else WarningCollector(),
    )
    if expected_kind == JsonKind.ARRAY:
        assert isinstance(expected, Sequence) and isinstance(actual, Sequence)
        _compare_array_items(actual, expected, label, current_path, walk)
    else:
        assert isinstance(expected, Mapping) and isinstance(actual, Mapping)
        _compare_object(actual, expected, walk, current_path)
    return True


@dataclass(frozen=True)
class _Walk:
    """Settings shared by every level of one comparison."""

    mode: MatchMode
    exempt_paths: frozenset[str]
    warnings: WarningCollector


def _compare_object(
    actual: Mapping[str, object],
    expected: Mapping[str, object],
    walk: _Walk,
    path: FieldPath,
) -> None:
    if walk.mode == MatchMode.EXACT:
        _report_extra_properties(actual, expected, walk.warnings, path)

    for key, expected_value in expected.items():
        field_path = path.child(key)
        if key not in actual:
            raise ShapeViolationError(
                f"Missing property: {key}",
                field_path=field_path,
                expected=expected_value,
                actual=MISSING,
            )
        _compare_field(actual[key], expected_value, key, field_path, walk)

    logger.debug("Body validation completed for %d properties at '%s'", len(expected), path)


def _report_extra_properties(
    actual: Mapping[str, object],
    expected: Mapping[str, object],
    warnings: WarningCollector,
    path: FieldPath,
) -> None:
    extra_keys = [key for key in actual if key not in expected]
    if not extra_keys:
        return
    location = "" if path.is_root else f" at '{path}'"
    warnings.warn(
        WarningCategory.EXTRA_PROPERTIES,
        f"Extra properties found in response{location}: {', '.join(extra_keys)}",
        field_path=path,
    )


def _compare_field(
    actual_value: object,
    expected_value: object,
    key: str,
    field_path: FieldPath,
    walk: _Walk,
) -> None:
    expected_kind = json_kind(expected_value)
    actual_kind = json_kind(actual_value)

    if expected_kind == JsonKind.ARRAY:
        if actual_kind != JsonKind.ARRAY:
            raise ShapeViolationError(
                f"{key} should be an array",
                field_path=field_path,
                expected=expected_value,
                actual=actual_value,
            )
        assert isinstance(expected_value, Sequence) and isinstance(actual_value, Sequence)
        _compare_array_items(actual_value, expected_value, key, field_path, walk)
        return

    if expected_kind == JsonKind.OBJECT:
        if actual_kind != JsonKind.OBJECT:
            raise ShapeViolationError(
                f"{key} should be an object",
                field_path=field_path,
                expected=expected_value,
                actual=actual_value,
            )
        assert isinstance(expected_value, Mapping) and isinstance(actual_value, Mapping)
        logger.debug("Validating nested object: %s", field_path)
        _compare_object(actual_value, expected_value, walk, field_path)
        return

    if str(field_path) in walk.exempt_paths:
        logger.debug("Skipping exact value match for '%s' (checked for non-emptiness)", field_path)
        return
    _compare_leaf(actual_value, expected_value, key, field_path)


def _compare_array_items(
    actual_items: Sequence[object],
    expected_items: Sequence[object],
    key: str,
    field_path: FieldPath,
    walk: _Walk,
) -> None:
    if not expected_items:
        return
    template = expected_items[0]
    template_kind = json_kind(template)

    for index, item in enumerate(actual_items):
        item_path = field_path.item(index)
        item_kind = json_kind(item)
        if template_kind == JsonKind.OBJECT:
            if item_kind != JsonKind.OBJECT:
                raise ShapeViolationError(
                    f"Array item {index} in {key} should be an object",
                    field_path=item_path,
                    expected=template,
                    actual=item,
                )
            assert isinstance(template, Mapping) and isinstance(item, Mapping)
            logger.debug("Validating array item %d for %s", index, key)
            _compare_object(item, template, walk, item_path)
        elif template_kind == JsonKind.ARRAY:
            if item_kind != JsonKind.ARRAY:
                raise ShapeViolationError(
                    f"Array item {index} in {key} should be an array",
                    field_path=item_path,
                    expected=template,
                    actual=item,
                )
            assert isinstance(template, Sequence) and isinstance(item, Sequence)
            _compare_array_items(item, template, key, item_path, walk)
        # A null template only matches null items.
        elif item_kind != template_kind:
            raise ShapeViolationError(
                f"Array item {index} type mismatch in {key}",
                field_path=item_path,
                expected=template_kind.value,
                actual=item_kind.value,
            )


def _compare_leaf(
    actual_value: object,
    expected_value: object,
    key: str,
    field_path: FieldPath,
) -> None:
    if expected_value is None:
        if actual_value is not None:
            raise ValueViolationError(
                f"Null/undefined mismatch for {key}",
                field_path=field_path,
                expected=None,
                actual=actual_value,
            )
        return

    if not strictly_equal(actual_value, expected_value):
        raise ValueViolationError(
            f"Value mismatch for {key}. "
            f"Expected: {display_value(expected_value)}, Got: {display_value(actual_value)}",
            field_path=field_path,
            expected=expected_value,
            actual=actual_value,
        )


def strictly_equal(actual: object, expected: object) -> bool:
    """Equality without cross-kind coercion (`True` never equals `1`)."""
    return json_kind(actual) == json_kind(expected) and actual == expected
