"""Presence and non-emptiness checks for declared field paths."""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping, Sequence
from decimal import Decimal

from .field_paths import MISSING, FieldPath, as_field_path, resolve
from .json_kinds import JsonKind, json_kind
from .validation_outcomes import NonEmptyFieldError

logger = logging.getLogger(__name__)


def validate_non_empty_fields(actual: object, fields: Sequence[FieldPath | str]) -> None:
    """Require every declared path to exist and hold a non-empty value.

    Strings must contain non-whitespace text, arrays and objects need at least
    one entry, and numbers must not be NaN. Booleans only need to exist.

    Raises:
      NonEmptyFieldError: For the first missing or empty field, in declaration order.
    """
    for field in fields:
        path = as_field_path(field)
        logger.debug("Validating non-empty field: %s", path)
        _check_field(path, resolve(actual, path))
    logger.debug("Non-empty field validation completed for %d fields", len(fields))


def _check_field(path: FieldPath, value: object) -> None:
    if value is MISSING:
        raise NonEmptyFieldError(f"Field '{path}' should exist", field_path=path, actual=value)
    if value is None:
        raise NonEmptyFieldError(
            f"Field '{path}' should not be null", field_path=path, actual=value
        )

    kind = json_kind(value)
    if kind == JsonKind.STRING:
        assert isinstance(value, str)
        if not value.strip():
            raise NonEmptyFieldError(
                f"String field '{path}' should not be empty", field_path=path, actual=value
            )
    elif kind == JsonKind.ARRAY:
        assert isinstance(value, Sequence)
        if not value:
            raise NonEmptyFieldError(
                f"Array field '{path}' should not be empty", field_path=path, actual=value
            )
    elif kind == JsonKind.OBJECT:
        assert isinstance(value, Mapping)
        if not value:
            raise NonEmptyFieldError(
                f"Object field '{path}' should not be empty", field_path=path, actual=value
            )
    elif kind == JsonKind.NUMBER:
        if isinstance(value, float | Decimal) and math.isnan(value):
            raise NonEmptyFieldError(
                f"Number field '{path}' should not be NaN", field_path=path, actual=value
            )
