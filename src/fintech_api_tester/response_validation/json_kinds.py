"""Runtime classification of decoded JSON values."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from decimal import Decimal
from enum import Enum

from .field_paths import MISSING


class UnsupportedJsonValueError(TypeError):
    """Raised when a value cannot have come from decoded JSON."""


class JsonKind(str, Enum):
    """Kinds a decoded JSON value can take."""

    MISSING = "missing"
    NULL = "null"
    BOOLEAN = "boolean"
    NUMBER = "number"
    STRING = "string"
    ARRAY = "array"
    OBJECT = "object"


_TYPE_NAMES = {
    JsonKind.MISSING: "undefined",
    JsonKind.NULL: "null",
    JsonKind.BOOLEAN: "boolean",
    JsonKind.NUMBER: "number",
    JsonKind.STRING: "string",
    JsonKind.ARRAY: "array",
    JsonKind.OBJECT: "object",
}


def json_kind(value: object) -> JsonKind:
    """Classify a value; booleans are never numbers."""
    if value is MISSING:
        return JsonKind.MISSING
    if value is None:
        return JsonKind.NULL
    if isinstance(value, bool):
        return JsonKind.BOOLEAN
    if isinstance(value, int | float | Decimal):
        return JsonKind.NUMBER
    if isinstance(value, str):
        return JsonKind.STRING
    if isinstance(value, Mapping):
        return JsonKind.OBJECT
    if isinstance(value, Sequence) and not isinstance(value, bytes):
        return JsonKind.ARRAY
    raise UnsupportedJsonValueError(f"Unsupported JSON value type: {type(value).__name__}")


def json_type_name(value: object) -> str:
    """Type name used by `dataType` custom rules."""
    return _TYPE_NAMES[json_kind(value)]
