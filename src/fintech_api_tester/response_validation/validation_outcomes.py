"""Response validation outcomes: fatal errors, advisory warnings, and reports."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from enum import Enum

from .field_paths import MISSING, FieldPath

logger = logging.getLogger(__name__)


class ResponseValidationError(Exception):
    """Fatal validation failure carrying the offending location and values."""

    def __init__(
        self,
        message: str,
        *,
        field_path: FieldPath | str | None = None,
        expected: object = None,
        actual: object = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.field_path = str(field_path) if field_path is not None else None
        self.expected = expected
        self.actual = actual


class StatusMismatchError(ResponseValidationError):
    """HTTP status code differs from the expected status."""


class ShapeViolationError(ResponseValidationError):
    """Actual structure differs from the expected structure."""


class ValueViolationError(ResponseValidationError):
    """A correctly shaped field holds the wrong primitive value."""


class FieldClassifierViolationError(ResponseValidationError):
    """A field-level check on a declared path failed."""


class NonEmptyFieldError(FieldClassifierViolationError):
    """A declared non-empty field is missing or empty."""


class MonetaryAmountError(FieldClassifierViolationError):
    """A monetary field is not a usable amount."""


class TransactionIdError(FieldClassifierViolationError):
    """A transaction identifier is malformed."""


class CustomRuleViolationError(FieldClassifierViolationError):
    """An ad hoc custom validation rule failed."""


class ComplianceViolationError(FieldClassifierViolationError):
    """Balance or payment-status consistency check failed."""


class WarningCategory(str, Enum):
    """Advisory findings that never fail a test case."""

    EXTRA_PROPERTIES = "extra_properties"
    RESPONSE_TIME = "response_time"
    SECURITY_HEADER = "security_header"
    UNMASKED_FIELD = "unmasked_field"
    AMOUNT_PRECISION = "amount_precision"
    UNKNOWN_CUSTOM_RULE = "unknown_custom_rule"
    PCI_COMPLIANCE = "pci_compliance"
    RATE_LIMIT = "rate_limit"


@dataclass(frozen=True)
class ValidationWarning:
    """One advisory finding."""

    category: WarningCategory
    message: str
    field_path: str | None = None


class WarningCollector:
    """Sink for advisory findings raised during one validation call."""

    def __init__(self) -> None:
        self._warnings: list[ValidationWarning] = []

    def warn(
        self,
        category: WarningCategory,
        message: str,
        field_path: FieldPath | str | None = None,
    ) -> None:
        path = str(field_path) if field_path is not None else None
        self._warnings.append(
            ValidationWarning(category=category, message=message, field_path=path)
        )
        if category == WarningCategory.UNKNOWN_CUSTOM_RULE:
            logger.info(message)
        else:
            logger.warning(message)

    @property
    def warnings(self) -> tuple[ValidationWarning, ...]:
        return tuple(self._warnings)


@dataclass(frozen=True)
class ValidationReport:
    """Outcome of a successful validation call."""

    warnings: tuple[ValidationWarning, ...]
    checks_run: tuple[str, ...]

    @property
    def has_warnings(self) -> bool:
        return bool(self.warnings)

    def warnings_in(self, category: WarningCategory) -> tuple[ValidationWarning, ...]:
        return tuple(warning for warning in self.warnings if warning.category == category)


def display_value(value: object) -> str:
    """Render a JSON value the way failure messages show it."""
    if value is MISSING:
        return "undefined"
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return value
    if isinstance(value, Mapping) or (
        isinstance(value, Sequence) and not isinstance(value, bytes)
    ):
        return json.dumps(value, ensure_ascii=False, separators=(",", ":"), default=str)
    return str(value)
