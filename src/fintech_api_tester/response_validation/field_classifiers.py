"""Domain-specific checks applied to declared field paths and response metadata."""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Mapping, Sequence
from decimal import Decimal, InvalidOperation

from .field_paths import MISSING, FieldPath, as_field_path, resolve
from .validation_outcomes import (
    MonetaryAmountError,
    StatusMismatchError,
    TransactionIdError,
    WarningCategory,
    WarningCollector,
)

logger = logging.getLogger(__name__)

AMOUNT_LIMIT = Decimal(1_000_000_000)
MAX_CURRENCY_DECIMALS = 2
MIN_TRANSACTION_ID_LENGTH = 6

_NUMERIC_TEXT_PATTERN = re.compile(r"[+-]?(?:\d+(?:\.(\d*))?|\.(\d+))(?:[eE][+-]?\d+)?")
_TRANSACTION_ID_PATTERN = re.compile(r"[A-Za-z0-9_-]+")
_MASK_PATTERN = re.compile(r"\*{3,}|XXX")
_SENSITIVE_PATH_MARKERS = ("card", "account")
_ALLOWED_FRAME_OPTIONS = ("DENY", "SAMEORIGIN")


def validate_status(expected_status: int, actual_status: int, body: object) -> None:
    """Require an exact status code match."""
    if actual_status != expected_status:
        rendered_body = json.dumps(body, ensure_ascii=False, default=str)
        raise StatusMismatchError(
            f"Status mismatch. Expected: {expected_status}, Got: {actual_status}\n"
            f"Response: {rendered_body}",
            expected=expected_status,
            actual=actual_status,
        )


def validate_response_time(
    expected_ms: int, duration_ms: float | None, warnings: WarningCollector
) -> None:
    """Warn when a measured response time exceeds its threshold."""
    if duration_ms is None or duration_ms <= expected_ms:
        return
    warnings.warn(
        WarningCategory.RESPONSE_TIME,
        f"Response time exceeded. Expected: {expected_ms}ms, Got: {duration_ms:.0f}ms",
    )


def validate_security_headers(headers: Mapping[str, str], warnings: WarningCollector) -> None:
    """Inspect response headers for common security settings. Never raises."""
    normalized = {name.lower(): value for name, value in headers.items()}

    if not normalized.get("content-type"):
        warnings.warn(WarningCategory.SECURITY_HEADER, "Content-Type header missing")

    allow_origin = normalized.get("access-control-allow-origin")
    if allow_origin is not None and allow_origin.strip() == "*":
        warnings.warn(
            WarningCategory.SECURITY_HEADER,
            "Security: Access-Control-Allow-Origin should not be '*'",
        )

    content_type_options = normalized.get("x-content-type-options")
    if content_type_options is not None and content_type_options.strip().lower() != "nosniff":
        warnings.warn(
            WarningCategory.SECURITY_HEADER,
            "X-Content-Type-Options should be 'nosniff'",
        )

    frame_options = normalized.get("x-frame-options")
    if frame_options is not None and frame_options.strip().upper() not in _ALLOWED_FRAME_OPTIONS:
        warnings.warn(
            WarningCategory.SECURITY_HEADER,
            f"X-Frame-Options should be one of: {', '.join(_ALLOWED_FRAME_OPTIONS)}",
        )


def validate_monetary_amounts(
    actual: object, amount_fields: Sequence[FieldPath | str], warnings: WarningCollector
) -> None:
    """Check that declared amount fields hold finite, plausible currency values.

    Numbers and numeric strings are accepted. Null or absent fields are skipped.
    A string amount with more than two fractional digits is only flagged.

    Raises:
      MonetaryAmountError: When a value is not numeric or exceeds one billion in magnitude.
    """
    for field in amount_fields:
        path = as_field_path(field)
        amount = resolve(actual, path)
        if amount is None or amount is MISSING:
            continue

        numeric_amount = parse_amount(amount)
        if numeric_amount is None or not numeric_amount.is_finite():
            raise MonetaryAmountError(
                f"Invalid amount format in {path}: {amount}", field_path=path, actual=amount
            )
        if abs(numeric_amount) > AMOUNT_LIMIT:
            raise MonetaryAmountError(
                f"Amount out of reasonable bounds in {path}: {amount}",
                field_path=path,
                expected=f"between -{AMOUNT_LIMIT} and {AMOUNT_LIMIT}",
                actual=amount,
            )

        if isinstance(amount, str) and _fractional_digits(amount) > MAX_CURRENCY_DECIMALS:
            warnings.warn(
                WarningCategory.AMOUNT_PRECISION,
                f"Amount in {path} has more than {MAX_CURRENCY_DECIMALS} decimal places: {amount}",
                field_path=path,
            )
        logger.debug("Validated amount: %s = %s", path, amount)


def validate_transaction_ids(
    actual: object, transaction_id_fields: Sequence[FieldPath | str]
) -> None:
    """Check that declared transaction-ID fields are alphanumeric strings of six or more chars.

    Raises:
      TransactionIdError: For the first malformed identifier.
    """
    for field in transaction_id_fields:
        path = as_field_path(field)
        transaction_id = resolve(actual, path)
        if transaction_id is None or transaction_id is MISSING:
            continue

        if not isinstance(transaction_id, str):
            raise TransactionIdError(
                f"Transaction ID {path} should be a string", field_path=path, actual=transaction_id
            )
        if len(transaction_id) < MIN_TRANSACTION_ID_LENGTH:
            raise TransactionIdError(
                f"Transaction ID {path} is too short: {transaction_id}",
                field_path=path,
                actual=transaction_id,
            )
        if _TRANSACTION_ID_PATTERN.fullmatch(transaction_id) is None:
            raise TransactionIdError(
                f"Invalid transaction ID format in {path}: {transaction_id}",
                field_path=path,
                actual=transaction_id,
            )
        logger.debug("Validated transaction ID: %s = %s", path, transaction_id)


def validate_sensitive_data_masking(
    actual: object, sensitive_fields: Sequence[FieldPath | str], warnings: WarningCollector
) -> None:
    """Flag card/account fields that carry no masking marker. Never raises."""
    for field in sensitive_fields:
        path = as_field_path(field)
        value = resolve(actual, path)
        if not isinstance(value, str) or not value:
            continue
        if is_sensitive_path(path) and not is_masked(value):
            warnings.warn(
                WarningCategory.UNMASKED_FIELD,
                f"{path} should be masked but found: {value}",
                field_path=path,
            )
        logger.debug("Validated masking for: %s", path)


def is_sensitive_path(path: FieldPath | str) -> bool:
    lowered = str(path).lower()
    return any(marker in lowered for marker in _SENSITIVE_PATH_MARKERS)


def is_masked(value: str) -> bool:
    return _MASK_PATTERN.search(value) is not None


def parse_amount(value: object) -> Decimal | None:
    """Parse a number or numeric string into a Decimal; None when not numeric."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        return value
    if isinstance(value, int | float):
        return Decimal(str(value))
    if not isinstance(value, str):
        return None
    stripped = value.strip()
    if _NUMERIC_TEXT_PATTERN.fullmatch(stripped) is None:
        return None
    try:
        return Decimal(stripped)
    except InvalidOperation:
        return None


def _fractional_digits(text: str) -> int:
    match = _NUMERIC_TEXT_PATTERN.fullmatch(text.strip())
    if match is None:
        return 0
    fraction = match.group(1) or match.group(2) or ""
    return len(fraction)
