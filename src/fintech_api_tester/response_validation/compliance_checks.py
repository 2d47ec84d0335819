"""Opt-in fintech compliance checks: balance arithmetic, payment statuses, card data."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterator, Mapping, Sequence
from decimal import Decimal

from .expectation_rules import BalanceConfig
from .field_paths import MISSING, ROOT, FieldPath, resolve
from .field_classifiers import parse_amount
from .validation_outcomes import (
    ComplianceViolationError,
    WarningCategory,
    WarningCollector,
)

logger = logging.getLogger(__name__)

BALANCE_TOLERANCE = Decimal("0.01")

PAYMENT_STATUSES = frozenset(
    {"pending", "processing", "completed", "failed", "cancelled", "refunded", "initiated"}
)
# current status -> statuses it may follow
ALLOWED_PREVIOUS_STATUSES: Mapping[str, frozenset[str]] = {
    "pending": frozenset({"initiated", "processing"}),
    "processing": frozenset({"pending"}),
    "completed": frozenset({"processing"}),
    "failed": frozenset({"pending", "processing"}),
    "cancelled": frozenset({"pending", "initiated"}),
    "refunded": frozenset({"completed"}),
}

_CARD_NUMBER_PATTERN = re.compile(r"(?<!\d)\d{4}[\s-]?\d{4}[\s-]?\d{4}[\s-]?\d{4}(?!\d)")
_CVV_PATTERN = re.compile(r"\d{3,4}")
_CVV_FIELD_NAMES = frozenset({"cvv", "cvv2", "cvc", "cvc2", "securitycode"})


def validate_balance_consistency(actual: object, balance_config: BalanceConfig) -> None:
    """Require available balance == current balance - pending amount, within one cent.

    Skipped when either the available or the current balance is absent.

    Raises:
      ComplianceViolationError: When a balance is not numeric or the arithmetic does not hold.
    """
    available_raw = resolve(actual, balance_config.available_balance_path)
    current_raw = resolve(actual, balance_config.current_balance_path)
    if _absent(available_raw) or _absent(current_raw):
        logger.debug("Balance check skipped: available or current balance absent")
        return

    pending_raw: object = None
    if balance_config.pending_amount_path:
        pending_raw = resolve(actual, balance_config.pending_amount_path)

    available = _balance_amount(balance_config.available_balance_path, available_raw)
    current = _balance_amount(balance_config.current_balance_path, current_raw)
    pending = (
        _balance_amount(str(balance_config.pending_amount_path), pending_raw)
        if not _absent(pending_raw)
        else Decimal(0)
    )

    difference = abs(available - (current - pending))
    if difference >= BALANCE_TOLERANCE:
        raise ComplianceViolationError(
            f"Balance validation failed: Available={available}, Current={current}, "
            f"Pending={pending}. Difference={difference}",
            field_path=balance_config.available_balance_path,
            expected=current - pending,
            actual=available,
        )
    logger.info(
        "Balance validation: Available=%s, Current=%s, Pending=%s", available, current, pending
    )


def _absent(value: object) -> bool:
    return value is None or value is MISSING


def _balance_amount(path: str, value: object) -> Decimal:
    amount = parse_amount(value)
    if amount is None or not amount.is_finite():
        raise ComplianceViolationError(
            f"Balance field {path} is not numeric: {value}", field_path=path, actual=value
        )
    return amount


def validate_payment_status(status: object, previous_status: str | None = None) -> None:
    """Require a known payment status and, when a previous one is known, a legal transition.

    Raises:
      ComplianceViolationError: For an unknown status or a disallowed transition.
    """
    if not isinstance(status, str) or status not in PAYMENT_STATUSES:
        raise ComplianceViolationError(f"Invalid payment status: {status}", actual=status)

    allowed = ALLOWED_PREVIOUS_STATUSES.get(status)
    if previous_status and allowed is not None:
        if previous_status not in allowed:
            raise ComplianceViolationError(
                f"Invalid status transition: {previous_status} -> {status}",
                expected=sorted(allowed),
                actual=previous_status,
            )
        logger.info("Valid status transition: %s -> %s", previous_status, status)


def scan_for_card_data(actual: object, warnings: WarningCollector) -> None:
    """Warn about leaves that look like raw card numbers or security codes."""
    for path, value in _iter_leaves(actual, ROOT):
        text = str(value)
        location = "response" if path.is_root else str(path)
        if _CARD_NUMBER_PATTERN.search(text):
            warnings.warn(
                WarningCategory.PCI_COMPLIANCE,
                f"Potential unmasked card number found in {location}",
                field_path=path,
            )
        leaf_name = (path.leaf_name or "").lower()
        if leaf_name in _CVV_FIELD_NAMES and _CVV_PATTERN.fullmatch(text):
            warnings.warn(
                WarningCategory.PCI_COMPLIANCE,
                f"Potential CVV value found in {path}",
                field_path=path,
            )
    logger.debug("PCI compliance scan completed")


def _iter_leaves(value: object, path: FieldPath) -> Iterator[tuple[FieldPath, object]]:
    if isinstance(value, Mapping):
        for key, child in value.items():
            yield from _iter_leaves(child, path.child(str(key)))
    elif isinstance(value, Sequence) and not isinstance(value, str | bytes):
        for index, item in enumerate(value):
            yield from _iter_leaves(item, path.item(index))
    elif isinstance(value, str | int) and not isinstance(value, bool):
        yield path, value
