"""Balance, payment status and card data scan tests."""

from __future__ import annotations

import pytest
from fintech_api_tester.response_validation.compliance_checks import (
    scan_for_card_data,
    validate_balance_consistency,
    validate_payment_status,
)
from fintech_api_tester.response_validation.expectation_rules import BalanceConfig
from fintech_api_tester.response_validation.validation_outcomes import (
    ComplianceViolationError,
    WarningCategory,
    WarningCollector,
)

CONFIG = BalanceConfig(
    available_balance_path="balance.available",
    current_balance_path="balance.current",
    pending_amount_path="balance.pending",
)


def test_consistent_balance_passes() -> None:
    validate_balance_consistency(
        {"balance": {"available": "80.00", "current": 100, "pending": 20}}, CONFIG
    )
    validate_balance_consistency(
        {"balance": {"available": 100.004, "current": "100.00"}}, CONFIG
    )


def test_inconsistent_balance_fails() -> None:
    with pytest.raises(ComplianceViolationError) as excinfo:
        validate_balance_consistency(
            {"balance": {"available": 90, "current": 100, "pending": 20}}, CONFIG
        )

    assert str(excinfo.value) == (
        "Balance validation failed: Available=90, Current=100, Pending=20. Difference=10"
    )


def test_balance_check_skips_absent_balances() -> None:
    validate_balance_consistency({"balance": {"available": 90}}, CONFIG)
    validate_balance_consistency({"balance": {"available": None, "current": 1}}, CONFIG)


def test_non_numeric_balance_fails() -> None:
    with pytest.raises(ComplianceViolationError, match="Balance field balance.current"):
        validate_balance_consistency(
            {"balance": {"available": 90, "current": "n/a"}}, CONFIG
        )


@pytest.mark.parametrize(
    ("status", "previous"),
    [
        ("pending", None),
        ("pending", "initiated"),
        ("completed", "processing"),
        ("refunded", "completed"),
        ("initiated", "completed"),
    ],
)
def test_allowed_payment_statuses_pass(status: str, previous: str | None) -> None:
    validate_payment_status(status, previous)


def test_unknown_payment_status_fails() -> None:
    with pytest.raises(ComplianceViolationError, match="Invalid payment status: settled"):
        validate_payment_status("settled")
    with pytest.raises(ComplianceViolationError, match="Invalid payment status: None"):
        validate_payment_status(None)


def test_disallowed_transition_fails() -> None:
    with pytest.raises(ComplianceViolationError) as excinfo:
        validate_payment_status("completed", "pending")

    assert str(excinfo.value) == "Invalid status transition: pending -> completed"


def test_card_scan_warns_about_raw_card_numbers_and_cvv() -> None:
    warnings = WarningCollector()
    body = {
        "card": {"number": "4111 1111 1111 1111", "cvv": "123", "last4": "1111"},
        "cards": [{"pan": 4111111111111111}],
        "reference": "TXN-12345678",
    }

    scan_for_card_data(body, warnings)

    assert all(w.category == WarningCategory.PCI_COMPLIANCE for w in warnings.warnings)
    assert [w.message for w in warnings.warnings] == [
        "Potential unmasked card number found in card.number",
        "Potential CVV value found in card.cvv",
        "Potential unmasked card number found in cards[0].pan",
    ]


def test_card_scan_of_a_bare_string_names_the_response() -> None:
    warnings = WarningCollector()

    scan_for_card_data("card 4111-1111-1111-1111 declined", warnings)

    assert warnings.warnings[0].message == "Potential unmasked card number found in response"
