"""Status, timing, header, amount, transaction-ID and masking check tests."""

from __future__ import annotations

from decimal import Decimal

import pytest
from fintech_api_tester.response_validation.field_classifiers import (
    parse_amount,
    validate_monetary_amounts,
    validate_response_time,
    validate_security_headers,
    validate_sensitive_data_masking,
    validate_status,
    validate_transaction_ids,
)
from fintech_api_tester.response_validation.validation_outcomes import (
    MonetaryAmountError,
    StatusMismatchError,
    TransactionIdError,
    WarningCategory,
    WarningCollector,
)


def test_status_mismatch_includes_response_body() -> None:
    validate_status(200, 200, {"ok": True})

    with pytest.raises(StatusMismatchError) as excinfo:
        validate_status(200, 401, {"error": "unauthorized"})

    assert str(excinfo.value).startswith("Status mismatch. Expected: 200, Got: 401")
    assert '"error": "unauthorized"' in str(excinfo.value)
    assert excinfo.value.expected == 200
    assert excinfo.value.actual == 401


def test_slow_response_only_warns() -> None:
    warnings = WarningCollector()

    validate_response_time(500, 499.0, warnings)
    validate_response_time(500, None, warnings)
    validate_response_time(500, 750.4, warnings)

    assert [w.message for w in warnings.warnings] == [
        "Response time exceeded. Expected: 500ms, Got: 750ms"
    ]
    assert warnings.warnings[0].category == WarningCategory.RESPONSE_TIME


def test_security_headers_flag_weak_settings() -> None:
    warnings = WarningCollector()

    validate_security_headers(
        {
            "Access-Control-Allow-Origin": "*",
            "X-Content-Type-Options": "sniff",
            "X-Frame-Options": "ALLOW-FROM https://example.com",
        },
        warnings,
    )

    messages = [w.message for w in warnings.warnings]
    assert messages == [
        "Content-Type header missing",
        "Security: Access-Control-Allow-Origin should not be '*'",
        "X-Content-Type-Options should be 'nosniff'",
        "X-Frame-Options should be one of: DENY, SAMEORIGIN",
    ]


def test_security_headers_accept_case_variants() -> None:
    warnings = WarningCollector()

    validate_security_headers(
        {
            "content-type": "application/json",
            "x-content-type-options": "NoSniff",
            "x-frame-options": "sameorigin",
            "access-control-allow-origin": "https://app.example.com",
        },
        warnings,
    )

    assert warnings.warnings == ()


@pytest.mark.parametrize(
    "amount", ["999999999.99", 1_000_000_000, -1_000_000_000, "0", 12.5, "-3.10", "1e3"]
)
def test_amounts_within_bounds_pass(amount: object) -> None:
    validate_monetary_amounts({"balance": amount}, ["balance"], WarningCollector())


@pytest.mark.parametrize("amount", ["1000000001.00", -1_000_000_001, 1e12])
def test_amounts_out_of_bounds_fail(amount: object) -> None:
    with pytest.raises(MonetaryAmountError, match="Amount out of reasonable bounds in balance"):
        validate_monetary_amounts({"balance": amount}, ["balance"], WarningCollector())


@pytest.mark.parametrize("amount", ["abc", "12abc", "", float("inf"), float("nan"), True, [1]])
def test_non_numeric_amounts_fail(amount: object) -> None:
    with pytest.raises(MonetaryAmountError, match="Invalid amount format in balance"):
        validate_monetary_amounts({"balance": amount}, ["balance"], WarningCollector())


def test_absent_or_null_amounts_are_skipped() -> None:
    validate_monetary_amounts({"balance": None}, ["balance", "missing"], WarningCollector())


def test_string_amount_precision_is_advisory() -> None:
    warnings = WarningCollector()

    validate_monetary_amounts({"fee": "10.125", "tax": 1.125}, ["fee", "tax"], warnings)

    assert len(warnings.warnings) == 1
    assert warnings.warnings[0].category == WarningCategory.AMOUNT_PRECISION
    assert warnings.warnings[0].field_path == "fee"


def test_parse_amount_accepts_numbers_and_numeric_text_only() -> None:
    assert parse_amount("  42.50 ") == Decimal("42.50")
    assert parse_amount(7) == Decimal(7)
    assert parse_amount(False) is None
    assert parse_amount("1,000") is None
    assert parse_amount(None) is None


@pytest.mark.parametrize("transaction_id", ["TXN123", "abc_def-42", "A1B2C3D4E5F6"])
def test_valid_transaction_ids_pass(transaction_id: str) -> None:
    validate_transaction_ids({"transactionId": transaction_id}, ["transactionId"])


@pytest.mark.parametrize(
    ("transaction_id", "message"),
    [
        ("TX123", "Transaction ID transactionId is too short: TX123"),
        ("TXN 12345", "Invalid transaction ID format in transactionId: TXN 12345"),
        ("TXN#12345", "Invalid transaction ID format in transactionId: TXN#12345"),
        (123456, "Transaction ID transactionId should be a string"),
    ],
)
def test_invalid_transaction_ids_fail(transaction_id: object, message: str) -> None:
    with pytest.raises(TransactionIdError) as excinfo:
        validate_transaction_ids({"transactionId": transaction_id}, ["transactionId"])

    assert str(excinfo.value) == message


def test_unmasked_card_number_only_warns() -> None:
    warnings = WarningCollector()

    validate_sensitive_data_masking({"cardNumber": "4111111111111111"}, ["cardNumber"], warnings)

    assert len(warnings.warnings) == 1
    assert warnings.warnings[0].category == WarningCategory.UNMASKED_FIELD
    assert warnings.warnings[0].message == "cardNumber should be masked but found: 4111111111111111"


def test_masked_or_non_sensitive_fields_do_not_warn() -> None:
    warnings = WarningCollector()
    body = {
        "cardNumber": "************1111",
        "account": {"number": "XXXX-XXXX-1234"},
        "holderName": "Alice",
        "accountRef": "",
    }

    validate_sensitive_data_masking(
        body, ["cardNumber", "account.number", "holderName", "accountRef"], warnings
    )

    assert warnings.warnings == ()
