"""Ordered response validation tests."""

from __future__ import annotations

import pytest
from fintech_api_tester.response_validation import (
    ActualResponse,
    ArrayExpectation,
    BalanceConfig,
    ComplianceViolationError,
    CustomValidationRule,
    NonEmptyFieldError,
    ResponseExpectation,
    ShapeViolationError,
    StatusMismatchError,
    WarningCategory,
    validate_api_response,
)

JSON_HEADERS = {"Content-Type": "application/json"}


def _response(
    data: object, status: int = 200, duration_ms: float | None = 120.0
) -> ActualResponse:
    return ActualResponse(status=status, headers=JSON_HEADERS, data=data, duration_ms=duration_ms)


def test_full_expectation_runs_checks_in_order() -> None:
    expectation = ResponseExpectation(
        expected_status=200,
        expected_response_time=1000,
        expected_body={"status": "completed"},
        subset_expected_body={"currency": "INR"},
        non_empty_fields=("transactionId",),
        validate_amounts=True,
        amount_fields=("amount",),
        validate_transaction_ids=True,
        transaction_id_fields=("transactionId",),
        validate_data_masking=True,
        sensitive_fields=("cardNumber",),
        custom_validations=(
            CustomValidationRule(field="amount", type="greaterThan", expected_value=0),
        ),
        expected_array=ArrayExpectation(field="history", min_length=1),
        validate_balance_consistency=True,
        balance_config=BalanceConfig("available", "current", "pending"),
        validate_payment_status=True,
        validate_pci_compliance=True,
    )
    body = {
        "status": "completed",
        "currency": "INR",
        "transactionId": "TXN000123",
        "amount": "250.00",
        "cardNumber": "**** **** **** 4242",
        "history": [{"at": "2025-01-01"}],
        "available": 80,
        "current": 100,
        "pending": 20,
    }

    report = validate_api_response(
        expectation, _response(body), previous_payment_status="processing"
    )

    assert report.checks_run == (
        "status",
        "response_time",
        "security_headers",
        "exact_body",
        "subset_body",
        "non_empty_fields",
        "amounts",
        "transaction_ids",
        "data_masking",
        "custom_validations",
        "expected_array",
        "balance_consistency",
        "payment_status",
        "pci_compliance",
    )
    assert report.warnings_in(WarningCategory.EXTRA_PROPERTIES)
    assert not report.warnings_in(WarningCategory.PCI_COMPLIANCE)


def test_status_is_checked_before_body() -> None:
    expectation = ResponseExpectation(expected_status=201, expected_body={"id": "x"})

    with pytest.raises(StatusMismatchError):
        validate_api_response(expectation, _response({}, status=500))


def test_body_shape_is_checked_before_non_empty_fields() -> None:
    expectation = ResponseExpectation(
        expected_status=200, expected_body={"account": {"id": "A1"}}, non_empty_fields=("name",)
    )

    with pytest.raises(ShapeViolationError, match="Missing property: account"):
        validate_api_response(expectation, _response({"name": ""}))


def test_non_empty_fields_skip_value_comparison_but_still_run() -> None:
    expectation = ResponseExpectation(
        expected_body={"createdAt": "placeholder"}, non_empty_fields=("createdAt",)
    )

    validate_api_response(expectation, _response({"createdAt": "2025-06-01T10:00:00Z"}))
    with pytest.raises(NonEmptyFieldError, match="String field 'createdAt' should not be empty"):
        validate_api_response(expectation, _response({"createdAt": ""}))


def test_advisory_findings_never_fail() -> None:
    expectation = ResponseExpectation(
        expected_status=200,
        expected_response_time=100,
        validate_data_masking=True,
        sensitive_fields=("cardNumber",),
        validate_pci_compliance=True,
    )
    response = ActualResponse(
        status=200, headers={}, data={"cardNumber": "4111111111111111"}, duration_ms=250.0
    )

    report = validate_api_response(expectation, response)

    assert report.has_warnings
    assert {w.category for w in report.warnings} == {
        WarningCategory.RESPONSE_TIME,
        WarningCategory.SECURITY_HEADER,
        WarningCategory.UNMASKED_FIELD,
        WarningCategory.PCI_COMPLIANCE,
    }


def test_payment_status_uses_configured_field_and_previous_status() -> None:
    expectation = ResponseExpectation(
        validate_payment_status=True, payment_status_field="payment.state"
    )
    body = {"payment": {"state": "refunded"}}

    validate_api_response(expectation, _response(body), previous_payment_status="completed")
    with pytest.raises(ComplianceViolationError, match="pending -> refunded"):
        validate_api_response(expectation, _response(body), previous_payment_status="pending")


def test_minimal_expectation_only_checks_headers() -> None:
    report = validate_api_response(ResponseExpectation(), _response(None))

    assert report.checks_run == ("security_headers",)
    assert report.warnings == ()


def test_actual_response_normalizes_headers() -> None:
    response = ActualResponse(status=200, headers={"X-Frame-Options": "DENY"})

    assert response.headers == {"x-frame-options": "DENY"}


def test_actual_response_from_recorded_document() -> None:
    response = ActualResponse.from_mapping(
        {
            "status": 201,
            "headers": {"Content-Type": "application/json"},
            "data": [1],
            "duration": 42,
        }
    )

    assert response.status == 201
    assert response.headers == {"content-type": "application/json"}
    assert response.data == [1]
    assert response.duration_ms == 42.0


@pytest.mark.parametrize(
    "raw",
    [
        {},
        {"status": "200"},
        {"status": True},
        {"status": 200, "headers": ["a"]},
        {"status": 200, "duration": "fast"},
    ],
)
def test_actual_response_rejects_malformed_documents(raw: dict) -> None:
    with pytest.raises(ValueError):
        ActualResponse.from_mapping(raw)


def test_root_array_body_is_compared_item_by_item() -> None:
    expectation = ResponseExpectation(expected_body=[{"id": "x"}])

    with pytest.raises(ShapeViolationError, match="Missing property: id"):
        validate_api_response(expectation, _response([{"other": 1}]))
    report = validate_api_response(expectation, _response([{"id": "x"}]))

    assert report.checks_run == ("security_headers", "exact_body")


def test_body_check_not_reported_when_nothing_is_compared() -> None:
    report = validate_api_response(
        ResponseExpectation(subset_expected_body=[]), _response([{"other": 1}])
    )

    assert report.checks_run == ("security_headers",)
