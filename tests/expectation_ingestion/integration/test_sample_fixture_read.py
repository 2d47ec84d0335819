"""Integration test for reading the sample fixture suite."""

from __future__ import annotations

from pathlib import Path

from fintech_api_tester.expectation_ingestion import read_fixture_suite


def test_read_sample_payments_fixture() -> None:
    fixture_path = Path(__file__).resolve().parents[3].joinpath("samples", "payments-fixture.yaml")

    suite = read_fixture_suite(fixture_path)

    assert suite.name == "payments-fixture"
    assert [case.name for case in suite.cases] == [
        "createPayment",
        "getPayment",
        "listPayments",
        "accountBalance",
        "loginRateLimit",
    ]
    create = suite.case("createPayment")
    assert create.request.method == "POST"
    assert create.request.request_body == {
        "amount": "250.00",
        "currency": "INR",
        "beneficiaryAccount": "XXXX-XXXX-4321",
    }
    assert create.expectation.validate_payment_status is True
    assert suite.case("getPayment").request.url == "/payments/{paymentId}"
    assert suite.case("listPayments").expectation.expected_array is not None
    assert suite.case("accountBalance").user == "enduser"
    rate_limited = suite.case("loginRateLimit")
    assert rate_limited.skip is True
    assert rate_limited.requires_auth is False
    assert rate_limited.rate_limit is not None
    assert rate_limited.rate_limit.request_count == 20
