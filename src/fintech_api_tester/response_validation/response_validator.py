"""Ordered validation of one actual response against its expectation."""

from __future__ import annotations

import logging

from .actual_response import ActualResponse
from .body_comparator import MatchMode, compare_body
from .compliance_checks import (
    scan_for_card_data,
    validate_balance_consistency,
    validate_payment_status,
)
from .custom_rules import apply_custom_rule, validate_array_response
from .expectation_rules import ResponseExpectation
from .field_classifiers import (
    validate_monetary_amounts,
    validate_response_time,
    validate_security_headers,
    validate_sensitive_data_masking,
    validate_status,
    validate_transaction_ids,
)
from .field_paths import parse_field_paths, resolve
from .non_empty_fields import validate_non_empty_fields
from .validation_outcomes import ValidationReport, WarningCollector

logger = logging.getLogger(__name__)


def validate_api_response(
    expectation: ResponseExpectation,
    response: ActualResponse,
    previous_payment_status: str | None = None,
) -> ValidationReport:
    """Run every configured check against `response`, shape before semantics.

    Warnings accumulate in the returned report. The first fatal finding is
    raised unchanged, so the caller sees exactly one actionable message.

    Raises:
      ResponseValidationError: The first fatal finding, as one of its subclasses.
    """
    warnings = WarningCollector()
    checks_run: list[str] = []
    body = response.data

    if expectation.expected_status is not None:
        validate_status(expectation.expected_status, response.status, body)
        checks_run.append("status")

    if expectation.expected_response_time is not None:
        validate_response_time(expectation.expected_response_time, response.duration_ms, warnings)
        checks_run.append("response_time")

    validate_security_headers(response.headers, warnings)
    checks_run.append("security_headers")

    non_empty_paths = parse_field_paths(expectation.non_empty_fields)
    if expectation.expected_body is not None and compare_body(
        body, expectation.expected_body, MatchMode.EXACT, non_empty_paths, warnings
    ):
        checks_run.append("exact_body")

    if expectation.subset_expected_body is not None and compare_body(
        body, expectation.subset_expected_body, MatchMode.SUBSET, non_empty_paths, warnings
    ):
        checks_run.append("subset_body")

    if expectation.non_empty_fields:
        validate_non_empty_fields(body, expectation.non_empty_fields)
        checks_run.append("non_empty_fields")

    if expectation.validate_amounts:
        validate_monetary_amounts(body, expectation.amount_fields, warnings)
        checks_run.append("amounts")

    if expectation.validate_transaction_ids:
        validate_transaction_ids(body, expectation.transaction_id_fields)
        checks_run.append("transaction_ids")

    if expectation.validate_data_masking:
        validate_sensitive_data_masking(body, expectation.sensitive_fields, warnings)
        checks_run.append("data_masking")

    if expectation.custom_validations:
        for rule in expectation.custom_validations:
            apply_custom_rule(body, rule, warnings)
        checks_run.append("custom_validations")

    if expectation.expected_array is not None:
        validate_array_response(body, expectation.expected_array, warnings)
        checks_run.append("expected_array")

    if expectation.validate_balance_consistency and expectation.balance_config is not None:
        validate_balance_consistency(body, expectation.balance_config)
        checks_run.append("balance_consistency")

    if expectation.validate_payment_status:
        status = resolve(body, expectation.payment_status_field)
        validate_payment_status(status, previous_payment_status)
        checks_run.append("payment_status")

    if expectation.validate_pci_compliance:
        scan_for_card_data(body, warnings)
        checks_run.append("pci_compliance")

    logger.debug("Validation passed: %s", ", ".join(checks_run))
    return ValidationReport(warnings=warnings.warnings, checks_run=tuple(checks_run))
