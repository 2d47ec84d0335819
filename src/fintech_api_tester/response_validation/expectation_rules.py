"""Declarative expectations a response is validated against."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum


class CustomRuleType(str, Enum):
    """Custom rule types understood by the validator."""

    ARRAY_LENGTH = "arrayLength"
    CONTAINS = "contains"
    GREATER_THAN = "greaterThan"
    DATA_TYPE = "dataType"


@dataclass(frozen=True)
class CustomValidationRule:
    """One ad hoc rule; `type` stays a plain string so unknown types survive parsing."""

    field: str
    type: str
    expected_value: object = None
    expected_length: int | None = None
    expected_type: str | None = None


@dataclass(frozen=True)
class ArrayExpectation:
    """Length and item-shape constraints for an array inside the body."""

    field: str = ""
    min_length: int | None = None
    max_length: int | None = None
    exact_length: int | None = None
    item_structure: Mapping[str, object] | None = None


@dataclass(frozen=True)
class BalanceConfig:
    """Paths used to cross-check available = current - pending."""

    available_balance_path: str
    current_balance_path: str
    pending_amount_path: str | None = None


@dataclass(frozen=True)
class ResponseExpectation:  # pylint: disable=too-many-instance-attributes
    """Everything a response is checked against, minus the request shape."""

    expected_status: int | None = None
    expected_response_time: int | None = None
    expected_body: object = None
    subset_expected_body: object = None
    non_empty_fields: tuple[str, ...] = ()
    validate_amounts: bool = False
    amount_fields: tuple[str, ...] = ()
    validate_transaction_ids: bool = False
    transaction_id_fields: tuple[str, ...] = ()
    validate_data_masking: bool = False
    sensitive_fields: tuple[str, ...] = ()
    custom_validations: tuple[CustomValidationRule, ...] = ()
    expected_array: ArrayExpectation | None = None
    validate_balance_consistency: bool = False
    balance_config: BalanceConfig | None = None
    validate_payment_status: bool = False
    payment_status_field: str = "status"
    validate_pci_compliance: bool = False
