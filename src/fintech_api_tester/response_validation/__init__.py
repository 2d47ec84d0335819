"""Response validation domain exports."""

from .actual_response import ActualResponse
from .body_comparator import MatchMode, compare_body
from .compliance_checks import (
    scan_for_card_data,
    validate_balance_consistency,
    validate_payment_status,
)
from .custom_rules import apply_custom_rule, validate_array_response
from .expectation_rules import (
    ArrayExpectation,
    BalanceConfig,
    CustomRuleType,
    CustomValidationRule,
    ResponseExpectation,
)
from .field_paths import MISSING, ROOT, FieldPath, FieldPathError, resolve
from .json_kinds import UnsupportedJsonValueError
from .non_empty_fields import validate_non_empty_fields
from .response_validator import validate_api_response
from .validation_outcomes import (
    ComplianceViolationError,
    CustomRuleViolationError,
    FieldClassifierViolationError,
    MonetaryAmountError,
    NonEmptyFieldError,
    ResponseValidationError,
    ShapeViolationError,
    StatusMismatchError,
    TransactionIdError,
    ValidationReport,
    ValidationWarning,
    ValueViolationError,
    WarningCategory,
    WarningCollector,
)

__all__ = [
    "ActualResponse",
    "ArrayExpectation",
    "BalanceConfig",
    "CustomRuleType",
    "CustomValidationRule",
    "ResponseExpectation",
    "FieldPath",
    "FieldPathError",
    "MISSING",
    "ROOT",
    "resolve",
    "UnsupportedJsonValueError",
    "MatchMode",
    "compare_body",
    "validate_non_empty_fields",
    "apply_custom_rule",
    "validate_array_response",
    "validate_balance_consistency",
    "validate_payment_status",
    "scan_for_card_data",
    "validate_api_response",
    "ResponseValidationError",
    "StatusMismatchError",
    "ShapeViolationError",
    "ValueViolationError",
    "FieldClassifierViolationError",
    "NonEmptyFieldError",
    "MonetaryAmountError",
    "TransactionIdError",
    "CustomRuleViolationError",
    "ComplianceViolationError",
    "WarningCategory",
    "ValidationWarning",
    "WarningCollector",
    "ValidationReport",
]
