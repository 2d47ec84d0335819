"""Fixture file ingestion and validation."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from pathlib import Path

import yaml

from fintech_api_tester.response_validation import (
    ArrayExpectation,
    BalanceConfig,
    CustomRuleType,
    CustomValidationRule,
    FieldPath,
    FieldPathError,
    ResponseExpectation,
)

from .expectation_models import (
    ExpectationDocument,
    ExpectationSuite,
    RateLimitExpectation,
    RequestSpec,
)

logger = logging.getLogger(__name__)

HTTP_METHODS = frozenset({"GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"})
JSON_TYPE_NAMES = frozenset({"undefined", "null", "boolean", "number", "string", "array", "object"})
_YAML_SUFFIXES = (".yaml", ".yml")

_KNOWN_KEYS = frozenset(
    {
        "description",
        "skip",
        "method",
        "url",
        "params",
        "requestBody",
        "headers",
        "requiresAuth",
        "user",
        "expectedStatus",
        "expectedResponseTime",
        "expectedBody",
        "subsetExpectedBody",
        "nonEmptyFields",
        "validateAmounts",
        "amountFields",
        "validateTransactionIds",
        "transactionIdFields",
        "validateDataMasking",
        "sensitiveFields",
        "customValidations",
        "expectedArray",
        "validateBalanceConsistency",
        "balanceConfig",
        "validatePaymentStatus",
        "paymentStatusField",
        "validatePCICompliance",
        "storeFields",
        "rateLimit",
    }
)


class FixtureValidationError(Exception):
    """Raised when a fixture file or one of its documents is invalid."""


class _FixtureLoader(yaml.SafeLoader):
    """SafeLoader that keeps unquoted dates and timestamps as strings."""


_FixtureLoader.yaml_implicit_resolvers = {
    first_char: [
        (tag, pattern) for tag, pattern in resolvers if tag != "tag:yaml.org,2002:timestamp"
    ]
    for first_char, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}


def read_fixture_suite(fixture_path: Path | str) -> ExpectationSuite:
    """Read a JSON or YAML fixture file of `{testName: document}` entries."""
    path = Path(fixture_path)
    if not path.exists():
        raise FixtureValidationError(f"Fixture file not found: {path}")

    try:
        text = path.read_text(encoding="utf-8")
        if path.suffix.lower() in _YAML_SUFFIXES:
            raw = yaml.load(text, Loader=_FixtureLoader)
        else:
            raw = json.loads(text)
    except (OSError, UnicodeDecodeError) as exc:
        raise FixtureValidationError(f"Unable to read fixture file {path}: {exc}") from exc
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise FixtureValidationError(f"Invalid fixture syntax in {path}: {exc}") from exc

    if not isinstance(raw, Mapping) or not raw:
        raise FixtureValidationError(
            f"Fixture file {path} must map test names to expectation documents."
        )

    cases = tuple(
        parse_expectation_document(str(name), document) for name, document in raw.items()
    )
    logger.info("Loaded %d test cases from %s", len(cases), path)
    return ExpectationSuite(name=path.stem, source_path=path, cases=cases)


def parse_expectation_document(name: str, raw: object) -> ExpectationDocument:
    """Validate one camelCase fixture document and map it onto ExpectationDocument."""
    if not isinstance(raw, Mapping):
        raise FixtureValidationError(f"{name}: expectation document must be a mapping.")
    raw = _json_compatible(raw, name)
    assert isinstance(raw, Mapping)
    unknown = sorted(set(map(str, raw)) - _KNOWN_KEYS)
    if unknown:
        raise FixtureValidationError(f"{name}: unknown keys: {', '.join(unknown)}")

    reader = _DocumentReader(name, raw)
    request = RequestSpec(
        method=reader.method(),
        url=reader.text("url", required=True),
        params=reader.mapping("params"),
        request_body=raw.get("requestBody"),
        headers={key: str(value) for key, value in reader.mapping("headers").items()},
    )
    expectation = ResponseExpectation(
        expected_status=reader.status("expectedStatus"),
        expected_response_time=reader.non_negative_int("expectedResponseTime"),
        expected_body=reader.body("expectedBody"),
        subset_expected_body=reader.body("subsetExpectedBody"),
        non_empty_fields=reader.paths("nonEmptyFields"),
        validate_amounts=reader.flag("validateAmounts"),
        amount_fields=reader.paths("amountFields"),
        validate_transaction_ids=reader.flag("validateTransactionIds"),
        transaction_id_fields=reader.paths("transactionIdFields"),
        validate_data_masking=reader.flag("validateDataMasking"),
        sensitive_fields=reader.paths("sensitiveFields"),
        custom_validations=reader.custom_rules(),
        expected_array=reader.array_expectation(),
        validate_balance_consistency=reader.flag("validateBalanceConsistency"),
        balance_config=reader.balance_config(),
        validate_payment_status=reader.flag("validatePaymentStatus"),
        payment_status_field=reader.path_text("paymentStatusField") or "status",
        validate_pci_compliance=reader.flag("validatePCICompliance"),
    )
    if expectation.validate_balance_consistency and expectation.balance_config is None:
        raise FixtureValidationError(
            f"{name}: 'validateBalanceConsistency' requires 'balanceConfig'."
        )

    return ExpectationDocument(
        name=name,
        request=request,
        expectation=expectation,
        description=reader.text("description"),
        requires_auth=reader.flag("requiresAuth", default=True),
        user=reader.text("user") or None,
        store_fields=reader.store_fields(),
        rate_limit=reader.rate_limit(),
        skip=reader.flag("skip"),
    )


def _json_compatible(value: object, location: str) -> object:
    """Copy a loaded document, keeping only values a JSON fixture could hold.

    Numeric mapping keys become strings. Boolean and null keys, binary data
    and sets are rejected with the location that holds them.
    """
    if value is None or isinstance(value, str | bool | int | float):
        return value
    if isinstance(value, Mapping):
        converted: dict[str, object] = {}
        for key, item in value.items():
            if isinstance(key, bool) or not isinstance(key, str | int | float):
                raise FixtureValidationError(
                    f"{location}: key {key!r} must be a string; quote it in YAML."
                )
            converted[str(key)] = _json_compatible(item, f"{location}.{key}")
        return converted
    if isinstance(value, list):
        return [_json_compatible(item, f"{location}[{index}]") for index, item in enumerate(value)]
    raise FixtureValidationError(
        f"{location}: unsupported {type(value).__name__} value {value!r}; "
        "fixtures may only hold JSON values."
    )


class _DocumentReader:
    """Typed accessors over one raw document, raising errors that name the case and key."""

    def __init__(self, name: str, raw: Mapping[str, object]) -> None:
        self._name = name
        self._raw = raw

    def _error(self, key: str, message: str) -> FixtureValidationError:
        return FixtureValidationError(f"{self._name}: '{key}' {message}")

    def method(self) -> str:
        value = self._raw.get("method", "GET")
        if not isinstance(value, str) or value.strip().upper() not in HTTP_METHODS:
            raise self._error("method", f"must be one of {', '.join(sorted(HTTP_METHODS))}.")
        return value.strip().upper()

    def text(self, key: str, *, required: bool = False) -> str:
        value = self._raw.get(key)
        if value is None:
            if required:
                raise self._error(key, "is required.")
            return ""
        if not isinstance(value, str):
            raise self._error(key, "must be a string.")
        if required and not value.strip():
            raise self._error(key, "must not be empty.")
        return value.strip()

    def flag(self, key: str, *, default: bool = False) -> bool:
        value = self._raw.get(key)
        if value is None:
            return default
        if not isinstance(value, bool):
            raise self._error(key, "must be true or false.")
        return value

    def mapping(self, key: str) -> Mapping[str, object]:
        value = self._raw.get(key)
        if value is None:
            return {}
        if not isinstance(value, Mapping):
            raise self._error(key, "must be an object.")
        return {str(item_key): item for item_key, item in value.items()}

    def status(self, key: str) -> int | None:
        value = self.non_negative_int(key)
        if value is not None and not 100 <= value <= 599:
            raise self._error(key, "must be an HTTP status code between 100 and 599.")
        return value

    def non_negative_int(self, key: str, source: Mapping[str, object] | None = None) -> int | None:
        value = (self._raw if source is None else source).get(key)
        if value is None:
            return None
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            raise self._error(key, "must be a non-negative integer.")
        return value

    def body(self, key: str) -> object:
        value = self._raw.get(key)
        if value is not None and not isinstance(value, Mapping | list):
            raise self._error(key, "must be an object or an array.")
        if isinstance(value, list) and not value:
            raise self._error(key, "must not be an empty array; use 'expectedArray' for lengths.")
        return value

    def path_text(self, key: str, source: Mapping[str, object] | None = None) -> str:
        value = (self._raw if source is None else source).get(key)
        if value is None:
            return ""
        if not isinstance(value, str):
            raise self._error(key, "must be a field path string.")
        self._parse_path(key, value)
        return value

    def paths(self, key: str) -> tuple[str, ...]:
        value = self._raw.get(key)
        if value is None:
            return ()
        if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
            raise self._error(key, "must be a list of field path strings.")
        for item in value:
            self._parse_path(key, item)
        return tuple(value)

    def _parse_path(self, key: str, text: str) -> FieldPath:
        try:
            return FieldPath.parse(text)
        except FieldPathError as exc:
            raise self._error(key, str(exc)) from exc

    def custom_rules(self) -> tuple[CustomValidationRule, ...]:
        value = self._raw.get("customValidations")
        if value is None:
            return ()
        if not isinstance(value, list):
            raise self._error("customValidations", "must be a list of rule objects.")
        return tuple(self._custom_rule(index, item) for index, item in enumerate(value))

    def _custom_rule(self, index: int, raw: object) -> CustomValidationRule:
        key = f"customValidations[{index}]"
        if not isinstance(raw, Mapping):
            raise self._error(key, "must be an object.")
        field_path = raw.get("field")
        rule_type = raw.get("type")
        if not isinstance(field_path, str) or not field_path.strip():
            raise self._error(key, "requires a 'field' path.")
        if not isinstance(rule_type, str) or not rule_type.strip():
            raise self._error(key, "requires a 'type'.")
        self._parse_path(key, field_path)

        expected_length = self.non_negative_int("expectedLength", raw)
        expected_type = raw.get("expectedType")
        if rule_type == CustomRuleType.ARRAY_LENGTH.value and expected_length is None:
            raise self._error(key, "of type arrayLength requires 'expectedLength'.")
        if rule_type == CustomRuleType.DATA_TYPE.value and expected_type not in JSON_TYPE_NAMES:
            raise self._error(
                key, f"of type dataType requires 'expectedType' in {sorted(JSON_TYPE_NAMES)}."
            )
        return CustomValidationRule(
            field=field_path,
            type=rule_type,
            expected_value=raw.get("expectedValue"),
            expected_length=expected_length,
            expected_type=expected_type if isinstance(expected_type, str) else None,
        )

    def array_expectation(self) -> ArrayExpectation | None:
        raw = self._raw.get("expectedArray")
        if raw is None:
            return None
        if not isinstance(raw, Mapping):
            raise self._error("expectedArray", "must be an object.")
        item_structure = raw.get("itemStructure")
        if item_structure is not None and not isinstance(item_structure, Mapping):
            raise self._error("expectedArray", "'itemStructure' must be an object.")
        return ArrayExpectation(
            field=self.path_text("field", raw),
            min_length=self.non_negative_int("minLength", raw),
            max_length=self.non_negative_int("maxLength", raw),
            exact_length=self.non_negative_int("exactLength", raw),
            item_structure=item_structure,
        )

    def balance_config(self) -> BalanceConfig | None:
        raw = self._raw.get("balanceConfig")
        if raw is None:
            return None
        if not isinstance(raw, Mapping):
            raise self._error("balanceConfig", "must be an object.")
        available = self.path_text("availableBalancePath", raw)
        current = self.path_text("currentBalancePath", raw)
        if not available or not current:
            raise self._error(
                "balanceConfig", "requires 'availableBalancePath' and 'currentBalancePath'."
            )
        return BalanceConfig(
            available_balance_path=available,
            current_balance_path=current,
            pending_amount_path=self.path_text("pendingAmountPath", raw) or None,
        )

    def store_fields(self) -> Mapping[str, str]:
        raw = self.mapping("storeFields")
        stored: dict[str, str] = {}
        for name, path_text in raw.items():
            if not isinstance(path_text, str):
                raise self._error("storeFields", f"entry '{name}' must be a field path string.")
            self._parse_path("storeFields", path_text)
            stored[name] = path_text
        return stored

    def rate_limit(self) -> RateLimitExpectation | None:
        raw = self._raw.get("rateLimit")
        if raw is None:
            return None
        if not isinstance(raw, Mapping):
            raise self._error("rateLimit", "must be an object.")
        request_count = self.non_negative_int("requestCount", raw)
        limit_status = self.non_negative_int("expectedLimitStatus", raw)
        if request_count == 0:
            raise self._error("rateLimit", "'requestCount' must be at least 1.")
        return RateLimitExpectation(
            request_count=request_count if request_count is not None else 10,
            expected_limit_status=limit_status if limit_status is not None else 429,
        )
