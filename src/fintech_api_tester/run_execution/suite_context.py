"""Values shared between the sequential cases of one suite."""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from dataclasses import replace
from decimal import Decimal

from fintech_api_tester.expectation_ingestion import RequestSpec
from fintech_api_tester.response_validation import MISSING, resolve
from fintech_api_tester.response_validation.field_classifiers import parse_amount
from fintech_api_tester.results_writing import RequestRecord

logger = logging.getLogger(__name__)

# stored name -> body path, captured after every passing case
DEFAULT_STORED_FIELDS: Mapping[str, str] = {
    "transactionId": "transactionId",
    "paymentId": "transactionId",
    "accountId": "accountId",
    "availableBalance": "availableBalance",
}
_PLACEHOLDER_PATTERN = re.compile(r"\{([A-Za-z_][A-Za-z0-9_]*)\}")


class PlaceholderError(Exception):
    """Raised when a request URL names a value no earlier case stored."""


class SuiteContext:
    """Per-suite store of response values, request history and the last payment status.

    One instance belongs to one suite; cases run one after another, so each
    case reads what earlier cases wrote.
    """

    def __init__(self) -> None:
        self._values: dict[str, object] = {}
        self._requests: list[RequestRecord] = []
        self.last_payment_status: str | None = None

    @property
    def values(self) -> Mapping[str, object]:
        return dict(self._values)

    @property
    def requests(self) -> tuple[RequestRecord, ...]:
        return tuple(self._requests)

    def store(self, name: str, value: object) -> None:
        self._values[name] = value
        logger.info("Stored %s = %s", name, value)

    def store_from_response(self, data: object, store_fields: Mapping[str, str]) -> None:
        """Capture well-known identifiers plus any declared `name -> path` fields."""
        for name, path in {**DEFAULT_STORED_FIELDS, **store_fields}.items():
            value = resolve(data, path)
            if value is None or value is MISSING:
                continue
            if name == "availableBalance":
                amount = parse_amount(value)
                if amount is None:
                    logger.debug("Ignoring non-numeric availableBalance: %s", value)
                    continue
                value = amount
            self.store(name, value)

    def resolve_placeholders(self, request: RequestSpec) -> RequestSpec:
        """Substitute `{name}` tokens in the request URL with stored values."""

        def substitute(match: re.Match[str]) -> str:
            name = match.group(1)
            if name not in self._values:
                raise PlaceholderError(
                    f"URL placeholder {{{name}}} has no stored value; "
                    "an earlier case must store it first."
                )
            return _render(self._values[name])

        url = _PLACEHOLDER_PATTERN.sub(substitute, request.url)
        if url == request.url:
            return request
        return replace(request, url=url)

    def record_request(self, record: RequestRecord) -> None:
        self._requests.append(record)


def _render(value: object) -> str:
    if isinstance(value, Decimal):
        return format(value, "f")
    return str(value)
