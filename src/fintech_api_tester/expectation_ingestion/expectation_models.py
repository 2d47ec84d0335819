"""Expectation fixture entities."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from fintech_api_tester.response_validation import ResponseExpectation


@dataclass(frozen=True)
class RequestSpec:
    """HTTP request half of an expectation document."""

    method: str
    url: str
    params: Mapping[str, object] = field(default_factory=dict)
    request_body: object = None
    headers: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class RateLimitExpectation:
    """Repeat a request until the limit status shows up."""

    request_count: int = 10
    expected_limit_status: int = 429


@dataclass(frozen=True)
class ExpectationDocument:  # pylint: disable=too-many-instance-attributes
    """One named API test case: what to send and what must come back."""

    name: str
    request: RequestSpec
    expectation: ResponseExpectation
    description: str = ""
    requires_auth: bool = True
    user: str | None = None
    store_fields: Mapping[str, str] = field(default_factory=dict)
    rate_limit: RateLimitExpectation | None = None
    skip: bool = False


@dataclass(frozen=True)
class ExpectationSuite:
    """Ordered expectation documents read from one fixture file."""

    name: str
    source_path: Path
    cases: tuple[ExpectationDocument, ...]

    def case(self, name: str) -> ExpectationDocument:
        for document in self.cases:
            if document.name == name:
                return document
        raise KeyError(name)
