"""Expectation ingestion exports."""

from .expectation_models import (
    ExpectationDocument,
    ExpectationSuite,
    RateLimitExpectation,
    RequestSpec,
)
from .fixture_reader import FixtureValidationError, parse_expectation_document, read_fixture_suite

__all__ = [
    "ExpectationDocument",
    "ExpectationSuite",
    "RateLimitExpectation",
    "RequestSpec",
    "FixtureValidationError",
    "parse_expectation_document",
    "read_fixture_suite",
]
