"""Run execution domain exports."""

from .run_contracts import RunArtifacts, RunOutcome, RunRequest
from .suite_context import DEFAULT_STORED_FIELDS, PlaceholderError, SuiteContext
from .suite_run_use_case import (
    RunExecutionError,
    execute_api_test_run,
    run_suite,
    validate_recorded_response,
)

__all__ = [
    "RunRequest",
    "RunOutcome",
    "RunArtifacts",
    "RunExecutionError",
    "SuiteContext",
    "PlaceholderError",
    "DEFAULT_STORED_FIELDS",
    "execute_api_test_run",
    "run_suite",
    "validate_recorded_response",
]
