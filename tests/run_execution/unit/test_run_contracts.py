"""Tests for run execution domain entities."""

from __future__ import annotations

from pathlib import Path

from fintech_api_tester.configuration.runtime_settings import Configuration
from fintech_api_tester.expectation_ingestion import ExpectationSuite
from fintech_api_tester.run_execution.run_contracts import RunArtifacts, RunOutcome, RunRequest


def test_run_request_defaults_to_configured_environment() -> None:
    request = RunRequest(config_path="config.yaml", fixture_paths=("payments.json",))

    assert request.environment is None
    assert request.output_dir is None


def test_run_outcome_reports_failures_and_errors() -> None:
    clean = RunOutcome(
        output_path=Path("/tmp/results.xlsx"), total=3, passed=2, failed=0, errors=0, skipped=1
    )
    failing = RunOutcome(
        output_path=Path("/tmp/results.xlsx"), total=3, passed=2, failed=1, errors=0, skipped=0
    )
    erroring = RunOutcome(
        output_path=Path("/tmp/results.xlsx"), total=1, passed=0, failed=0, errors=1, skipped=0
    )

    assert clean.output_path.name == "results.xlsx"
    assert clean.has_failures is False
    assert failing.has_failures is True
    assert erroring.has_failures is True


def test_run_artifacts_groups_configuration_and_suites() -> None:
    suite = ExpectationSuite(name="payments", source_path=Path("payments.json"), cases=())
    artifacts = RunArtifacts(configuration=Configuration.__new__(Configuration), suites=(suite,))

    assert artifacts.suites[0].name == "payments"
