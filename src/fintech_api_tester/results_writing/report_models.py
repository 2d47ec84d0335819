"""Results writing entities."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from pathlib import Path

from fintech_api_tester.response_validation import ValidationReport, ValidationWarning


class CaseStatus(str, Enum):
    """Rendered outcome of one test case."""

    PASSED = "PASSED"
    FAILED = "FAILED"
    ERROR = "ERROR"
    SKIPPED = "SKIPPED"


@dataclass(frozen=True)
class RequestRecord:
    """One HTTP exchange made while running a suite."""

    case_name: str
    method: str
    url: str
    status_code: int | None
    duration_ms: float | None
    sent_at: datetime


@dataclass(frozen=True)
class CaseResult:  # pylint: disable=too-many-instance-attributes
    """Outcome of running and validating one expectation document."""

    case_name: str
    method: str
    url: str
    status: CaseStatus
    expected_status: int | None = None
    status_code: int | None = None
    duration_ms: float | None = None
    failure_message: str | None = None
    warnings: tuple[ValidationWarning, ...] = ()
    checks_run: tuple[str, ...] = ()

    @staticmethod
    def passed(
        case_name: str,
        method: str,
        url: str,
        *,
        expected_status: int | None,
        status_code: int,
        duration_ms: float | None,
        report: ValidationReport,
        extra_warnings: tuple[ValidationWarning, ...] = (),
    ) -> CaseResult:
        return CaseResult(
            case_name=case_name,
            method=method,
            url=url,
            status=CaseStatus.PASSED,
            expected_status=expected_status,
            status_code=status_code,
            duration_ms=duration_ms,
            warnings=extra_warnings + report.warnings,
            checks_run=report.checks_run,
        )

    @staticmethod
    def failed(
        case_name: str,
        method: str,
        url: str,
        *,
        expected_status: int | None,
        status_code: int,
        duration_ms: float | None,
        error: Exception,
        extra_warnings: tuple[ValidationWarning, ...] = (),
    ) -> CaseResult:
        return CaseResult(
            case_name=case_name,
            method=method,
            url=url,
            status=CaseStatus.FAILED,
            expected_status=expected_status,
            status_code=status_code,
            duration_ms=duration_ms,
            failure_message=str(error),
            warnings=extra_warnings,
        )

    @staticmethod
    def errored(
        case_name: str, method: str, url: str, *, expected_status: int | None, error: Exception
    ) -> CaseResult:
        return CaseResult(
            case_name=case_name,
            method=method,
            url=url,
            status=CaseStatus.ERROR,
            expected_status=expected_status,
            failure_message=str(error),
        )

    @staticmethod
    def skipped(
        case_name: str, method: str, url: str, *, expected_status: int | None
    ) -> CaseResult:
        return CaseResult(
            case_name=case_name,
            method=method,
            url=url,
            status=CaseStatus.SKIPPED,
            expected_status=expected_status,
        )


@dataclass(frozen=True)
class SuiteResult:
    """Ordered case results and request history of one fixture suite."""

    name: str
    source_path: Path
    cases: tuple[CaseResult, ...]
    requests: tuple[RequestRecord, ...] = ()

    def count(self, status: CaseStatus) -> int:
        return sum(1 for case in self.cases if case.status == status)


@dataclass(frozen=True)
class RunMetadata:
    """Metadata rendered into the RunInfo sheet."""

    run_start: datetime
    environment: str
    base_url: str
    fixture_paths: tuple[Path, ...]
    output_path: Path
    run_end: datetime | None = None

