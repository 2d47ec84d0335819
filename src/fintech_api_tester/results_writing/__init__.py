"""Results writing domain exports."""

from .report_models import CaseResult, CaseStatus, RequestRecord, RunMetadata, SuiteResult
from .run_report_writer import (
    REQUESTS_SHEET_NAME,
    RESULTS_SHEET_NAME,
    RUN_INFO_SHEET_NAME,
    WARNINGS_SHEET_NAME,
    write_results_workbook,
)

__all__ = [
    "CaseResult",
    "CaseStatus",
    "RequestRecord",
    "RunMetadata",
    "SuiteResult",
    "RESULTS_SHEET_NAME",
    "WARNINGS_SHEET_NAME",
    "REQUESTS_SHEET_NAME",
    "RUN_INFO_SHEET_NAME",
    "write_results_workbook",
]
