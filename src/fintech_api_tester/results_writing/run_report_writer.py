"""Results workbook writer service."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path

from openpyxl import Workbook
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet

from .report_models import CaseStatus, RunMetadata, SuiteResult

logger = logging.getLogger(__name__)

RESULTS_SHEET_NAME = "Results"
WARNINGS_SHEET_NAME = "Warnings"
REQUESTS_SHEET_NAME = "Requests"
RUN_INFO_SHEET_NAME = "RunInfo"

RESULTS_COLUMNS = (
    "Suite",
    "Case",
    "Method",
    "URL",
    "Status Code",
    "Expected Status",
    "Duration (ms)",
    "Outcome",
    "Failure",
    "Warnings",
)
WARNINGS_COLUMNS = ("Suite", "Case", "Category", "Field Path", "Message")
REQUESTS_COLUMNS = ("Suite", "Case", "Sent At", "Method", "URL", "Status Code", "Duration (ms)")

_MAX_COLUMN_WIDTH = 60


def write_results_workbook(
    output_path: Path | str,
    suite_results: Sequence[SuiteResult],
    run_metadata: RunMetadata,
) -> Path:
    """Write the run results workbook and return its path."""
    workbook = Workbook()
    results_sheet = workbook.active
    assert isinstance(results_sheet, Worksheet)
    results_sheet.title = RESULTS_SHEET_NAME

    _write_table(results_sheet, RESULTS_COLUMNS, _result_rows(suite_results))
    _write_table(
        workbook.create_sheet(WARNINGS_SHEET_NAME), WARNINGS_COLUMNS, _warning_rows(suite_results)
    )
    _write_table(
        workbook.create_sheet(REQUESTS_SHEET_NAME), REQUESTS_COLUMNS, _request_rows(suite_results)
    )
    _write_run_info_sheet(workbook.create_sheet(RUN_INFO_SHEET_NAME), run_metadata, suite_results)

    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)
    workbook.save(output)
    logger.info("Results workbook written to %s", output)
    return output


def _result_rows(suite_results: Sequence[SuiteResult]) -> list[tuple[object, ...]]:
    return [
        (
            suite.name,
            case.case_name,
            case.method,
            case.url,
            case.status_code,
            case.expected_status,
            _round_duration(case.duration_ms),
            case.status.value,
            case.failure_message or "",
            len(case.warnings),
        )
        for suite in suite_results
        for case in suite.cases
    ]


def _warning_rows(suite_results: Sequence[SuiteResult]) -> list[tuple[object, ...]]:
    return [
        (
            suite.name,
            case.case_name,
            warning.category.value,
            warning.field_path or "",
            warning.message,
        )
        for suite in suite_results
        for case in suite.cases
        for warning in case.warnings
    ]


def _request_rows(suite_results: Sequence[SuiteResult]) -> list[tuple[object, ...]]:
    return [
        (
            suite.name,
            record.case_name,
            record.sent_at.isoformat(),
            record.method,
            record.url,
            record.status_code,
            _round_duration(record.duration_ms),
        )
        for suite in suite_results
        for record in suite.requests
    ]


def _write_table(
    sheet: Worksheet, columns: Sequence[str], rows: Sequence[Sequence[object]]
) -> None:
    for column_index, name in enumerate(columns, start=1):
        cell = sheet.cell(row=1, column=column_index, value=name)
        cell.style = "Headline 1"
    for row_index, row in enumerate(rows, start=2):
        for column_index, value in enumerate(row, start=1):
            sheet.cell(row=row_index, column=column_index, value=value)
    for column_index, name in enumerate(columns, start=1):
        longest = max(
            [len(name)] + [len(str(row[column_index - 1] or "")) for row in rows],
        )
        sheet.column_dimensions[get_column_letter(column_index)].width = max(
            12, min(longest + 2, _MAX_COLUMN_WIDTH)
        )
    sheet.freeze_panes = "A2"


def _write_run_info_sheet(
    sheet: Worksheet, run_metadata: RunMetadata, suite_results: Sequence[SuiteResult]
) -> None:
    def total(status: CaseStatus) -> int:
        return sum(suite.count(status) for suite in suite_results)

    entries = (
        ("run_start", run_metadata.run_start.isoformat()),
        ("run_end", run_metadata.run_end.isoformat() if run_metadata.run_end else ""),
        ("environment", run_metadata.environment),
        ("base_url", run_metadata.base_url),
        ("fixtures", "\n".join(str(path) for path in run_metadata.fixture_paths)),
        ("output_path", str(run_metadata.output_path)),
        ("suites", len(suite_results)),
        ("total", sum(len(suite.cases) for suite in suite_results)),
        ("passed", total(CaseStatus.PASSED)),
        ("failed", total(CaseStatus.FAILED)),
        ("errors", total(CaseStatus.ERROR)),
        ("skipped", total(CaseStatus.SKIPPED)),
        ("warnings", sum(len(case.warnings) for suite in suite_results for case in suite.cases)),
    )
    for row, (key, value) in enumerate(entries, start=1):
        sheet.cell(row=row, column=1, value=key)
        sheet.cell(row=row, column=2, value=value)
    sheet.column_dimensions["A"].width = 16
    sheet.column_dimensions["B"].width = _MAX_COLUMN_WIDTH


def _round_duration(duration_ms: float | None) -> float | None:
    return round(duration_ms, 1) if duration_ms is not None else None
