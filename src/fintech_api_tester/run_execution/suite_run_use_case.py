"""Run execution use-case service."""

from __future__ import annotations

import json
import logging
from collections.abc import Callable, Sequence
from concurrent.futures import ThreadPoolExecutor
from datetime import UTC, datetime
from pathlib import Path

import httpx

from fintech_api_tester.api_client import (
    ApiClient,
    ApiRequestError,
    AuthenticationSession,
    create_http_client,
)
from fintech_api_tester.configuration import (
    ConfigurationError,
    EnvironmentSettings,
    RunnerSettings,
    load_configuration,
)
from fintech_api_tester.expectation_ingestion import (
    ExpectationDocument,
    ExpectationSuite,
    FixtureValidationError,
    RateLimitExpectation,
    RequestSpec,
    read_fixture_suite,
)
from fintech_api_tester.response_validation import (
    ActualResponse,
    ResponseValidationError,
    UnsupportedJsonValueError,
    ValidationReport,
    ValidationWarning,
    WarningCategory,
    resolve,
    validate_api_response,
)
from fintech_api_tester.results_writing import (
    CaseResult,
    CaseStatus,
    RequestRecord,
    RunMetadata,
    SuiteResult,
    write_results_workbook,
)

from .run_contracts import RunArtifacts, RunOutcome, RunRequest
from .suite_context import PlaceholderError, SuiteContext

logger = logging.getLogger(__name__)

HttpClientFactory = Callable[[EnvironmentSettings], httpx.Client]


class RunExecutionError(Exception):
    """Raised when a run use case cannot be completed."""


def execute_api_test_run(
    request: RunRequest,
    *,
    client_factory: HttpClientFactory | None = None,
) -> RunOutcome:
    """Execute every fixture suite against the selected environment and write the results."""
    resolved_client_factory = client_factory or create_http_client
    artifacts = _load_run_artifacts(request)
    settings = artifacts.configuration.environment
    runner = artifacts.configuration.runner

    run_start = datetime.now(UTC)
    logger.info(
        "Running %d suites against %s (%s)",
        len(artifacts.suites),
        settings.name,
        settings.api_base_url,
    )
    max_workers = max(1, min(runner.parallelism, len(artifacts.suites)))
    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        futures = [
            executor.submit(
                _run_suite_with_own_client, suite, settings, runner, resolved_client_factory
            )
            for suite in artifacts.suites
        ]
        suite_results = [future.result() for future in futures]

    output_path = _resolve_output_path(request, settings.name)
    run_metadata = RunMetadata(
        run_start=run_start,
        environment=settings.name,
        base_url=settings.api_base_url,
        fixture_paths=tuple(suite.source_path.resolve() for suite in artifacts.suites),
        output_path=output_path.resolve(),
        run_end=datetime.now(UTC),
    )
    write_results_workbook(output_path, suite_results, run_metadata)

    totals = summarize_suites(suite_results)
    outcome = RunOutcome(
        output_path=output_path.resolve(),
        total=sum(totals.values()),
        passed=totals[CaseStatus.PASSED],
        failed=totals[CaseStatus.FAILED],
        errors=totals[CaseStatus.ERROR],
        skipped=totals[CaseStatus.SKIPPED],
    )
    logger.info(
        "Run finished: %d passed, %d failed, %d errors, %d skipped",
        outcome.passed,
        outcome.failed,
        outcome.errors,
        outcome.skipped,
    )
    return outcome


def _load_run_artifacts(request: RunRequest) -> RunArtifacts:
    if not request.fixture_paths:
        raise RunExecutionError("At least one fixture file is required.")
    try:
        configuration = load_configuration(request.config_path, request.environment)
        suites = tuple(read_fixture_suite(path) for path in request.fixture_paths)
    except (ConfigurationError, FixtureValidationError, OSError) as exc:
        raise RunExecutionError(str(exc)) from exc
    return RunArtifacts(configuration=configuration, suites=suites)


def _resolve_output_path(request: RunRequest, environment: str) -> Path:
    destination = (
        Path(request.output_dir) if request.output_dir else Path(request.fixture_paths[0]).parent
    )
    timestamp = datetime.now(UTC).strftime("%Y%m%d-%H%M%S")
    return destination / f"api-test-results-{environment}-{timestamp}.xlsx"


def _run_suite_with_own_client(
    suite: ExpectationSuite,
    settings: EnvironmentSettings,
    runner: RunnerSettings,
    client_factory: HttpClientFactory,
) -> SuiteResult:
    with client_factory(settings) as http_client:
        api_client = ApiClient(http_client, settings.api_base_url)
        session = AuthenticationSession(api_client, settings, runner.default_user)
        return run_suite(suite, api_client, session)


def run_suite(
    suite: ExpectationSuite,
    api_client: ApiClient,
    session: AuthenticationSession,
    context: SuiteContext | None = None,
) -> SuiteResult:
    """Run the cases of one suite in order, sharing one SuiteContext.

    A failing or erroring case never stops the suite.
    """
    suite_context = context if context is not None else SuiteContext()
    logger.info("Suite %s: %d cases", suite.name, len(suite.cases))
    results = [
        _run_case(document, api_client, session, suite_context) for document in suite.cases
    ]
    return SuiteResult(
        name=suite.name,
        source_path=suite.source_path,
        cases=tuple(results),
        requests=suite_context.requests,
    )


def _run_case(
    document: ExpectationDocument,
    api_client: ApiClient,
    session: AuthenticationSession,
    context: SuiteContext,
) -> CaseResult:
    method = document.request.method
    expected_status = document.expectation.expected_status
    if document.skip:
        logger.info("Skipping %s", document.name)
        return CaseResult.skipped(
            document.name, method, document.request.url, expected_status=expected_status
        )

    logger.info("Running %s", document.name)
    extra_warnings: tuple[ValidationWarning, ...] = ()
    try:
        request = context.resolve_placeholders(document.request)
        token = session.token_for(document.user) if document.requires_auth else None
        if document.rate_limit is not None:
            response, extra_warnings = _run_rate_limit(
                document, request, document.rate_limit, api_client, token, context
            )
        else:
            response = _send(document.name, request, api_client, token, context)
    except (ApiRequestError, PlaceholderError) as exc:
        logger.error("%s: %s", document.name, exc)
        return CaseResult.errored(
            document.name,
            method,
            document.request.url,
            expected_status=expected_status,
            error=exc,
        )

    if response is None:
        return CaseResult(
            case_name=document.name,
            method=method,
            url=request.url,
            status=CaseStatus.PASSED,
            expected_status=expected_status,
            warnings=extra_warnings,
        )

    try:
        report = validate_api_response(
            document.expectation, response, context.last_payment_status
        )
    except ResponseValidationError as exc:
        logger.error("%s failed: %s", document.name, exc)
        return CaseResult.failed(
            document.name,
            method,
            request.url,
            expected_status=expected_status,
            status_code=response.status,
            duration_ms=response.duration_ms,
            error=exc,
            extra_warnings=extra_warnings,
        )
    except UnsupportedJsonValueError as exc:
        logger.error("%s: %s", document.name, exc)
        return CaseResult.errored(
            document.name,
            method,
            request.url,
            expected_status=expected_status,
            error=exc,
        )

    _remember_outcome(document, response, context)
    logger.info("%s passed", document.name)
    return CaseResult.passed(
        document.name,
        method,
        request.url,
        expected_status=expected_status,
        status_code=response.status,
        duration_ms=response.duration_ms,
        report=report,
        extra_warnings=extra_warnings,
    )


def _send(
    case_name: str,
    request: RequestSpec,
    api_client: ApiClient,
    token: str | None,
    context: SuiteContext,
) -> ActualResponse:
    sent_at = datetime.now(UTC)
    try:
        response = api_client.send(request, token)
    except ApiRequestError:
        context.record_request(
            RequestRecord(case_name, request.method, request.url, None, None, sent_at)
        )
        raise
    context.record_request(
        RequestRecord(
            case_name, request.method, request.url, response.status, response.duration_ms, sent_at
        )
    )
    return response


# pylint: disable=too-many-arguments,too-many-positional-arguments
def _run_rate_limit(
    document: ExpectationDocument,
    request: RequestSpec,
    rate_limit: RateLimitExpectation,
    api_client: ApiClient,
    token: str | None,
    context: SuiteContext,
) -> tuple[ActualResponse | None, tuple[ValidationWarning, ...]]:
    """Repeat the request until the limit status appears.

    Only the limiting response is validated; when the limit never shows up the
    case gets a RATE_LIMIT warning and no response.
    """
    for attempt in range(1, rate_limit.request_count + 1):
        response = _send(document.name, request, api_client, token, context)
        if response.status == rate_limit.expected_limit_status:
            logger.info("Rate limit enforced after %d requests", attempt)
            return response, ()
    message = f"Rate limit not reached after {rate_limit.request_count} requests"
    logger.warning(message)
    return None, (ValidationWarning(category=WarningCategory.RATE_LIMIT, message=message),)


# pylint: enable=too-many-arguments,too-many-positional-arguments


def _remember_outcome(
    document: ExpectationDocument, response: ActualResponse, context: SuiteContext
) -> None:
    context.store_from_response(response.data, document.store_fields)
    if document.expectation.validate_payment_status:
        status = resolve(response.data, document.expectation.payment_status_field)
        if isinstance(status, str):
            context.last_payment_status = status


def validate_recorded_response(
    fixture_path: Path | str,
    case_name: str,
    response_path: Path | str,
    previous_payment_status: str | None = None,
) -> ValidationReport:
    """Validate a recorded `{status, headers, data, duration}` JSON file against one case.

    Raises:
      RunExecutionError: When the fixture, the case, or the recorded response cannot be loaded.
      ResponseValidationError: When the recorded response fails validation.
    """
    try:
        suite = read_fixture_suite(fixture_path)
    except FixtureValidationError as exc:
        raise RunExecutionError(str(exc)) from exc
    try:
        document = suite.case(case_name)
    except KeyError as exc:
        available = ", ".join(case.name for case in suite.cases)
        raise RunExecutionError(
            f"Unknown test case '{case_name}' in {suite.source_path}. Available: {available}"
        ) from exc

    response = _read_recorded_response(Path(response_path))
    return validate_api_response(document.expectation, response, previous_payment_status)


def _read_recorded_response(path: Path) -> ActualResponse:
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise RunExecutionError(f"Unable to read recorded response {path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise RunExecutionError(f"Recorded response {path} is not valid JSON: {exc}") from exc
    if not isinstance(raw, dict):
        raise RunExecutionError(f"Recorded response {path} must be a JSON object.")
    try:
        return ActualResponse.from_mapping(raw)
    except ValueError as exc:
        raise RunExecutionError(f"{path}: {exc}") from exc


def summarize_suites(suite_results: Sequence[SuiteResult]) -> dict[CaseStatus, int]:
    return {
        status: sum(suite.count(status) for suite in suite_results) for status in CaseStatus
    }
