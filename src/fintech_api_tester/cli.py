"""Command line interface entry point."""

from __future__ import annotations

import logging
import sys

import click

from fintech_api_tester.configuration import (
    DEFAULT_CONFIG_FILENAME,
    write_placeholder_configuration,
)
from fintech_api_tester.response_validation import ResponseValidationError
from fintech_api_tester.run_execution import (
    RunExecutionError,
    RunRequest,
    execute_api_test_run,
    validate_recorded_response,
)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class CliError(Exception):
    """Custom CLI error."""


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="fintech-api-tester")
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default="WARNING",
    show_default=True,
    help="Logging verbosity written to stderr",
)
def cli(log_level: str) -> None:
    """Data-driven fintech API tester."""
    logging.basicConfig(level=log_level.upper(), format=LOG_FORMAT, stream=sys.stderr)


@cli.command(name="generate-config")
@click.option(
    "--output",
    "output_path",
    required=False,
    default=DEFAULT_CONFIG_FILENAME,
    show_default=True,
    type=click.Path(path_type=str),
    help="Path to the YAML test configuration template to write",
)
def generate_config(output_path: str) -> None:
    """Generate a placeholder YAML test configuration with guidance comments."""
    try:
        resolved_output = write_placeholder_configuration(output_path)
    except (FileExistsError, OSError) as exc:
        raise CliError(str(exc)) from exc
    click.echo(str(resolved_output))


@cli.command(name="run")
@click.option(
    "--config",
    "config_path",
    required=True,
    type=click.Path(path_type=str),
    help="Path to YAML/JSON test configuration file",
)
@click.option(
    "--fixtures",
    "fixture_paths",
    required=True,
    multiple=True,
    type=click.Path(path_type=str),
    help="Fixture file mapping test names to expectation documents (repeatable)",
)
@click.option(
    "--environment",
    "environment",
    required=False,
    envvar="TEST_ENV",
    help="Environment name from the configuration file",
)
@click.option(
    "--output-dir",
    "output_dir",
    required=False,
    type=click.Path(path_type=str),
    help="Optional directory for storing result workbooks",
)
def run_tests(
    config_path: str,
    fixture_paths: tuple[str, ...],
    environment: str | None,
    output_dir: str | None,
) -> None:
    """Execute every case of the fixture suites and write a results workbook."""
    try:
        outcome = execute_api_test_run(
            RunRequest(
                config_path=config_path,
                fixture_paths=tuple(fixture_paths),
                environment=environment,
                output_dir=output_dir,
            )
        )
    except RunExecutionError as exc:
        raise CliError(str(exc)) from exc
    click.echo(str(outcome.output_path))
    summary = (
        f"{outcome.passed} passed, {outcome.failed} failed, "
        f"{outcome.errors} errors, {outcome.skipped} skipped"
    )
    if outcome.has_failures:
        raise CliError(summary)
    click.echo(summary)


@cli.command(name="validate")
@click.option(
    "--fixtures",
    "fixture_path",
    required=True,
    type=click.Path(path_type=str),
    help="Fixture file containing the test case",
)
@click.option("--case", "case_name", required=True, help="Test name inside the fixture file")
@click.option(
    "--response",
    "response_path",
    required=True,
    type=click.Path(path_type=str),
    help="Recorded response JSON with status, headers, data and duration",
)
@click.option(
    "--previous-status",
    "previous_status",
    required=False,
    help="Payment status seen before this response, for transition checks",
)
def validate(
    fixture_path: str, case_name: str, response_path: str, previous_status: str | None
) -> None:
    """Validate a recorded response against one test case without sending requests."""
    try:
        report = validate_recorded_response(
            fixture_path, case_name, response_path, previous_status
        )
    except (RunExecutionError, ResponseValidationError) as exc:
        raise CliError(str(exc)) from exc
    for warning in report.warnings:
        click.echo(f"warning [{warning.category.value}]: {warning.message}")
    click.echo("validated")


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for console_scripts wiring."""
    argv = argv if argv is not None else sys.argv[1:]
    try:
        cli.main(args=list(argv), standalone_mode=False)
    except CliError as exc:
        click.echo(str(exc), err=True)
        return 1
    except click.ClickException as exc:
        exc.show()
        return exc.exit_code
    except click.Abort:
        click.echo("Aborted.", err=True)
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
