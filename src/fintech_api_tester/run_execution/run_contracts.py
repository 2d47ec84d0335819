"""Run execution entities."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from fintech_api_tester.configuration.runtime_settings import Configuration
from fintech_api_tester.expectation_ingestion import ExpectationSuite


@dataclass(frozen=True)
class RunRequest:
    """Input contract for executing one run."""

    config_path: str
    fixture_paths: tuple[str, ...]
    environment: str | None = None
    output_dir: str | None = None


@dataclass(frozen=True)
class RunOutcome:
    """Output contract for one completed run."""

    output_path: Path
    total: int
    passed: int
    failed: int
    errors: int
    skipped: int

    @property
    def has_failures(self) -> bool:
        return self.failed > 0 or self.errors > 0


@dataclass(frozen=True)
class RunArtifacts:
    """Loaded configuration and fixture suites required during run execution."""

    configuration: Configuration
    suites: tuple[ExpectationSuite, ...]
