"""Configuration domain entities."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path


@dataclass(frozen=True)
class Credentials:
    """Login credentials for one user type."""

    phone: str
    password: str = field(repr=False)
    otp: str = field(repr=False)


@dataclass(frozen=True)
class EnvironmentSettings:
    """Connectivity settings for one target environment."""

    name: str
    api_base_url: str
    auth_endpoint: str | None
    api_token: str | None = field(repr=False)
    timeout_seconds: int
    credentials: Mapping[str, Credentials]


@dataclass(frozen=True)
class RunnerSettings:
    """Execution settings shared by every suite."""

    parallelism: int
    default_user: str


@dataclass(frozen=True)
class Configuration:
    """Top-level configuration aggregate for the selected environment."""

    path: Path
    environment: EnvironmentSettings
    runner: RunnerSettings
    available_environments: tuple[str, ...]
