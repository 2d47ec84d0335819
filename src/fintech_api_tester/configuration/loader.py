"""Configuration loader service."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml

from .runtime_settings import Configuration, Credentials, EnvironmentSettings, RunnerSettings

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 15
DEFAULT_USER = "admin"


class ConfigurationError(Exception):
    """Raised when the configuration file is invalid."""


def load_configuration(config_path: Path | str, environment: str | None = None) -> Configuration:
    """Load and validate the configuration file, selecting one environment.

    Args:
      config_path: YAML or JSON configuration file.
      environment: Environment name; falls back to `default_environment`.

    Raises:
      ConfigurationError: When the file is missing, malformed, or names an unknown environment.
    """
    path = Path(config_path)
    if not path.exists():
        raise ConfigurationError(f"Configuration file not found: {path}")

    text = path.read_text(encoding="utf-8")
    try:
        parsed = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Failed to parse configuration file: {exc}") from exc

    if parsed is None:
        parsed = {}

    if not isinstance(parsed, Mapping):
        raise ConfigurationError("Configuration root must be a mapping.")

    environments_section = _require_mapping(parsed.get("environments"), "environments")
    if not environments_section:
        raise ConfigurationError("Configuration section 'environments' must not be empty.")
    environments = {
        str(name): _parse_environment_section(str(name), value)
        for name, value in environments_section.items()
    }

    selected = environment or _optional_string(
        parsed.get("default_environment"), "default_environment"
    )
    if selected is None:
        raise ConfigurationError(
            "No environment selected: pass an environment or set default_environment."
        )
    if selected not in environments:
        known = ", ".join(sorted(environments))
        raise ConfigurationError(f"Unknown environment '{selected}'. Available: {known}")

    runner = _parse_runner_section(parsed.get("runner"))
    logger.debug("Loaded configuration %s for environment %s", path, selected)
    return Configuration(
        path=path,
        environment=environments[selected],
        runner=runner,
        available_environments=tuple(environments),
    )


def _parse_environment_section(name: str, value: Any) -> EnvironmentSettings:
    prefix = f"environments.{name}"
    section = _require_mapping(value, prefix)
    api_base_url = _require_non_empty_string(section.get("api_base_url"), f"{prefix}.api_base_url")
    if not api_base_url.startswith(("http://", "https://")):
        raise ConfigurationError(f"{prefix}.api_base_url must be an http(s) URL.")
    auth_endpoint = _optional_string(section.get("auth_endpoint"), f"{prefix}.auth_endpoint")
    api_token = _optional_string(section.get("api_token"), f"{prefix}.api_token")
    timeout_seconds = _require_positive_int(
        section.get("timeout_seconds", DEFAULT_TIMEOUT_SECONDS), f"{prefix}.timeout_seconds"
    )
    credentials = _parse_credentials_section(section.get("credentials"), f"{prefix}.credentials")
    if auth_endpoint and not credentials:
        raise ConfigurationError(f"{prefix}.auth_endpoint requires at least one credentials entry.")
    return EnvironmentSettings(
        name=name,
        api_base_url=api_base_url,
        auth_endpoint=auth_endpoint,
        api_token=api_token,
        timeout_seconds=timeout_seconds,
        credentials=credentials,
    )


def _parse_credentials_section(value: Any, prefix: str) -> dict[str, Credentials]:
    if value is None:
        return {}
    section = _require_mapping(value, prefix)
    credentials: dict[str, Credentials] = {}
    for user_type, entry in section.items():
        entry_prefix = f"{prefix}.{user_type}"
        mapping = _require_mapping(entry, entry_prefix)
        credentials[str(user_type)] = Credentials(
            phone=_require_scalar_text(mapping.get("phone"), f"{entry_prefix}.phone"),
            password=_require_scalar_text(mapping.get("password"), f"{entry_prefix}.password"),
            otp=_require_scalar_text(mapping.get("otp"), f"{entry_prefix}.otp"),
        )
    return credentials


def _parse_runner_section(value: Any) -> RunnerSettings:
    section = _require_mapping(value, "runner") if value is not None else {}
    parallelism = _require_positive_int(section.get("parallelism", 1), "runner.parallelism")
    default_user = _require_non_empty_string(
        section.get("default_user", DEFAULT_USER), "runner.default_user"
    )
    return RunnerSettings(parallelism=parallelism, default_user=default_user)


def _require_mapping(value: Any, section_name: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise ConfigurationError(f"Configuration section '{section_name}' is required.")
    return value


def _require_non_empty_string(value: Any, field_name: str) -> str:
    if not isinstance(value, str):
        raise ConfigurationError(f"{field_name} must be a string.")
    stripped = value.strip()
    if not stripped:
        raise ConfigurationError(f"{field_name} must not be empty.")
    return stripped


def _require_scalar_text(value: Any, field_name: str) -> str:
    # YAML reads an unquoted OTP such as 123456 as an int
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    return _require_non_empty_string(value, field_name)


def _optional_string(value: Any, field_name: str) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ConfigurationError(f"{field_name} must be a string.")
    stripped = value.strip()
    return stripped or None


def _require_positive_int(value: Any, field_name: str) -> int:
    if isinstance(value, bool):
        raise ConfigurationError(f"{field_name} must be an integer.")
    if not isinstance(value, int):
        raise ConfigurationError(f"{field_name} must be an integer.")
    if value <= 0:
        raise ConfigurationError(f"{field_name} must be greater than zero.")
    return value
