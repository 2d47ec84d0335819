"""Configuration scaffold generation helpers."""

from __future__ import annotations

from pathlib import Path

DEFAULT_CONFIG_FILENAME = "config.yaml"

_CONFIG_SCAFFOLD_TEMPLATE = """# Test configuration template for fintech-api-tester.
# Replace every <REQUIRED> placeholder before running the run command.
# Remove <OPTIONAL> entries your setup does not need.

# Environment used when --environment / TEST_ENV is not given.
default_environment: dev

environments:
  dev:
    api_base_url: "<REQUIRED>"
    # Login endpoint relative to api_base_url; omit to use api_token only.
    auth_endpoint: "<OPTIONAL>"
    # Static bearer token used when login is unavailable or fails.
    api_token: "<OPTIONAL>"
    timeout_seconds: 15
    credentials:
      admin:
        phone: "<REQUIRED>"     # +<country code><number>, 10-15 digits
        password: "<REQUIRED>"  # at least 8 characters
        otp: "<REQUIRED>"       # exactly 6 digits
      # enduser:
      #   phone: "<OPTIONAL>"
      #   password: "<OPTIONAL>"
      #   otp: "<OPTIONAL>"
  # uat:
  #   api_base_url: "<OPTIONAL>"

runner:
  # Number of fixture suites executed concurrently.
  parallelism: 1
  # Credentials entry used by documents that do not name a user.
  default_user: admin
"""


def build_placeholder_configuration() -> str:
    """Build a YAML test configuration template with placeholders and inline guidance."""
    return _CONFIG_SCAFFOLD_TEMPLATE


def write_placeholder_configuration(output_path: Path | str) -> Path:
    """Write the placeholder test configuration template to the requested output path.

    Args:
      output_path: Destination file path for the scaffold.

    Returns:
      The resolved destination path.

    Raises:
      FileExistsError: If the destination file already exists.
      OSError: If writing the scaffold fails.
    """
    destination = Path(output_path)
    if destination.exists():
        raise FileExistsError(f"Test configuration file already exists: {destination.resolve()}")
    destination.write_text(build_placeholder_configuration(), encoding="utf-8")
    return destination.resolve()
