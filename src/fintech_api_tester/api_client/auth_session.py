"""Login-based bearer token acquisition with static-token fallback."""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping

from fintech_api_tester.configuration import Credentials, EnvironmentSettings
from fintech_api_tester.expectation_ingestion import RequestSpec

from .http_client import ApiClient, ApiRequestError, mask_token

logger = logging.getLogger(__name__)

PHONE_PATTERN = re.compile(r"\+\d{10,15}")
OTP_PATTERN = re.compile(r"\d{6}")
MIN_PASSWORD_LENGTH = 8


class AuthenticationError(Exception):
    """Raised when credentials are invalid or the login endpoint refuses them."""


def validate_credentials(credentials: Credentials, user_type: str = "user") -> None:
    """Check credential formats before they are sent anywhere."""
    if PHONE_PATTERN.fullmatch(credentials.phone) is None:
        raise AuthenticationError(
            f"Invalid phone number format for {user_type}: {credentials.phone}. "
            "Expected format: +[country code][number] (e.g., +911234567890)"
        )
    if len(credentials.password) < MIN_PASSWORD_LENGTH:
        raise AuthenticationError(
            f"Invalid password for {user_type}: Password must be at least "
            f"{MIN_PASSWORD_LENGTH} characters long"
        )
    if OTP_PATTERN.fullmatch(credentials.otp) is None:
        raise AuthenticationError(
            f"Invalid OTP format for {user_type}: must be exactly 6 digits."
        )


class AuthenticationSession:
    """Per-suite token cache keyed by user type."""

    def __init__(
        self, api_client: ApiClient, settings: EnvironmentSettings, default_user: str
    ) -> None:
        self._api_client = api_client
        self._settings = settings
        self._default_user = default_user
        self._tokens: dict[str, str] = {}
        self._failed_users: set[str] = set()

    def authenticate(self, user: str | None = None) -> str:
        """Log in as `user` and cache the returned access token.

        Raises:
          AuthenticationError: On missing or malformed credentials or a rejected login.
        """
        user_type = user or self._default_user
        if not self._settings.auth_endpoint:
            raise AuthenticationError(
                f"No auth_endpoint configured for environment '{self._settings.name}'."
            )
        credentials = self._settings.credentials.get(user_type)
        if credentials is None:
            available = ", ".join(sorted(self._settings.credentials)) or "none"
            raise AuthenticationError(
                f"No credentials configured for user type '{user_type}'. Available: {available}"
            )
        validate_credentials(credentials, user_type)

        logger.info("Authenticating %s at %s", user_type, self._settings.auth_endpoint)
        request = RequestSpec(
            method="POST",
            url=self._settings.auth_endpoint,
            request_body={
                "phone": credentials.phone,
                "password": credentials.password,
                "otp": credentials.otp,
            },
        )
        try:
            response = self._api_client.send(request)
        except ApiRequestError as exc:
            raise AuthenticationError(f"Authentication request failed: {exc}") from exc

        token = _extract_token(response.data)
        if response.status != 200 or token is None:
            raise AuthenticationError(
                f"Authentication failed. Status: {response.status}. Response: {response.data}"
            )
        logger.info("Access token generated for %s: %s", user_type, mask_token(token))
        self._tokens[user_type] = token
        return token

    def token_for(self, user: str | None = None) -> str | None:
        """Return a cached or fresh token, or the static token when login is unavailable."""
        user_type = user or self._default_user
        cached = self._tokens.get(user_type)
        if cached is not None:
            return cached
        if self._settings.auth_endpoint and user_type not in self._failed_users:
            try:
                return self.authenticate(user_type)
            except AuthenticationError as exc:
                self._failed_users.add(user_type)
                logger.warning("Could not get access token, using configured token: %s", exc)
        return self._settings.api_token


def _extract_token(data: object) -> str | None:
    if not isinstance(data, Mapping):
        return None
    token = data.get("access_token")
    if isinstance(token, str) and token:
        return token
    return None
