"""API client exports."""

from fintech_api_tester.response_validation import ActualResponse

from .auth_session import AuthenticationError, AuthenticationSession, validate_credentials
from .http_client import (
    DEFAULT_HEADERS,
    ApiClient,
    ApiRequestError,
    create_http_client,
    join_url,
    to_actual_response,
)

__all__ = [
    "ActualResponse",
    "ApiClient",
    "ApiRequestError",
    "AuthenticationError",
    "AuthenticationSession",
    "DEFAULT_HEADERS",
    "create_http_client",
    "join_url",
    "to_actual_response",
    "validate_credentials",
]
