"""HTTP request execution over httpx."""

from __future__ import annotations

import json
import logging
import time
from collections.abc import Mapping

import httpx

from fintech_api_tester.configuration import EnvironmentSettings
from fintech_api_tester.expectation_ingestion import RequestSpec
from fintech_api_tester.response_validation import ActualResponse

logger = logging.getLogger(__name__)

DEFAULT_HEADERS: Mapping[str, str] = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
    ),
    "Accept": "application/json",
    "Content-Type": "application/json",
}
BEARER_PREFIX = "Bearer "


class ApiRequestError(Exception):
    """Raised when a request cannot be sent or no response arrives."""


def create_http_client(settings: EnvironmentSettings) -> httpx.Client:
    """Build the httpx client used for one environment."""
    return httpx.Client(timeout=float(settings.timeout_seconds), follow_redirects=True)


def join_url(base_url: str, path: str) -> str:
    """Append a request path to the base URL unless the path is already absolute."""
    if path.startswith(("http://", "https://")):
        return path
    if not path:
        return base_url
    return f"{base_url.rstrip('/')}/{path.lstrip('/')}"


def mask_token(token: str | None) -> str:
    if not token:
        return "<none>"
    return f"{token[:10]}..."


class ApiClient:
    """Sends expectation requests and maps responses to ActualResponse."""

    def __init__(self, http_client: httpx.Client, base_url: str) -> None:
        self._http_client = http_client
        self._base_url = base_url

    def build_headers(
        self, token: str | None = None, custom_headers: Mapping[str, str] | None = None
    ) -> dict[str, str]:
        """Merge default, custom and authorization headers; custom headers win over defaults."""
        headers = dict(DEFAULT_HEADERS)
        if custom_headers:
            headers.update(custom_headers)
        if token:
            headers["Authorization"] = (
                token if token.startswith(BEARER_PREFIX) else f"{BEARER_PREFIX}{token}"
            )
        return headers

    def send(self, request: RequestSpec, token: str | None = None) -> ActualResponse:
        """Send one request; HTTP error statuses are returned, never raised.

        Raises:
          ApiRequestError: On connection failures, timeouts, or invalid requests.
        """
        url = join_url(self._base_url, request.url)
        headers = self.build_headers(token, request.headers)
        logger.info("API Request: %s %s", request.method, request.url)
        if request.params:
            logger.debug("Query Params: %s", json.dumps(request.params, default=str))
        if request.request_body is not None:
            logger.debug("Request Body: %s", json.dumps(request.request_body, default=str))
        if token:
            logger.debug("Auth Token: %s", mask_token(token))

        started = time.perf_counter()
        try:
            response = self._http_client.request(
                request.method,
                url,
                params=dict(request.params) or None,
                json=request.request_body,
                headers=headers,
            )
        except httpx.HTTPError as exc:
            raise ApiRequestError(f"{request.method} {url} failed: {exc}") from exc
        duration_ms = (time.perf_counter() - started) * 1000

        actual = to_actual_response(response, duration_ms)
        logger.info("Response Status: %s (%.0f ms)", actual.status, duration_ms)
        logger.debug("Response Body: %s", json.dumps(actual.data, default=str, indent=2))
        return actual


def to_actual_response(response: httpx.Response, duration_ms: float | None) -> ActualResponse:
    """Decode a JSON body where possible, falling back to the raw text."""
    data: object
    if not response.content:
        data = None
    else:
        try:
            data = response.json()
        except ValueError:
            data = response.text
    return ActualResponse(
        status=response.status_code,
        headers=dict(response.headers.items()),
        data=data,
        duration_ms=duration_ms,
    )
