"""
Async HTTP transport for the hosted Git provider API.

Handles async HTTP communication with automatic retry logic, pagination
and error handling using the httpx async client.
"""

import asyncio
import random
import time
from collections.abc import Callable, Coroutine
from dataclasses import dataclass
from typing import Any

import httpx

from pullmaster.exceptions import (
    NotFoundError,
    PullmasterError,
    RateLimitedError,
    TransientNetworkError,
    UnauthorizedError,
    UnknownError,
)
from pullmaster.logging import get_logger, log_http_request, log_http_response

logger = get_logger("http")

GITHUB_JSON = "application/vnd.github+json"
GITHUB_RAW = "application/vnd.github.raw"
GITHUB_API_VERSION = "2022-11-28"


@dataclass
class RetryConfig:
    """Configuration for automatic retry behavior."""

    max_retries: int = 2  # 3 attempts in total
    base_delay: float = 0.5  # Seconds before the first retry
    backoff_factor: float = 2.0
    respect_retry_after: bool = True
    max_backoff: float = 60.0  # Maximum backoff time in seconds
    jitter: float = 0.1  # Jitter factor (0.1 = ±10%)


class AsyncHTTPTransport:
    """
    Async HTTP transport layer with retry logic.

    Handles:
    - Token authentication and provider API headers
    - Exponential backoff with jitter for rate-limited and transient failures
    - Retry-After / X-RateLimit-Reset hints for rate limiting
    - Link-header pagination
    - Error response parsing into typed exceptions
    """

    def __init__(
        self,
        base_url: str,
        token: str,
        timeout: float = 30.0,
        retry_config: RetryConfig | None = None,
        http_transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Initialize async HTTP transport.

        Args:
            base_url: Base URL for API requests (e.g., "https://api.github.com")
            token: Provider access token
            timeout: Per-request timeout in seconds
            retry_config: Configuration for retry behavior
            http_transport: Optional httpx transport (used by tests to mock the network)
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.retry_config = retry_config or RetryConfig()

        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            transport=http_transport,
            # Renamed and transferred repositories answer with a 301
            follow_redirects=True,
            headers={
                "Accept": GITHUB_JSON,
                "Authorization": f"Bearer {token}",
                "X-GitHub-Api-Version": GITHUB_API_VERSION,
            },
        )

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()

    async def __aenter__(self) -> "AsyncHTTPTransport":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    async def request(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        """
        Make a request with automatic retry.

        Args:
            method: HTTP method
            path: API path or absolute URL
            params: Query parameters
            headers: Extra request headers

        Returns:
            Successful (2xx) response

        Raises:
            PullmasterError: On API errors, after retries where applicable
        """
        async def make_request() -> httpx.Response:
            log_http_request(method, path, params=params)
            return await self._client.request(
                method, path, params=params, headers=headers
            )

        return await self._execute_with_retry(make_request)

    async def get_json(
        self, path: str, params: dict[str, Any] | None = None
    ) -> Any:
        """GET a path and return the decoded JSON body."""
        response = await self.request("GET", path, params=params)
        return self._decode_json(response)

    async def get_text(
        self,
        path: str,
        params: dict[str, Any] | None = None,
        accept: str = GITHUB_RAW,
    ) -> str:
        """GET a path with a non-JSON media type and return the body text."""
        response = await self.request(
            "GET", path, params=params, headers={"Accept": accept}
        )
        return response.text

    async def get_paginated(
        self, path: str, params: dict[str, Any] | None = None
    ) -> list[Any]:
        """
        GET a list endpoint and follow ``Link: rel="next"`` until exhausted.

        Args:
            path: API path of a list endpoint
            params: Extra query parameters

        Returns:
            All items across pages, in provider order
        """
        items: list[Any] = []
        url: str | None = path
        page_params: dict[str, Any] | None = {"per_page": 100, **(params or {})}

        while url is not None:
            response = await self.request("GET", url, params=page_params)
            page = self._decode_json(response)
            if not isinstance(page, list):
                raise UnknownError(
                    "UNEXPECTED_RESPONSE", f"Expected a list from {path}"
                )
            items.extend(page)

            next_link = response.links.get("next")
            url = next_link.get("url") if next_link else None
            # The next URL already carries the query string
            page_params = None

        return items

    async def _execute_with_retry(
        self, request_fn: Callable[[], Coroutine[Any, Any, httpx.Response]]
    ) -> httpx.Response:
        """
        Execute a request with automatic retry on retryable errors.

        Args:
            request_fn: Async function that makes the HTTP request

        Returns:
            Successful response

        Raises:
            PullmasterError: On non-retryable errors or after max retries
        """
        attempt = 0
        while True:
            cause: Exception | None = None
            started = time.monotonic()
            try:
                response = await request_fn()
            except httpx.TimeoutException as e:
                cause = e
                error: PullmasterError = TransientNetworkError(
                    "TIMEOUT", str(e) or "Request timed out"
                )
            except httpx.TooManyRedirects as e:
                cause = e
                error = UnknownError("TOO_MANY_REDIRECTS", str(e))
            except httpx.RequestError as e:
                # Network errors are retryable
                cause = e
                error = TransientNetworkError("CONNECTION_ERROR", str(e))
            else:
                log_http_response(
                    response.status_code,
                    str(response.request.url),
                    elapsed_ms=(time.monotonic() - started) * 1000,
                    attempt=attempt,
                )
                if response.is_success:
                    return response
                error = self._parse_error_response(response)

            if not self._should_retry(error, attempt):
                raise error from cause

            retry_after = getattr(error, "retry_after", None)
            wait_time = self._get_backoff_time(attempt, retry_after)
            logger.info(
                "Retrying after %s (attempt %d of %d) in %.2fs",
                error.code,
                attempt + 2,
                self.retry_config.max_retries + 1,
                wait_time,
            )
            await asyncio.sleep(wait_time)
            attempt += 1

    def _should_retry(self, error: PullmasterError, attempt: int) -> bool:
        """
        Determine if a request should be retried.

        Args:
            error: Typed error raised by the attempt
            attempt: Current attempt number (0-indexed)

        Returns:
            True if the request should be retried
        """
        if attempt >= self.retry_config.max_retries:
            return False

        return error.retryable

    def _get_backoff_time(
        self, attempt: int, retry_after: float | None
    ) -> float:
        """
        Calculate backoff time for retry.

        Uses exponential backoff with jitter, respecting a provider retry
        hint if present.

        Args:
            attempt: Current attempt number (0-indexed)
            retry_after: Provider-supplied wait in seconds (if present)

        Returns:
            Time to wait in seconds
        """
        if retry_after is not None and self.retry_config.respect_retry_after:
            return min(max(retry_after, 0.0), self.retry_config.max_backoff)

        # Exponential backoff: base_delay * backoff_factor ^ attempt
        base_wait = self.retry_config.base_delay * (
            self.retry_config.backoff_factor ** attempt
        )

        # Apply jitter (±jitter%)
        jitter_range = base_wait * self.retry_config.jitter
        jitter = random.uniform(-jitter_range, jitter_range)
        wait_time = base_wait + jitter

        # Cap at max_backoff
        return min(wait_time, self.retry_config.max_backoff)

    def _decode_json(self, response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise UnknownError(
                "INVALID_JSON",
                f"Malformed JSON from {response.request.url}",
                response.headers.get("X-GitHub-Request-Id"),
            ) from e

    def _parse_error_response(self, response: httpx.Response) -> PullmasterError:
        """
        Parse an error response into a typed exception.

        Args:
            response: HTTP response with a non-2xx status (3xx left unfollowed included)

        Returns:
            Appropriate PullmasterError subclass
        """
        try:
            data = response.json()
        except ValueError:
            data = {}
        if not isinstance(data, dict):
            data = {}

        status_code = response.status_code
        message = data.get("message") or f"HTTP {status_code}"
        request_id = response.headers.get("X-GitHub-Request-Id")

        if status_code == 429 or (
            status_code == 403
            and response.headers.get("X-RateLimit-Remaining") == "0"
        ):
            return RateLimitedError(
                "RATE_LIMITED",
                message,
                self._retry_hint(response),
                request_id,
            )
        elif status_code in (401, 403):
            return UnauthorizedError("UNAUTHORIZED", message, request_id)
        elif status_code == 404:
            return NotFoundError("NOT_FOUND", message, request_id)
        elif status_code >= 500:
            return TransientNetworkError("SERVER_ERROR", message, request_id)
        else:
            return UnknownError(f"HTTP_{status_code}", message, request_id)

    def _retry_hint(self, response: httpx.Response) -> float | None:
        """Seconds to wait according to Retry-After or X-RateLimit-Reset."""
        retry_after = response.headers.get("Retry-After")
        if retry_after:
            try:
                return float(retry_after)
            except ValueError:
                pass  # Fall through to the reset header

        reset = response.headers.get("X-RateLimit-Reset")
        if reset:
            try:
                return max(float(reset) - time.time(), 0.0)
            except ValueError:
                pass

        return None
