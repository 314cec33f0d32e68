"""
Base classes for upstream integrations.

This module defines the foundational abstractions shared by integration
clients: the error taxonomy, client configuration, and an HTTP client
wrapper that gates every request through a rate limiter and retries
quota rejections.

Design Principles:
1. Async-first: All I/O operations are async
2. Type-safe: Pydantic models for all data
3. Rate-limited: Every attempt awaits the limiter first
4. Testable: Transport is injectable (httpx.MockTransport in tests)

Retry Strategy:
    - Retryable errors: 429 only
    - Non-retryable: every other status, timeouts, network errors
    - Backoff: fixed delay (Retry-After header wins), bounded attempts
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

import httpx

from trellomcp.resilience import ConstantBackoff, RateLimiter, RetryPolicy, retry_async

logger = logging.getLogger(__name__)


# =============================================================================
# Exceptions
# =============================================================================


class IntegrationError(Exception):
    """Base exception for integration errors."""

    def __init__(
        self,
        message: str,
        integration: str,
        *,
        status_code: int | None = None,
        response_body: str | None = None,
        retryable: bool = False,
    ):
        super().__init__(message)
        self.integration = integration
        self.status_code = status_code
        self.response_body = response_body
        self.retryable = retryable

    @property
    def message(self) -> str:
        return self.args[0]

    def __str__(self) -> str:
        parts = [f"[{self.integration}] {self.args[0]}"]
        if self.status_code:
            parts.append(f"(status={self.status_code})")
        return " ".join(parts)


class AuthenticationError(IntegrationError):
    """Raised when authentication fails (401/403)."""

    def __init__(self, message: str, integration: str, **kwargs):
        super().__init__(message, integration, retryable=False, **kwargs)


class RateLimitError(IntegrationError):
    """Raised when rate limit is exceeded (429)."""

    def __init__(
        self,
        message: str,
        integration: str,
        *,
        retry_after: float | None = None,
        **kwargs,
    ):
        super().__init__(message, integration, retryable=True, **kwargs)
        self.retry_after = retry_after


class NotFoundError(IntegrationError):
    """Raised when a resource is not found (404)."""

    def __init__(self, message: str, integration: str, **kwargs):
        super().__init__(message, integration, retryable=False, **kwargs)


class ValidationError(IntegrationError):
    """Raised when request validation fails (400/422)."""

    def __init__(self, message: str, integration: str, **kwargs):
        super().__init__(message, integration, retryable=False, **kwargs)


# =============================================================================
# Configuration
# =============================================================================


@dataclass(frozen=True, slots=True)
class IntegrationConfig:
    """Configuration for an integration client."""

    # Connection
    base_url: str = ""
    timeout: float = 30.0

    # Quota rejection handling
    max_rate_limit_retries: int = 10
    retry_delay: float = 1.0

    # Observability
    log_requests: bool = False
    log_responses: bool = False


# =============================================================================
# Base Client
# =============================================================================


class IntegrationClient(ABC):
    """
    Abstract base class for integration clients.

    Provides common functionality:
    - HTTP client management
    - Authentication injection
    - Rate limiting of every attempt
    - Error handling and mapping
    - Request/response logging

    Subclasses must implement:
    - name: Integration identifier
    - _get_auth_params(): Return authentication query parameters
    """

    def __init__(
        self,
        config: IntegrationConfig,
        *,
        rate_limiter: RateLimiter | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Initialize the integration client.

        Args:
            config: Integration configuration
            rate_limiter: Limiter awaited before each attempt (None = unlimited)
            transport: Optional httpx transport override
        """
        self.config = config
        self._rate_limiter = rate_limiter
        self._transport = transport
        self._client: httpx.AsyncClient | None = None
        self._retry_policy = RetryPolicy(
            max_attempts=config.max_rate_limit_retries + 1,
            backoff=ConstantBackoff(delay=config.retry_delay),
            retry_on=(RateLimitError,),
            delay_hint=_retry_after_hint,
        )

    @property
    @abstractmethod
    def name(self) -> str:
        """Unique name for this integration."""
        ...

    @abstractmethod
    def _get_auth_params(self) -> dict[str, str]:
        """Return authentication query parameters for requests."""
        ...

    @property
    def rate_limiter(self) -> RateLimiter | None:
        return self._rate_limiter

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.config.base_url,
                timeout=self.config.timeout,
                params=self._get_auth_params(),
                headers={"Accept": "application/json"},
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
    ) -> httpx.Response:
        """
        Make a rate-limited HTTP request, retrying quota rejections.

        Args:
            method: HTTP method (GET, POST, PUT, DELETE)
            path: URL path (appended to base_url)
            params: Query parameters
            json: JSON body

        Returns:
            httpx.Response

        Raises:
            IntegrationError: On any non-retryable error or after max retries
        """
        return await retry_async(
            lambda: self._do_request(method, path, params=params, json=json),
            self._retry_policy,
            operation_name=f"[{self.name}] {method} {path}",
        )

    async def _do_request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
    ) -> httpx.Response:
        """
        Execute a single HTTP request.

        This is the internal method that _request wraps with retry logic.
        """
        if self._rate_limiter is not None:
            await self._rate_limiter.wait_for_available()

        client = await self._get_client()

        if self.config.log_requests:
            logger.debug(f"[{self.name}] {method} {path} params={params} body={json}")

        try:
            response = await client.request(
                method=method,
                url=path,
                params=params,
                json=json,
            )
        except httpx.TimeoutException as e:
            raise IntegrationError(f"Request timeout: {e}", self.name) from e
        except httpx.TransportError as e:
            raise IntegrationError(f"Network error: {e}", self.name) from e

        if self.config.log_responses:
            logger.debug(
                f"[{self.name}] Response: status={response.status_code} "
                f"body={response.text[:500] if response.text else 'empty'}"
            )

        self._check_response(response)
        return response

    def _check_response(self, response: httpx.Response) -> None:
        """
        Check response for errors and raise appropriate exceptions.

        Raises:
            AuthenticationError: For 401/403
            RateLimitError: For 429
            NotFoundError: For 404
            ValidationError: For 400/422
            IntegrationError: For other errors
        """
        if response.is_success:
            return

        status = response.status_code
        body = response.text
        detail = _error_detail(response)

        if status == 401 or status == 403:
            raise AuthenticationError(
                f"Authentication failed: {detail}",
                self.name,
                status_code=status,
                response_body=body,
            )

        if status == 429:
            retry_after = response.headers.get("Retry-After")
            raise RateLimitError(
                f"Rate limit exceeded: {detail}",
                self.name,
                status_code=status,
                response_body=body,
                retry_after=_parse_retry_after(retry_after),
            )

        if status == 404:
            raise NotFoundError(
                f"Resource not found: {detail}",
                self.name,
                status_code=status,
                response_body=body,
            )

        if status == 400 or status == 422:
            raise ValidationError(
                f"Validation error: {detail}",
                self.name,
                status_code=status,
                response_body=body,
            )

        raise IntegrationError(
            f"Request failed: {detail}",
            self.name,
            status_code=status,
            response_body=body,
        )

    async def __aenter__(self) -> IntegrationClient:
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit."""
        await self.close()


def _error_detail(response: httpx.Response) -> str:
    """Prefer the upstream `message` field, fall back to the raw body."""
    try:
        data = response.json()
    except ValueError:
        data = None
    if isinstance(data, dict) and data.get("message"):
        return str(data["message"])
    return response.text or response.reason_phrase


def _parse_retry_after(value: str | None) -> float | None:
    if not value:
        return None
    try:
        return float(value)
    except ValueError:
        return None


def _retry_after_hint(error: Exception) -> float | None:
    if isinstance(error, RateLimitError):
        return error.retry_after
    return None
