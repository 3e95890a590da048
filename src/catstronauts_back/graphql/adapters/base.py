"""
Base external REST adapter.

Wraps an upstream REST API for use in the GraphQL BFF layer. One adapter
instance lives for exactly one GraphQL request, which makes it the natural
owner of the request-scoped memo table:

- GET results are memoized by URL for the adapter's lifetime
- concurrent identical calls (same method and URL) share one in-flight task
- PATCH calls are never memoized and invalidate GETs of the patched path

Example:
    class TrackAPI(BaseExternalAdapter[AdapterConfig]):
        @property
        def service_name(self) -> str:
            return "track_api"

        async def get_track(self, track_id: str) -> dict[str, Any]:
            return (await self._get(f"track/{track_id}")).unwrap()
"""

from __future__ import annotations

import asyncio
import json as json_module
import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Generic, TypeVar

import httpx

logger = logging.getLogger(__name__)


# =============================================================================
# Configuration
# =============================================================================


@dataclass(frozen=True)
class AdapterConfig:
    """Base configuration for external API adapters.

    Attributes:
        base_url: Base URL for the API
        timeout: Request timeout in seconds
        headers: Default headers to include in all requests
    """

    base_url: str
    timeout: float = 30.0
    headers: dict[str, str] = field(default_factory=dict)


# Type variable for adapter configuration
ConfigT = TypeVar("ConfigT", bound=AdapterConfig)

# Type variable for response data
T = TypeVar("T")


# =============================================================================
# Response Types
# =============================================================================


@dataclass
class AdapterResponse(Generic[T]):
    """Successful response from an external API.

    Attributes:
        data: The parsed response data
        status_code: HTTP status code
        latency_ms: Request latency in milliseconds
    """

    data: T
    status_code: int = 200
    latency_ms: float = 0.0


# =============================================================================
# Error Types
# =============================================================================


class AdapterError(Exception):
    """Base exception for adapter errors.

    All adapter errors inherit from this class so the GraphQL layer can
    handle upstream failures uniformly.
    """

    def __init__(
        self,
        message: str,
        *,
        service_name: str = "unknown",
        status_code: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.service_name = service_name
        self.status_code = status_code
        self.details = details or {}

    def __str__(self) -> str:
        parts = [self.args[0]]
        if self.status_code:
            parts.append(f"(status: {self.status_code})")
        if self.service_name != "unknown":
            parts.append(f"[{self.service_name}]")
        return " ".join(parts)


class RemoteCallError(AdapterError):
    """Non-2xx response from the upstream API.

    Carries the HTTP status and the raw response body. ``extensions`` is
    picked up by graphql-core when the error surfaces from a resolver, so
    clients see ``extensions.response.{status, body}``.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int,
        body: str,
        url: str = "",
        method: str = "GET",
        status_text: str = "",
        service_name: str = "unknown",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message,
            service_name=service_name,
            status_code=status_code,
            details=details,
        )
        self.status_code: int = status_code
        self.body = body
        self.url = url
        self.method = method
        self.status_text = status_text

    def __str__(self) -> str:
        # Surfaces verbatim as the GraphQL error message, e.g. "404: Not Found".
        return str(self.args[0])

    @property
    def code(self) -> str:
        """Error code in the style clients of REST data sources expect."""
        if self.status_code == 401:
            return "UNAUTHENTICATED"
        if self.status_code == 403:
            return "FORBIDDEN"
        return "INTERNAL_SERVER_ERROR"

    @property
    def extensions(self) -> dict[str, Any]:
        return {
            "code": self.code,
            "response": {
                "url": self.url,
                "status": self.status_code,
                "statusText": self.status_text,
                "body": self.body,
            },
        }


class UpstreamUnavailableError(AdapterError):
    """The upstream API could not be reached (connection error or timeout)."""

    pass


# =============================================================================
# Result Type
# =============================================================================


class AdapterResultStatus(Enum):
    """Status of an adapter operation."""

    SUCCESS = "success"
    ERROR = "error"


@dataclass
class AdapterResult(Generic[T]):
    """Result of an adapter operation.

    Uses a Result pattern so a single in-flight call can be shared by any
    number of awaiting resolvers without re-raising inside the task.

    Example:
        result = await adapter._get("tracks")
        if result.is_success:
            tracks = result.data
        else:
            logger.error(f"Failed: {result.error}")
    """

    status: AdapterResultStatus
    _data: T | None = None
    _error: AdapterError | None = None

    @property
    def is_success(self) -> bool:
        """Check if the operation succeeded."""
        return self.status == AdapterResultStatus.SUCCESS

    @property
    def is_error(self) -> bool:
        """Check if the operation failed."""
        return self.status == AdapterResultStatus.ERROR

    @property
    def data(self) -> T:
        """Get the result data. Raises if operation failed."""
        if self.is_error:
            raise ValueError("No data available - operation failed")
        return self._data  # type: ignore[return-value]

    @property
    def error(self) -> AdapterError:
        """Get the error. Raises if operation succeeded."""
        if self._error is None:
            raise ValueError("No error - operation succeeded")
        return self._error

    @classmethod
    def success(cls, data: T) -> AdapterResult[T]:
        """Create a successful result."""
        return cls(status=AdapterResultStatus.SUCCESS, _data=data)

    @classmethod
    def failure(cls, error: AdapterError) -> AdapterResult[T]:
        """Create a failed result."""
        return cls(
            status=AdapterResultStatus.ERROR,
            _error=error,
        )

    def unwrap(self) -> T:
        """Unwrap the result, raising the error if failed."""
        if self.is_error:
            raise self.error
        return self.data


# =============================================================================
# Base Adapter
# =============================================================================


class BaseExternalAdapter(ABC, Generic[ConfigT]):
    """Base class for external REST adapters.

    Subclasses implement ``service_name`` and domain methods built on
    ``_get`` and ``_patch``.

    The base class provides:
    - Request-scoped GET memoization and in-flight deduplication
    - Error mapping (non-2xx to RemoteCallError)
    - Request/response logging

    An instance must not outlive the GraphQL request it was created for;
    its memo table is never cleared otherwise.
    """

    def __init__(self, config: ConfigT, *, client: httpx.AsyncClient | None = None) -> None:
        """Initialize the adapter with configuration.

        Args:
            config: Adapter-specific configuration
            client: Shared httpx client; a short-lived one is opened per
                call when omitted
        """
        self.config = config
        self._client = client
        self._memoized: dict[str, asyncio.Task[AdapterResult[Any]]] = {}
        self._request_count: int = 0

    @property
    @abstractmethod
    def service_name(self) -> str:
        """Name of the external service (for logging and errors)."""
        ...

    @property
    def request_count(self) -> int:
        """Number of network operations actually issued."""
        return self._request_count

    def resolve_url(self, path: str) -> str:
        """Resolve an endpoint path against the configured base URL."""
        return f"{self.config.base_url.rstrip('/')}/{path.lstrip('/')}"

    # -------------------------------------------------------------------------
    # HTTP Methods
    # -------------------------------------------------------------------------

    async def _get(self, path: str) -> AdapterResult[Any]:
        """Make a memoized GET request to the external API."""
        return await self._request("GET", path)

    async def _patch(self, path: str, *, json: Any | None = None) -> AdapterResult[Any]:
        """Make a PATCH request. Invalidates memoized GETs of the same path."""
        return await self._request("PATCH", path, json=json)

    # -------------------------------------------------------------------------
    # Memoization
    # -------------------------------------------------------------------------

    async def _request(
        self,
        method: str,
        path: str,
        *,
        json: Any | None = None,
    ) -> AdapterResult[Any]:
        """Issue a request, joining an identical in-flight one if present.

        Lookup and registration of the in-flight task happen without an
        intervening await, so interleaved resolvers cannot register twice.
        """
        url = self.resolve_url(path)
        key = f"{method} {url}"

        if method != "GET":
            self._invalidate(url)

        task = self._memoized.get(key)
        if task is not None:
            logger.debug(
                f"[{self.service_name}] {method} {path} served from "
                f"{'cache' if task.done() else 'in-flight request'}"
            )
            return await task

        task = asyncio.ensure_future(self._send(method, url, path, json=json))
        self._memoized[key] = task

        if method != "GET":
            task.add_done_callback(lambda _: self._settle(key, url, task))

        return await task

    def _settle(self, key: str, url: str, task: asyncio.Task[AdapterResult[Any]]) -> None:
        """Drop a finished mutation and any GETs memoized while it was in flight."""
        if self._memoized.get(key) is task:
            del self._memoized[key]
        self._invalidate(url)

    def _invalidate(self, url: str) -> None:
        """Drop memoized GETs for ``url`` and every ancestor path of it."""
        for key in list(self._memoized):
            method, _, cached_url = key.partition(" ")
            if method != "GET":
                continue
            if url == cached_url or url.startswith(cached_url.rstrip("/") + "/"):
                logger.debug(f"[{self.service_name}] invalidated {cached_url}")
                del self._memoized[key]

    # -------------------------------------------------------------------------
    # Core Request Logic
    # -------------------------------------------------------------------------

    async def _send(
        self,
        method: str,
        url: str,
        path: str,
        *,
        json: Any | None = None,
    ) -> AdapterResult[Any]:
        """Perform one network round trip and wrap the outcome."""
        self._request_count += 1
        start_time = time.monotonic()

        try:
            response = await self._make_http_request(method, url, json_body=json)
        except AdapterError as e:
            e.service_name = self.service_name
            logger.warning(f"[{self.service_name}] {method} {path} failed: {e}")
            return AdapterResult.failure(e)

        response.latency_ms = (time.monotonic() - start_time) * 1000
        logger.debug(
            f"[{self.service_name}] {method} {path} -> {response.status_code} "
            f"({response.latency_ms:.1f}ms)"
        )
        return AdapterResult.success(response.data)

    async def _make_http_request(
        self,
        method: str,
        url: str,
        *,
        json_body: Any | None = None,
    ) -> AdapterResponse[Any]:
        """Make the HTTP request with httpx.

        Raises:
            RemoteCallError: On non-2xx responses
            UpstreamUnavailableError: On connection errors and timeouts
        """
        headers = dict(self.config.headers)
        try:
            if self._client is not None:
                response = await self._client.request(
                    method, url, json=json_body, headers=headers, timeout=self.config.timeout
                )
            else:
                async with httpx.AsyncClient(timeout=self.config.timeout) as client:
                    response = await client.request(method, url, json=json_body, headers=headers)

        except httpx.TimeoutException as e:
            raise UpstreamUnavailableError(
                f"Request timed out after {self.config.timeout}s",
                service_name=self.service_name,
            ) from e
        except httpx.RequestError as e:
            raise UpstreamUnavailableError(
                f"Request failed: {e}",
                service_name=self.service_name,
            ) from e

        return self._process_response(
            method=method,
            url=url,
            status_code=response.status_code,
            reason=response.reason_phrase,
            body=response.content,
        )

    def _process_response(
        self,
        *,
        method: str,
        url: str,
        status_code: int,
        reason: str,
        body: bytes,
    ) -> AdapterResponse[Any]:
        """Decode the body and map error status codes.

        Raises:
            RemoteCallError: On status codes outside 2xx
        """
        text = body.decode(errors="replace")

        if not 200 <= status_code < 300:
            raise RemoteCallError(
                f"{status_code}: {reason}",
                status_code=status_code,
                body=text,
                url=url,
                method=method,
                status_text=reason,
                service_name=self.service_name,
            )

        try:
            data = json_module.loads(text) if text else None
        except json_module.JSONDecodeError:
            data = text

        return AdapterResponse(
            data=data,
            status_code=status_code,
        )


__all__ = [
    "AdapterConfig",
    "AdapterError",
    "AdapterResponse",
    "AdapterResult",
    "BaseExternalAdapter",
    "RemoteCallError",
    "UpstreamUnavailableError",
]
