"""
Error normalization for upstream failures.

Maps adapter errors and unexpected resolver exceptions onto one error
model, used when the schema logs field errors and when building error
extensions.

Example:
    try:
        track = await track_api.get_track(track_id)
    except AdapterError as e:
        normalized = normalize_error(e)
        logger.warning(normalized.developer_message, extra={"context": normalized.to_log_dict()})
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from catstronauts_back.graphql.adapters.base import (
        AdapterError,
        RemoteCallError,
        UpstreamUnavailableError,
    )


class ErrorCategory(Enum):
    """High-level error categories for routing and handling."""

    AUTHENTICATION = "authentication"
    AUTHORIZATION = "authorization"
    NOT_FOUND = "not_found"
    UNAVAILABLE = "unavailable"
    EXTERNAL_SERVICE = "external_service"
    INTERNAL = "internal"


class ErrorSeverity(Enum):
    """Error severity for logging.

    - INFO: Expected errors (not found)
    - WARNING: Upstream client errors and outages
    - ERROR: Upstream server errors and bugs in resolvers
    """

    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


@dataclass
class NormalizedError:
    """Normalized error structure for the GraphQL layer.

    Attributes:
        code: Machine-readable error code (e.g., "TRACK_API_NOT_FOUND")
        category: High-level error category
        severity: Error severity for logging
        user_message: Safe message to show to end users
        developer_message: Detailed message for debugging
        service_name: Name of the external service
        status_code: HTTP status code if applicable
        details: Structured error details
        timestamp: When the error occurred
        request_id: Request ID for tracing
    """

    code: str
    category: ErrorCategory
    severity: ErrorSeverity
    user_message: str
    developer_message: str
    service_name: str
    status_code: int | None = None
    details: dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))
    request_id: str | None = None

    def to_graphql_extensions(self) -> dict[str, Any]:
        """Convert to GraphQL error extensions."""
        extensions: dict[str, Any] = {
            "code": self.code,
            "category": self.category.value,
            "service": self.service_name,
        }

        if self.status_code:
            extensions["statusCode"] = self.status_code

        if self.request_id:
            extensions["requestId"] = self.request_id

        return extensions

    def to_log_dict(self) -> dict[str, Any]:
        """Convert to dict for structured logging."""
        return {
            "error_code": self.code,
            "category": self.category.value,
            "severity": self.severity.value,
            "user_message": self.user_message,
            "developer_message": self.developer_message,
            "service_name": self.service_name,
            "status_code": self.status_code,
            "details": self.details,
            "timestamp": self.timestamp.isoformat(),
            "request_id": self.request_id,
        }


# =============================================================================
# Error Normalization Functions
# =============================================================================


def normalize_error(
    error: BaseException,
    *,
    service_name: str | None = None,
    request_id: str | None = None,
) -> NormalizedError:
    """Normalize any exception to a NormalizedError.

    Args:
        error: The exception to normalize
        service_name: Override service name
        request_id: Request ID for tracing

    Returns:
        NormalizedError with consistent structure
    """
    from catstronauts_back.graphql.adapters.base import (
        AdapterError,
        RemoteCallError,
        UpstreamUnavailableError,
    )

    if isinstance(error, RemoteCallError):
        return _normalize_remote_call_error(error, service_name, request_id)
    elif isinstance(error, UpstreamUnavailableError):
        return _normalize_unavailable_error(error, service_name, request_id)
    elif isinstance(error, AdapterError):
        return _normalize_adapter_error(error, service_name, request_id)
    else:
        return _normalize_unknown_error(error, service_name, request_id)


def _normalize_remote_call_error(
    error: RemoteCallError,
    service_name: str | None,
    request_id: str | None,
) -> NormalizedError:
    """Normalize non-2xx upstream responses."""

    svc = service_name or error.service_name
    status = error.status_code

    if status == 401:
        category = ErrorCategory.AUTHENTICATION
        severity = ErrorSeverity.WARNING
        user_msg = "Authentication required. Please log in and try again."
        code = f"{svc.upper()}_AUTHENTICATION_REQUIRED"
    elif status == 403:
        category = ErrorCategory.AUTHORIZATION
        severity = ErrorSeverity.WARNING
        user_msg = "You don't have permission to access this resource."
        code = f"{svc.upper()}_ACCESS_DENIED"
    elif status == 404:
        category = ErrorCategory.NOT_FOUND
        severity = ErrorSeverity.INFO
        user_msg = "The requested resource was not found."
        code = f"{svc.upper()}_NOT_FOUND"
    elif 400 <= status < 500:
        category = ErrorCategory.EXTERNAL_SERVICE
        severity = ErrorSeverity.WARNING
        user_msg = f"The {svc} service returned an error. Please try again."
        code = f"{svc.upper()}_CLIENT_ERROR"
    else:
        category = ErrorCategory.EXTERNAL_SERVICE
        severity = ErrorSeverity.ERROR
        user_msg = f"The {svc} service is temporarily unavailable. Please try again later."
        code = f"{svc.upper()}_SERVER_ERROR"

    return NormalizedError(
        code=code,
        category=category,
        severity=severity,
        user_message=user_msg,
        developer_message=str(error),
        service_name=svc,
        status_code=status,
        details={"url": error.url, "method": error.method, "body": error.body},
        request_id=request_id,
    )


def _normalize_unavailable_error(
    error: UpstreamUnavailableError,
    service_name: str | None,
    request_id: str | None,
) -> NormalizedError:
    svc = service_name or error.service_name

    return NormalizedError(
        code=f"{svc.upper()}_UNAVAILABLE",
        category=ErrorCategory.UNAVAILABLE,
        severity=ErrorSeverity.WARNING,
        user_message=f"The {svc} service could not be reached. Please try again.",
        developer_message=str(error),
        service_name=svc,
        status_code=503,
        details=error.details,
        request_id=request_id,
    )


def _normalize_adapter_error(
    error: AdapterError,
    service_name: str | None,
    request_id: str | None,
) -> NormalizedError:
    """Normalize generic adapter errors."""

    svc = service_name or error.service_name

    return NormalizedError(
        code=f"{svc.upper()}_ERROR",
        category=ErrorCategory.EXTERNAL_SERVICE,
        severity=ErrorSeverity.ERROR,
        user_message=f"An error occurred with the {svc} service. Please try again.",
        developer_message=str(error),
        service_name=svc,
        status_code=error.status_code,
        details=error.details,
        request_id=request_id,
    )


def _normalize_unknown_error(
    error: BaseException,
    service_name: str | None,
    request_id: str | None,
) -> NormalizedError:
    """Normalize exceptions raised by resolvers themselves."""
    svc = service_name or "unknown"

    return NormalizedError(
        code=f"{svc.upper()}_INTERNAL_ERROR",
        category=ErrorCategory.INTERNAL,
        severity=ErrorSeverity.ERROR,
        user_message="An unexpected error occurred. Please try again.",
        developer_message=f"{type(error).__name__}: {error}",
        service_name=svc,
        status_code=500,
        details={"exception_type": type(error).__name__},
        request_id=request_id,
    )


__all__ = [
    "ErrorCategory",
    "ErrorSeverity",
    "NormalizedError",
    "normalize_error",
]
