"""
External API adapters for the GraphQL BFF layer.

Provides the request-scoped REST client and the Track API façade built on it.
"""

from catstronauts_back.graphql.adapters.base import (
    AdapterConfig,
    AdapterError,
    AdapterResponse,
    AdapterResult,
    BaseExternalAdapter,
    RemoteCallError,
    UpstreamUnavailableError,
)
from catstronauts_back.graphql.adapters.errors import (
    ErrorCategory,
    ErrorSeverity,
    NormalizedError,
    normalize_error,
)
from catstronauts_back.graphql.adapters.track_api import TrackAPI

__all__ = [
    # Base adapter
    "BaseExternalAdapter",
    "AdapterConfig",
    # Response types
    "AdapterResponse",
    "AdapterResult",
    # Error types
    "AdapterError",
    "RemoteCallError",
    "UpstreamUnavailableError",
    # Error normalization
    "NormalizedError",
    "ErrorCategory",
    "ErrorSeverity",
    "normalize_error",
    # Track API
    "TrackAPI",
]
