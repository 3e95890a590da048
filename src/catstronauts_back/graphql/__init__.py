"""
GraphQL BFF layer for the Catstronauts track catalogue.

Exposes tracks, modules and authors as one graph backed by the upstream
Track REST API.

Key components:
- adapters: Request-scoped REST client and the TrackAPI façade
- resolvers: Resolver table and the mutation outcome mapper
- types: Strawberry object types built from upstream payloads
- schema: Root types and schema assembly
- context: Per-request GraphQL context
- integration: FastAPI/Strawberry integration
"""

from catstronauts_back.graphql.adapters import (
    AdapterConfig,
    AdapterError,
    AdapterResult,
    BaseExternalAdapter,
    ErrorCategory,
    ErrorSeverity,
    NormalizedError,
    RemoteCallError,
    TrackAPI,
    UpstreamUnavailableError,
    normalize_error,
)
from catstronauts_back.graphql.context import GraphQLContext
from catstronauts_back.graphql.integration import create_graphql_app, mount_graphql
from catstronauts_back.graphql.resolvers import RESOLVERS, MutationOutcome
from catstronauts_back.graphql.schema import create_schema, print_schema

__all__ = [
    # Core components
    "GraphQLContext",
    "RESOLVERS",
    "MutationOutcome",
    "create_schema",
    "print_schema",
    "create_graphql_app",
    "mount_graphql",
    # Adapter interface
    "BaseExternalAdapter",
    "AdapterConfig",
    "AdapterResult",
    "AdapterError",
    "RemoteCallError",
    "UpstreamUnavailableError",
    "TrackAPI",
    # Error normalization
    "NormalizedError",
    "ErrorCategory",
    "ErrorSeverity",
    "normalize_error",
]
