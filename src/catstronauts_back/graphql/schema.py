"""
Schema assembly for the Catstronauts graph.

Defines the root Query and Mutation types and a Schema subclass that logs
field errors through the error normalizer before strawberry returns them.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import strawberry

from catstronauts_back.graphql.adapters.base import AdapterError
from catstronauts_back.graphql.adapters.errors import ErrorSeverity, normalize_error
from catstronauts_back.graphql.resolvers import resolve_field
from catstronauts_back.graphql.types import IncrementTrackViewsResponse, Module, Track
from catstronauts_back.runtime.logging import log_with_context

if TYPE_CHECKING:
    from graphql import GraphQLError
    from strawberry.types import ExecutionContext

logger = logging.getLogger(__name__)

_SEVERITY_LEVELS = {
    ErrorSeverity.INFO: logging.INFO,
    ErrorSeverity.WARNING: logging.WARNING,
    ErrorSeverity.ERROR: logging.ERROR,
}


@strawberry.type
class Query:
    @strawberry.field(
        description="Query to get tracks array for the homepage grid, non null list of non null tracks"
    )
    async def tracks_for_home(self, info: strawberry.Info) -> list[Track]:
        payloads = await resolve_field("Query", "tracksForHome", self, info)
        return [Track.from_payload(payload) for payload in payloads]

    @strawberry.field(description="Fetch a specific track, provided a track's ID")
    async def track(self, info: strawberry.Info, id: strawberry.ID) -> Track:
        payload = await resolve_field("Query", "track", self, info, id=id)
        return Track.from_payload(payload)

    @strawberry.field(description="Fetch a specific module, provided a module's ID")
    async def module(self, info: strawberry.Info, id: strawberry.ID) -> Module:
        payload = await resolve_field("Query", "module", self, info, id=id)
        return Module.from_payload(payload)


@strawberry.type
class Mutation:
    @strawberry.mutation(description="Increment the number of views of a track")
    async def increment_track_views(
        self, info: strawberry.Info, id: strawberry.ID
    ) -> IncrementTrackViewsResponse:
        outcome = await resolve_field("Mutation", "incrementTrackViews", self, info, id=id)
        return IncrementTrackViewsResponse.from_outcome(outcome)


class TrackSchema(strawberry.Schema):
    """Strawberry schema that logs each field error with its classification.

    Adapter errors that carry no extensions of their own (upstream outages)
    get the normalized code, category and request id instead.
    """

    def process_errors(
        self,
        errors: list[GraphQLError],
        execution_context: ExecutionContext | None = None,
    ) -> None:
        context = execution_context.context if execution_context else None
        request_id = getattr(context, "request_id", None)

        for error in errors:
            if error.original_error is None:
                # Syntax and validation errors: the client's problem.
                logger.info(f"Rejected operation: {error.message}")
                continue

            normalized = normalize_error(error.original_error, request_id=request_id)
            if isinstance(error.original_error, AdapterError) and not error.extensions:
                error.extensions = normalized.to_graphql_extensions()

            log_with_context(
                logger,
                _SEVERITY_LEVELS[normalized.severity],
                f"Field {'.'.join(str(p) for p in error.path or [])} failed: "
                f"{normalized.developer_message}",
                normalized.to_log_dict(),
            )


def create_schema() -> TrackSchema:
    """Create the Strawberry schema for the Catstronauts graph."""
    return TrackSchema(query=Query, mutation=Mutation)


def print_schema() -> str:
    """Return the GraphQL SDL for the Catstronauts graph."""
    return create_schema().as_str()


__all__ = ["Mutation", "Query", "TrackSchema", "create_schema", "print_schema"]
