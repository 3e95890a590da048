"""
Resolver table for the Catstronauts graph.

One resolver per schema field that cannot be read straight off the parent
object. Every resolver has the same shape, ``(parent, args, context)``, and
returns raw upstream payloads; the GraphQL types in
``catstronauts_back.graphql.types`` turn those into typed objects.

I/O-bound resolvers are coroutines and go through the request's TrackAPI,
so sibling resolutions that hit the same URL collapse into one call.
Derived-field resolvers are plain functions with no I/O.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from catstronauts_back.graphql.adapters.base import AdapterError, RemoteCallError

if TYPE_CHECKING:
    import strawberry

    from catstronauts_back.graphql.context import GraphQLContext

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MutationOutcome:
    """Uniform result envelope for a mutating operation.

    Attributes:
        code: HTTP-status-like code
        success: Whether the mutation went through
        message: Human-readable message for the UI
        track: Updated track payload, only on success
    """

    code: int
    success: bool
    message: str
    track: dict[str, Any] | None = None


# =============================================================================
# Query
# =============================================================================


async def tracks_for_home(
    parent: Any, args: dict[str, Any], context: GraphQLContext
) -> list[dict[str, Any]]:
    return await context.track_api.get_tracks_for_home()


async def track(parent: Any, args: dict[str, Any], context: GraphQLContext) -> dict[str, Any]:
    return await context.track_api.get_track(args["id"])


async def module(parent: Any, args: dict[str, Any], context: GraphQLContext) -> dict[str, Any]:
    return await context.track_api.get_module(args["id"])


# =============================================================================
# Mutation
# =============================================================================


async def increment_track_views(
    parent: Any, args: dict[str, Any], context: GraphQLContext
) -> MutationOutcome:
    """Increment a track's view count and report the outcome.

    Upstream failures never escape as GraphQL errors: they become a failed
    envelope. The call is made exactly once; view increments are not
    idempotent, so nothing here retries.
    """
    track_id = args["id"]
    try:
        updated = await context.track_api.increment_track_views(track_id)
    except RemoteCallError as e:
        logger.info(f"incrementTrackViews({track_id}) rejected upstream: {e}")
        return MutationOutcome(code=e.status_code, success=False, message=e.body)
    except AdapterError as e:
        logger.warning(f"incrementTrackViews({track_id}) failed: {e}")
        return MutationOutcome(code=503, success=False, message=str(e))

    return MutationOutcome(
        code=200,
        success=True,
        message=f"Successfully incremented number of views for track {track_id}",
        track=updated,
    )


# =============================================================================
# Track / Module
# =============================================================================


async def track_author(parent: Any, args: dict[str, Any], context: GraphQLContext) -> dict[str, Any]:
    # Called once per Track; identical author ids share one request.
    return await context.track_api.get_author(parent.author_id)


async def track_modules(
    parent: Any, args: dict[str, Any], context: GraphQLContext
) -> list[dict[str, Any]]:
    return await context.track_api.get_track_modules(parent.id)


def duration_in_seconds(parent: Any, args: dict[str, Any], context: GraphQLContext) -> int | None:
    return parent.length


RESOLVERS: dict[str, dict[str, Callable[..., Any]]] = {
    "Query": {
        "tracksForHome": tracks_for_home,
        "track": track,
        "module": module,
    },
    "Mutation": {
        "incrementTrackViews": increment_track_views,
    },
    "Track": {
        "author": track_author,
        "modules": track_modules,
        "durationInSeconds": duration_in_seconds,
    },
    "Module": {
        "durationInSeconds": duration_in_seconds,
    },
}


def resolve_field(
    type_name: str,
    field_name: str,
    parent: Any,
    info: strawberry.Info,
    **args: Any,
) -> Any:
    """Dispatch to the registered resolver for ``type_name.field_name``.

    Returns whatever the resolver returns: a coroutine for I/O-bound
    resolvers, a plain value for derived fields.

    Raises:
        KeyError: If no resolver is registered for the field
    """
    resolver = RESOLVERS[type_name][field_name]
    return resolver(parent, args, info.context)


__all__ = [
    "RESOLVERS",
    "MutationOutcome",
    "resolve_field",
]
