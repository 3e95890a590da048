"""
GraphQL request context.

The context is attached to every GraphQL request and provides:
- The request's TrackAPI (and with it the request-scoped memo table)
- Request metadata for tracing
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from strawberry.fastapi import BaseContext

if TYPE_CHECKING:
    from starlette.requests import Request

    from catstronauts_back.graphql.adapters.track_api import TrackAPI


@dataclass
class GraphQLContext(BaseContext):
    """
    GraphQL request context.

    Every resolver receives this context through ``info.context``. A new
    instance, with a new TrackAPI, is built for each request so nothing
    memoized by one request is visible to the next.

    Attributes:
        track_api: Data access layer for this request
        request_id: Unique request identifier for tracing

    Example:
        async def resolve_track(info: Info, id: strawberry.ID) -> Track:
            ctx: GraphQLContext = info.context
            return Track.from_payload(await ctx.track_api.get_track(id))
    """

    track_api: TrackAPI
    request_id: str = field(default_factory=lambda: str(uuid.uuid4()))

    def __post_init__(self) -> None:
        super().__init__()


def create_context_from_request(request: Request, track_api: TrackAPI) -> GraphQLContext:
    """
    Create GraphQL context from an HTTP request.

    Honours an incoming ``X-Request-ID`` header, otherwise generates one.

    Args:
        request: Starlette/FastAPI request object
        track_api: TrackAPI bound to this request

    Returns:
        GraphQLContext populated from request
    """
    request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
    return GraphQLContext(track_api=track_api, request_id=request_id)
