"""
FastAPI/Strawberry integration for the GraphQL BFF layer.

Provides utilities for mounting GraphQL on an existing FastAPI app
or creating a standalone GraphQL application.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

import httpx
from fastapi import FastAPI, Request
from strawberry.fastapi import GraphQLRouter

from catstronauts_back.graphql.adapters.base import AdapterConfig
from catstronauts_back.graphql.adapters.track_api import TrackAPI
from catstronauts_back.graphql.context import GraphQLContext, create_context_from_request
from catstronauts_back.graphql.schema import create_schema
from catstronauts_back.runtime.config import BFFConfig, get_config

logger = logging.getLogger(__name__)


def create_graphql_app(
    config: BFFConfig | None = None,
    *,
    path: str = "/graphql",
    transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    """
    Create a standalone FastAPI application with the GraphQL endpoint.

    The app owns one shared httpx client for its lifetime; every GraphQL
    request still gets its own TrackAPI and therefore its own memo table.

    Args:
        config: BFF configuration (loaded from the environment if None)
        path: URL path for GraphQL endpoint (default: /graphql)
        transport: Custom httpx transport for the upstream client

    Returns:
        FastAPI application with GraphQL endpoint

    Example:
        from catstronauts_back.graphql import create_graphql_app

        app = create_graphql_app()
        # Run with: uvicorn --factory catstronauts_back.graphql:create_graphql_app
    """
    config = config or get_config()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        async with httpx.AsyncClient(timeout=config.http_timeout, transport=transport) as client:
            app.state.http_client = client
            logger.info(f"Serving GraphQL at {path} (upstream: {config.track_api_url})")
            yield

    app = FastAPI(
        title="Catstronauts GraphQL API",
        description="GraphQL BFF for the Catstronauts track catalogue",
        lifespan=lifespan,
    )

    mount_graphql(app, config, path=path)

    @app.get("/health")
    async def health() -> dict[str, Any]:
        return {"status": "ok", "upstream": config.track_api_url}

    return app


def mount_graphql(
    app: FastAPI,
    config: BFFConfig,
    path: str = "/graphql",
) -> None:
    """
    Mount the GraphQL endpoint on an existing FastAPI application.

    Uses ``app.state.http_client`` when the app provides one.

    Args:
        app: Existing FastAPI application
        config: BFF configuration
        path: URL path for GraphQL endpoint (default: /graphql)
    """
    schema = create_schema()
    adapter_config = AdapterConfig(base_url=config.track_api_url, timeout=config.http_timeout)

    async def get_context(request: Request) -> GraphQLContext:
        client = getattr(request.app.state, "http_client", None)
        track_api = TrackAPI(adapter_config, client=client)
        return create_context_from_request(request, track_api)

    graphql_router: GraphQLRouter[GraphQLContext, None] = GraphQLRouter(
        schema,
        graphql_ide="graphiql" if config.enable_graphiql else None,
        context_getter=get_context,
    )

    app.include_router(graphql_router, prefix=path)
