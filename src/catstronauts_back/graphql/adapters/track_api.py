"""
Track REST API adapter.

Thin façade over the upstream Catstronauts REST service. Each method maps
one domain operation onto a single REST call and returns the decoded
payload untouched; shape checking is left to the GraphQL types.
"""

from __future__ import annotations

from typing import Any

from catstronauts_back.graphql.adapters.base import AdapterConfig, BaseExternalAdapter


class TrackAPI(BaseExternalAdapter[AdapterConfig]):
    """Data access for tracks, modules and authors."""

    @property
    def service_name(self) -> str:
        return "track_api"

    async def get_tracks_for_home(self) -> list[dict[str, Any]]:
        """Tracks for the homepage grid."""
        return (await self._get("tracks")).unwrap()

    async def get_track(self, track_id: str) -> dict[str, Any]:
        return (await self._get(f"track/{track_id}")).unwrap()

    async def get_track_modules(self, track_id: str) -> list[dict[str, Any]]:
        return (await self._get(f"track/{track_id}/modules")).unwrap()

    async def get_author(self, author_id: str) -> dict[str, Any]:
        return (await self._get(f"author/{author_id}")).unwrap()

    async def get_module(self, module_id: str) -> dict[str, Any]:
        return (await self._get(f"module/{module_id}")).unwrap()

    async def increment_track_views(self, track_id: str) -> dict[str, Any]:
        """Increment a track's view count upstream; returns the updated track."""
        return (await self._patch(f"track/{track_id}/numberOfViews")).unwrap()


__all__ = ["TrackAPI"]
