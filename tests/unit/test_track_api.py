"""Tests for the TrackAPI adapter and its request-scoped memoization."""

from __future__ import annotations

import asyncio

import httpx
import pytest

from catstronauts_back.graphql.adapters.base import (
    AdapterConfig,
    RemoteCallError,
    UpstreamUnavailableError,
)
from catstronauts_back.graphql.adapters.track_api import TrackAPI

BASE_URL = "https://tracks.example.test/"

# =============================================================================
# URL resolution
# =============================================================================


class TestResolveUrl:
    """Tests for joining paths onto the base URL."""

    @pytest.mark.parametrize(
        "base_url",
        ["https://tracks.example.test", "https://tracks.example.test/"],
    )
    def test_single_slash(self, base_url: str) -> None:
        api = TrackAPI(AdapterConfig(base_url=base_url))
        assert api.resolve_url("track/c_0") == "https://tracks.example.test/track/c_0"
        assert api.resolve_url("/track/c_0") == "https://tracks.example.test/track/c_0"


# =============================================================================
# Domain operations
# =============================================================================


class TestTrackAPIOperations:
    """Each domain method maps onto one REST endpoint."""

    @pytest.mark.asyncio
    async def test_get_tracks_for_home(self, track_api: TrackAPI, upstream) -> None:
        tracks = await track_api.get_tracks_for_home()

        assert [t["id"] for t in tracks] == ["c_0", "c_1", "c_2"]
        assert upstream.requests == [("GET", "tracks")]

    @pytest.mark.asyncio
    async def test_get_track(self, track_api: TrackAPI, upstream) -> None:
        track = await track_api.get_track("c_0")

        assert track["title"] == "Cat-stronomy, an introduction"
        assert upstream.requests == [("GET", "track/c_0")]

    @pytest.mark.asyncio
    async def test_get_track_modules(self, track_api: TrackAPI, upstream) -> None:
        modules = await track_api.get_track_modules("c_0")

        assert [m["id"] for m in modules] == ["l_0", "l_1"]
        assert upstream.requests == [("GET", "track/c_0/modules")]

    @pytest.mark.asyncio
    async def test_get_track_modules_empty(self, track_api: TrackAPI) -> None:
        assert await track_api.get_track_modules("c_2") == []

    @pytest.mark.asyncio
    async def test_get_author(self, track_api: TrackAPI, upstream) -> None:
        author = await track_api.get_author("cat-1")

        assert author["name"] == "Henri, le Chat Noir"
        assert upstream.requests == [("GET", "author/cat-1")]

    @pytest.mark.asyncio
    async def test_get_module(self, track_api: TrackAPI, upstream) -> None:
        module = await track_api.get_module("l_1")

        assert module["title"] == "Orbital Mechanics"
        assert upstream.requests == [("GET", "module/l_1")]

    @pytest.mark.asyncio
    async def test_increment_track_views(self, track_api: TrackAPI, upstream) -> None:
        track = await track_api.increment_track_views("c_1")

        assert track["numberOfViews"] == 13
        assert upstream.requests == [("PATCH", "track/c_1/numberOfViews")]

    @pytest.mark.asyncio
    async def test_missing_track_raises(self, track_api: TrackAPI) -> None:
        with pytest.raises(RemoteCallError) as exc_info:
            await track_api.get_track("999")

        error = exc_info.value
        assert error.status_code == 404
        assert error.body == "Could not find track/999"
        assert error.url == f"{track_api.config.base_url}track/999"
        assert error.method == "GET"
        assert error.service_name == "track_api"
        assert error.extensions["response"]["status"] == 404


# =============================================================================
# Memoization and in-flight deduplication
# =============================================================================


class TestMemoization:
    """GETs are shared within one TrackAPI instance."""

    @pytest.mark.asyncio
    async def test_concurrent_identical_gets_share_one_request(
        self, track_api: TrackAPI, upstream
    ) -> None:
        upstream.delay = 0.01

        results = await asyncio.gather(*(track_api.get_author("cat-1") for _ in range(5)))

        assert upstream.count("GET", "author/cat-1") == 1
        assert track_api.request_count == 1
        assert all(result is results[0] for result in results)

    @pytest.mark.asyncio
    async def test_sequential_gets_hit_cache(self, track_api: TrackAPI, upstream) -> None:
        first = await track_api.get_track("c_0")
        second = await track_api.get_track("c_0")

        assert first is second
        assert upstream.count("GET", "track/c_0") == 1

    @pytest.mark.asyncio
    async def test_distinct_urls_are_not_shared(self, track_api: TrackAPI, upstream) -> None:
        await asyncio.gather(track_api.get_author("cat-1"), track_api.get_author("cat-2"))

        assert upstream.count("GET", "author/cat-1") == 1
        assert upstream.count("GET", "author/cat-2") == 1
        assert track_api.request_count == 2

    @pytest.mark.asyncio
    async def test_failed_get_is_memoized(self, track_api: TrackAPI, upstream) -> None:
        """A failed GET is not retried within the same request."""
        upstream.fail("GET", "author/cat-1", 500, "kaboom")

        with pytest.raises(RemoteCallError):
            await track_api.get_author("cat-1")
        with pytest.raises(RemoteCallError) as exc_info:
            await track_api.get_author("cat-1")

        assert exc_info.value.body == "kaboom"
        assert upstream.count("GET", "author/cat-1") == 1

    @pytest.mark.asyncio
    async def test_concurrent_waiters_all_see_failure(
        self, track_api: TrackAPI, upstream
    ) -> None:
        upstream.delay = 0.01
        upstream.fail("GET", "track/c_0", 404, "nope")

        results = await asyncio.gather(
            track_api.get_track("c_0"),
            track_api.get_track("c_0"),
            return_exceptions=True,
        )

        assert all(isinstance(r, RemoteCallError) for r in results)
        assert upstream.count("GET", "track/c_0") == 1

    @pytest.mark.asyncio
    async def test_separate_instances_do_not_share_cache(
        self, http_client: httpx.AsyncClient, upstream
    ) -> None:
        """Each request builds its own TrackAPI; nothing leaks between them."""
        config = AdapterConfig(base_url=BASE_URL)
        first = TrackAPI(config, client=http_client)
        second = TrackAPI(config, client=http_client)

        await first.get_track("c_0")
        await second.get_track("c_0")

        assert upstream.count("GET", "track/c_0") == 2


# =============================================================================
# Mutations
# =============================================================================


class TestPatchSemantics:
    """PATCH calls are never cached and invalidate related GETs."""

    @pytest.mark.asyncio
    async def test_patch_is_not_cached(self, track_api: TrackAPI, upstream) -> None:
        first = await track_api.increment_track_views("c_0")
        second = await track_api.increment_track_views("c_0")

        assert first["numberOfViews"] == 1
        assert second["numberOfViews"] == 2
        assert upstream.count("PATCH", "track/c_0/numberOfViews") == 2

    @pytest.mark.asyncio
    async def test_patch_invalidates_track_get(self, track_api: TrackAPI, upstream) -> None:
        before = await track_api.get_track("c_0")
        await track_api.increment_track_views("c_0")
        after = await track_api.get_track("c_0")

        assert before["numberOfViews"] == 0
        assert after["numberOfViews"] == 1
        assert upstream.count("GET", "track/c_0") == 2

    @pytest.mark.asyncio
    async def test_patch_keeps_unrelated_gets(self, track_api: TrackAPI, upstream) -> None:
        await track_api.get_track("c_1")
        await track_api.get_author("cat-1")
        await track_api.increment_track_views("c_0")
        await track_api.get_track("c_1")
        await track_api.get_author("cat-1")

        assert upstream.count("GET", "track/c_1") == 1
        assert upstream.count("GET", "author/cat-1") == 1

    @pytest.mark.asyncio
    async def test_concurrent_identical_patches_share_one_request(
        self, track_api: TrackAPI, upstream
    ) -> None:
        upstream.delay = 0.01

        first, second = await asyncio.gather(
            track_api.increment_track_views("c_0"),
            track_api.increment_track_views("c_0"),
        )

        assert first is second
        assert upstream.count("PATCH", "track/c_0/numberOfViews") == 1

    @pytest.mark.asyncio
    async def test_get_during_patch_is_dropped_when_patch_completes(
        self, track_api: TrackAPI, upstream
    ) -> None:
        """A GET memoized while the PATCH was in flight is refetched afterwards."""
        upstream.delay = 0.01

        patch = asyncio.ensure_future(track_api.increment_track_views("c_0"))
        await asyncio.sleep(0)
        await track_api.get_track("c_0")
        await patch

        after = await track_api.get_track("c_0")

        assert after["numberOfViews"] == 1
        assert upstream.count("GET", "track/c_0") == 2

    @pytest.mark.asyncio
    async def test_failed_patch_raises(self, track_api: TrackAPI, upstream) -> None:
        with pytest.raises(RemoteCallError) as exc_info:
            await track_api.increment_track_views("999")

        assert exc_info.value.status_code == 404
        assert exc_info.value.method == "PATCH"
        assert upstream.count("PATCH", "track/999/numberOfViews") == 1


# =============================================================================
# Transport failures and bodies
# =============================================================================


class TestTransport:
    """Network-level behaviour."""

    @pytest.mark.asyncio
    async def test_unreachable_upstream(self, track_api: TrackAPI, upstream) -> None:
        upstream.unreachable = True

        with pytest.raises(UpstreamUnavailableError) as exc_info:
            await track_api.get_tracks_for_home()

        assert exc_info.value.service_name == "track_api"
        assert track_api.request_count == 1

    @pytest.mark.asyncio
    async def test_timeout_maps_to_unavailable(self) -> None:
        async def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            api = TrackAPI(AdapterConfig(base_url=BASE_URL, timeout=0.5), client=client)
            with pytest.raises(UpstreamUnavailableError, match="timed out after 0.5s"):
                await api.get_track("c_0")

    @pytest.mark.asyncio
    async def test_non_json_success_body_is_returned_as_text(self) -> None:
        async def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text="plain text")

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            api = TrackAPI(AdapterConfig(base_url=BASE_URL), client=client)
            assert await api.get_track("c_0") == "plain text"

    @pytest.mark.asyncio
    async def test_configured_headers_are_sent(self) -> None:
        seen: list[str | None] = []

        async def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request.headers.get("X-Client"))
            return httpx.Response(200, json=[])

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            config = AdapterConfig(base_url=BASE_URL, headers={"X-Client": "catstronauts"})
            await TrackAPI(config, client=client).get_tracks_for_home()

        assert seen == ["catstronauts"]
