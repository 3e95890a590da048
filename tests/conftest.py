"""Shared pytest fixtures for Catstronauts BFF tests."""

from __future__ import annotations

import asyncio
import copy
from collections import Counter
from typing import Any

import httpx
import pytest
import pytest_asyncio

from catstronauts_back.graphql.adapters.base import AdapterConfig
from catstronauts_back.graphql.adapters.track_api import TrackAPI
from catstronauts_back.graphql.context import GraphQLContext
from catstronauts_back.graphql.schema import TrackSchema, create_schema

BASE_URL = "https://tracks.example.test/"

TRACKS: list[dict[str, Any]] = [
    {
        "id": "c_0",
        "title": "Cat-stronomy, an introduction",
        "authorId": "cat-1",
        "thumbnail": "https://res.cloudinary.com/dety84pbu/image/upload/v1598465568/nebula_cat_djkt9r.jpg",
        "length": 2377,
        "modulesCount": 2,
        "description": "Curious to learn what Cat-stronomy is all about?",
        "numberOfViews": 0,
    },
    {
        "id": "c_1",
        "title": "Kitty space suit 101",
        "authorId": "cat-1",
        "thumbnail": None,
        "length": 1916,
        "modulesCount": 1,
        "description": "Everything about **space suits** for cats.",
        "numberOfViews": 12,
    },
    {
        "id": "c_2",
        "title": "Meow-gravity",
        "authorId": "cat-2",
        "thumbnail": None,
        "length": 540,
        "modulesCount": 0,
        "description": "How cats land on their feet in orbit.",
        "numberOfViews": 3,
    },
]

AUTHORS: dict[str, dict[str, Any]] = {
    "cat-1": {"id": "cat-1", "name": "Henri, le Chat Noir", "photo": "https://images.example.test/henri.jpg"},
    "cat-2": {"id": "cat-2", "name": "Grumpy Cat", "photo": None},
}

MODULES: dict[str, list[dict[str, Any]]] = {
    "c_0": [
        {
            "id": "l_0",
            "title": "Exploring Outer Space",
            "length": 5,
            "content": None,
            "videoUrl": "https://youtu.be/dQw4w9WgXcQ",
        },
        {
            "id": "l_1",
            "title": "Orbital Mechanics",
            "length": 12,
            "content": "# Orbits\n\nWhat goes up...",
            "videoUrl": None,
        },
    ],
    "c_1": [
        {"id": "l_2", "title": "Helmets", "length": 7, "content": "Fur fits.", "videoUrl": None},
    ],
    "c_2": [],
}


class FakeTrackUpstream:
    """In-memory stand-in for the Track REST API.

    Records every request it receives as ``(method, path)``. Individual
    paths can be forced to fail with ``fail(method, path, status, body)``.
    """

    def __init__(self) -> None:
        self.tracks = {track["id"]: copy.deepcopy(track) for track in TRACKS}
        self.authors = copy.deepcopy(AUTHORS)
        self.modules = copy.deepcopy(MODULES)
        self.requests: list[tuple[str, str]] = []
        self.failures: dict[tuple[str, str], tuple[int, str]] = {}
        self.unreachable = False
        self.delay = 0.0

    def fail(self, method: str, path: str, status: int, body: str) -> None:
        self.failures[(method, path)] = (status, body)

    def count(self, method: str, path: str) -> int:
        return Counter(self.requests)[(method, path)]

    async def handler(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path.strip("/")
        self.requests.append((request.method, path))

        if self.delay:
            await asyncio.sleep(self.delay)

        if self.unreachable:
            raise httpx.ConnectError("Connection refused", request=request)

        if (request.method, path) in self.failures:
            status, body = self.failures[(request.method, path)]
            return httpx.Response(status, text=body)

        parts = path.split("/")
        if request.method == "GET":
            if parts == ["tracks"]:
                return httpx.Response(200, json=list(self.tracks.values()))
            if len(parts) == 2 and parts[0] == "track" and parts[1] in self.tracks:
                return httpx.Response(200, json=self.tracks[parts[1]])
            if len(parts) == 3 and parts[0] == "track" and parts[2] == "modules":
                if parts[1] in self.modules:
                    return httpx.Response(200, json=self.modules[parts[1]])
            if len(parts) == 2 and parts[0] == "author" and parts[1] in self.authors:
                return httpx.Response(200, json=self.authors[parts[1]])
            if len(parts) == 2 and parts[0] == "module":
                for modules in self.modules.values():
                    for module in modules:
                        if module["id"] == parts[1]:
                            return httpx.Response(200, json=module)

        if request.method == "PATCH" and len(parts) == 3 and parts[2] == "numberOfViews":
            track = self.tracks.get(parts[1])
            if track is not None:
                track["numberOfViews"] += 1
                return httpx.Response(200, json=track)

        return httpx.Response(404, text=f"Could not find {path}")


@pytest.fixture
def upstream() -> FakeTrackUpstream:
    return FakeTrackUpstream()


@pytest_asyncio.fixture
async def http_client(upstream: FakeTrackUpstream):
    async with httpx.AsyncClient(transport=httpx.MockTransport(upstream.handler)) as client:
        yield client


@pytest.fixture
def track_api(http_client: httpx.AsyncClient) -> TrackAPI:
    return TrackAPI(AdapterConfig(base_url=BASE_URL), client=http_client)


@pytest.fixture
def context(track_api: TrackAPI) -> GraphQLContext:
    return GraphQLContext(track_api=track_api, request_id="req-test")


@pytest.fixture(scope="session")
def schema() -> TrackSchema:
    return create_schema()
