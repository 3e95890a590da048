"""
Strawberry object types for the Catstronauts graph.

Scalar fields are copied from the upstream payload by ``from_payload`` and
read back by strawberry's default resolver. Fields the payload does not
carry (``Track.author``, ``Track.modules``) and derived fields
(``durationInSeconds``) dispatch through the resolver table.

Payloads are not validated: a missing key becomes ``None`` and only fails
if the schema declares the field non-null, in which case the error is
confined to that field.
"""

from __future__ import annotations

from typing import Any

import strawberry

from catstronauts_back.graphql.resolvers import MutationOutcome, resolve_field


@strawberry.type(description="Author of a complete Track")
class Author:
    id: strawberry.ID
    name: str = strawberry.field(description="Author's first and last name")
    photo: str | None = strawberry.field(default=None, description="Author's profile picture url")

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> Author:
        return cls(
            id=payload.get("id"),
            name=payload.get("name"),
            photo=payload.get("photo"),
        )


@strawberry.type(description="A Module is a single unit of teaching. Multiple Modules compose a Track")
class Module:
    id: strawberry.ID
    title: str = strawberry.field(description="The Module's title")
    length: int | None = strawberry.field(
        default=None, description="The Module's length in minutes"
    )
    content: str | None = strawberry.field(
        default=None,
        description=(
            "The module's text-based description, can be in markdown format. "
            "In case of a video, it will be the enriched transcript"
        ),
    )
    video_url: str | None = strawberry.field(
        default=None, description="The module's video url, for video-based modules"
    )

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> Module:
        return cls(
            id=payload.get("id"),
            title=payload.get("title"),
            length=payload.get("length"),
            content=payload.get("content"),
            video_url=payload.get("videoUrl"),
        )

    @strawberry.field(description="The module's length, as reported upstream")
    def duration_in_seconds(self, info: strawberry.Info) -> int | None:
        return resolve_field("Module", "durationInSeconds", self, info)


@strawberry.type(description="A track is a group of Modules that teaches about a specific topic")
class Track:
    id: strawberry.ID
    title: str = strawberry.field(description="The track's title")
    author_id: strawberry.Private[str | None] = None
    thumbnail: str | None = strawberry.field(
        default=None,
        description="The track's main illustration to display in track card or track page detail",
    )
    length: int | None = strawberry.field(
        default=None, description="The track's approximate length to complete, in minutes"
    )
    modules_count: int | None = strawberry.field(
        default=None, description="The number of modules this track contains"
    )
    description: str | None = strawberry.field(
        default=None, description="The track's complete description, can be in Markdown format"
    )
    number_of_views: int | None = strawberry.field(
        default=None, description="The number of times a track has been viewed"
    )

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> Track:
        return cls(
            id=payload.get("id"),
            title=payload.get("title"),
            author_id=payload.get("authorId"),
            thumbnail=payload.get("thumbnail"),
            length=payload.get("length"),
            modules_count=payload.get("modulesCount"),
            description=payload.get("description"),
            number_of_views=payload.get("numberOfViews"),
        )

    @strawberry.field(description="The track's main author")
    async def author(self, info: strawberry.Info) -> Author:
        payload = await resolve_field("Track", "author", self, info)
        return Author.from_payload(payload)

    @strawberry.field(description="The track's complete array of Modules")
    async def modules(self, info: strawberry.Info) -> list[Module]:
        payloads = await resolve_field("Track", "modules", self, info)
        return [Module.from_payload(payload) for payload in payloads]

    @strawberry.field(description="The track's length, as reported upstream")
    def duration_in_seconds(self, info: strawberry.Info) -> int | None:
        return resolve_field("Track", "durationInSeconds", self, info)


@strawberry.type
class IncrementTrackViewsResponse:
    code: int = strawberry.field(
        description="Similar to HTTP status code, represents the status of the mutation"
    )
    success: bool = strawberry.field(description="Indicates whether the mutation was successful")
    message: str = strawberry.field(description="Human-readable message for the UI")
    track: Track | None = strawberry.field(
        default=None, description="Newly updated track after a successful mutation"
    )

    @classmethod
    def from_outcome(cls, outcome: MutationOutcome) -> IncrementTrackViewsResponse:
        return cls(
            code=outcome.code,
            success=outcome.success,
            message=outcome.message,
            track=Track.from_payload(outcome.track) if outcome.track is not None else None,
        )


__all__ = [
    "Author",
    "IncrementTrackViewsResponse",
    "Module",
    "Track",
]
