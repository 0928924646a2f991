"""Canonical track and playlist models.

Every provider payload converges on these shapes, so downstream code never
needs to know whether a track came from the Web API or the embed scraper.
"""

from __future__ import annotations

import weakref
from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass, field
from typing import Any

from trackbridge.models.enums import PlaylistType, QueryType
from trackbridge.models.lazy import Deferred

SOURCE_NAME = "spotify"


@dataclass
class TrackMetadata:
    """Metadata envelope attached to a track.

    Attributes:
        source: The provider payload the track was built from.
        bridge: Resolved stream metadata, None until resolved.
    """

    source: Any
    bridge: Any = None


@dataclass(eq=False)
class Track:
    """A playable track in canonical form.

    Immutable by convention except for ``metadata.bridge`` and
    ``raw["url"]``, which bridging may fill in.
    """

    title: str
    description: str
    author: str
    url: str
    thumbnail: str
    duration: str
    duration_ms: int
    metadata: TrackMetadata
    query_type: QueryType = QueryType.SPOTIFY_SONG
    views: int = 0
    requested_by: Any = None
    source: str = SOURCE_NAME
    raw: dict[str, Any] = field(default_factory=dict, repr=False)
    _playlist_ref: weakref.ReferenceType[Playlist] | None = field(
        default=None, init=False, repr=False
    )
    _metadata_cell: Deferred[TrackMetadata] | None = field(
        default=None, init=False, repr=False
    )

    def __post_init__(self) -> None:
        if not self.raw:
            self.raw = {
                "title": self.title,
                "author": self.author,
                "url": self.url,
                "duration_ms": self.duration_ms,
            }

    @property
    def playlist(self) -> Playlist | None:
        """Owning playlist, if still attached and alive."""
        return self._playlist_ref() if self._playlist_ref else None

    @playlist.setter
    def playlist(self, playlist: Playlist | None) -> None:
        self._playlist_ref = weakref.ref(playlist) if playlist else None

    def set_bridge(self, bridge: Any) -> None:
        """Store resolved stream metadata."""
        self.metadata.bridge = bridge

    def bind_metadata_resolver(
        self, resolver: Callable[[Track], Awaitable[Any]]
    ) -> None:
        """Attach a deferred resolver for the bridge metadata.

        The resolver is not called here. It runs on the first
        ``request_metadata()`` call.
        """

        async def resolve() -> TrackMetadata:
            self.set_bridge(await resolver(self))
            return self.metadata

        self._metadata_cell = Deferred(resolve)

    @property
    def has_metadata_resolver(self) -> bool:
        """Whether a deferred resolver is attached."""
        return self._metadata_cell is not None

    async def request_metadata(self, refresh: bool = False) -> TrackMetadata:
        """Resolve bridge metadata on demand.

        Args:
            refresh: Drop any previously resolved value and resolve again.

        Returns:
            The metadata envelope. ``source`` is never replaced.
        """
        if self._metadata_cell is None:
            return self.metadata
        return await self._metadata_cell.force(refresh=refresh)

    def to_dict(self, include_metadata: bool = True) -> dict[str, Any]:
        """Serialize the canonical fields."""
        data: dict[str, Any] = {
            "title": self.title,
            "description": self.description,
            "author": self.author,
            "url": self.url,
            "thumbnail": self.thumbnail,
            "duration": self.duration,
            "duration_ms": self.duration_ms,
            "views": self.views,
            "requested_by": self.requested_by,
            "source": self.source,
            "query_type": self.query_type.value,
        }
        if include_metadata:
            data["metadata"] = {
                "source": _dump(self.metadata.source),
                "bridge": _dump(self.metadata.bridge),
            }
        return data


@dataclass(eq=False)
class PlaylistAuthor:
    """Playlist owner or album artist."""

    name: str
    url: str | None = None


@dataclass(eq=False)
class Playlist:
    """A resolved playlist or album with its tracks in provider order."""

    title: str
    description: str
    thumbnail: str
    type: PlaylistType
    author: PlaylistAuthor
    url: str
    id: str | None = None
    source: str = SOURCE_NAME
    raw: Any = field(default=None, repr=False)
    tracks: list[Track] = field(default_factory=list, repr=False)

    def attach(self, tracks: Iterable[Track]) -> list[Track]:
        """Store tracks in order and point each one back at this playlist."""
        self.tracks = list(tracks)
        for track in self.tracks:
            track.playlist = self
        return self.tracks

    def to_dict(self) -> dict[str, Any]:
        """Serialize the playlist and its tracks."""
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "thumbnail": self.thumbnail,
            "type": self.type.value,
            "source": self.source,
            "author": {"name": self.author.name, "url": self.author.url},
            "url": self.url,
            "tracks": [t.to_dict(include_metadata=False) for t in self.tracks],
        }


@dataclass
class ExtractorResult:
    """Outcome of resolving a query.

    An empty result (no playlist, no tracks) is the normal answer when
    nothing was found.
    """

    playlist: Playlist | None = None
    tracks: list[Track] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        """Whether nothing was resolved."""
        return not self.tracks and self.playlist is None


def _dump(value: Any) -> Any:
    """Serialize pydantic models, leave other values untouched."""
    if hasattr(value, "model_dump"):
        return value.model_dump(mode="json")
    return value
