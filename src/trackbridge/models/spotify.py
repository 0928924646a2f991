"""Models for parsing Spotify responses.

Two independent shapes live here:

- Web API models (``Api*``) parse responses from api.spotify.com and are
  condensed by the API client into summaries (``SongSummary``,
  ``PlaylistSummary``, ``AlbumSummary``).
- Embed models (``Embed*``) parse the entity that the scraper reads from
  open.spotify.com embed pages. They use different field names
  (``title``/``subtitle``, ``coverArt``) and a flat ``trackList``.

These are internal models. They may change if Spotify changes its payloads.
"""

from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

__all__ = [
    "AlbumSummary",
    "ApiAlbumRef",
    "ApiArtist",
    "ApiImage",
    "ApiPage",
    "ApiSearchResponse",
    "ApiTrack",
    "CollectionSummary",
    "EmbedAlbum",
    "EmbedArtist",
    "EmbedCoverArt",
    "EmbedEntity",
    "EmbedImage",
    "EmbedPlaylist",
    "EmbedSong",
    "EmbedTrackListItem",
    "PlaylistSummary",
    "SongSummary",
    "parse_embed_entity",
]


class SpotifyModel(BaseModel):
    """Base model for Spotify responses."""

    model_config = ConfigDict(extra="ignore", frozen=True)


# ============================================================================
# WEB API - Raw response models
# ============================================================================


class ApiImage(SpotifyModel):
    """Cover image. Width and height are null for user-uploaded covers."""

    url: str
    width: int | None = None
    height: int | None = None


class ApiArtist(SpotifyModel):
    """Simplified artist object."""

    name: str
    id: str | None = None


class ApiAlbumRef(SpotifyModel):
    """Simplified album object embedded in a track."""

    name: str | None = None
    images: list[ApiImage] = Field(default_factory=list)


class ApiTrack(SpotifyModel):
    """Track object (full or simplified)."""

    id: str | None = None
    name: str
    duration_ms: int = 0
    artists: list[ApiArtist] = Field(default_factory=list)
    album: ApiAlbumRef | None = None
    external_urls: dict[str, str] = Field(default_factory=dict)


class ApiPage(SpotifyModel):
    """Paging object. Items stay raw so one bad entry doesn't sink the page."""

    items: list[Any] = Field(default_factory=list)
    next: str | None = None


class ApiSearchResponse(SpotifyModel):
    """Response of the search endpoint for ``type=track``."""

    tracks: ApiPage | None = None


# ============================================================================
# WEB API - Summaries returned by the primary client
# ============================================================================


class SongSummary(SpotifyModel):
    """Condensed track as returned by the primary client.

    Attributes:
        title: Track name.
        duration: Duration in milliseconds.
        artist: Artist names joined with ", " (None when unknown).
        url: Canonical open.spotify.com URL.
        thumbnail: Largest album image URL, if any.
    """

    title: str
    duration: int = 0
    artist: str | None = None
    url: str
    thumbnail: str | None = None


class CollectionSummary(SpotifyModel):
    """Fields shared by playlist and album summaries."""

    name: str
    author: str | None = None
    thumbnail: str | None = None
    id: str
    url: str
    tracks: list[SongSummary]


class PlaylistSummary(CollectionSummary):
    """Condensed playlist. ``author`` is the owner's display name."""


class AlbumSummary(CollectionSummary):
    """Condensed album. ``author`` is the album artists joined with ", "."""


# ============================================================================
# EMBED PAGE - Scraper payloads
# ============================================================================


class EmbedImage(SpotifyModel):
    """Cover art source."""

    url: str
    width: int | None = None
    height: int | None = None


class EmbedCoverArt(SpotifyModel):
    """Cover art with several resolutions."""

    sources: list[EmbedImage] = Field(default_factory=list)


class EmbedArtist(SpotifyModel):
    """Artist reference on an embedded track."""

    name: str
    uri: str | None = None


class EmbedTrackListItem(SpotifyModel):
    """Entry of a playlist/album ``trackList``.

    ``subtitle`` holds the artist names already joined by Spotify.
    """

    uri: str | None = None
    uid: str | None = None
    title: str | None = None
    subtitle: str | None = None
    duration: int = 0


class EmbedSong(SpotifyModel):
    """Track entity from a track embed page."""

    type: Literal["track"]
    id: str | None = None
    name: str | None = None
    title: str
    artists: list[EmbedArtist] = Field(default_factory=list)
    cover_art: EmbedCoverArt | None = Field(default=None, alias="coverArt")
    duration: int | None = None
    max_duration: int | None = Field(default=None, alias="maxDuration")


class EmbedCollection(SpotifyModel):
    """Fields shared by playlist and album embed entities."""

    id: str | None = None
    name: str | None = None
    title: str | None = None
    subtitle: str | None = None
    cover_art: EmbedCoverArt | None = Field(default=None, alias="coverArt")
    track_list: list[EmbedTrackListItem] = Field(
        default_factory=list, alias="trackList"
    )


class EmbedPlaylist(EmbedCollection):
    """Playlist entity from a playlist embed page."""

    type: Literal["playlist"]


class EmbedAlbum(EmbedCollection):
    """Album entity from an album embed page."""

    type: Literal["album"]


EmbedEntity = Annotated[
    EmbedSong | EmbedPlaylist | EmbedAlbum, Field(discriminator="type")
]

_EMBED_ENTITY_ADAPTER: TypeAdapter[EmbedSong | EmbedPlaylist | EmbedAlbum] = (
    TypeAdapter(EmbedEntity)
)


def parse_embed_entity(data: object) -> EmbedSong | EmbedPlaylist | EmbedAlbum:
    """Validate a raw embed entity into its typed model.

    Raises:
        pydantic.ValidationError: If the payload doesn't match any entity type.
    """
    return _EMBED_ENTITY_ADAPTER.validate_python(data)
