"""Enumerations for trackbridge domain models."""

from enum import StrEnum


class QueryType(StrEnum):
    """How a query should be resolved.

    AUTO picks a structured lookup when the query is a Spotify link and
    falls back to a search otherwise. AUTO_SEARCH always searches.
    """

    AUTO = "auto"
    AUTO_SEARCH = "autoSearch"
    SPOTIFY_SEARCH = "spotifySearch"
    SPOTIFY_SONG = "spotifySong"
    SPOTIFY_PLAYLIST = "spotifyPlaylist"
    SPOTIFY_ALBUM = "spotifyAlbum"

    @property
    def is_search(self) -> bool:
        """Whether this query type resolves through the search endpoint."""
        return self in (
            QueryType.AUTO,
            QueryType.AUTO_SEARCH,
            QueryType.SPOTIFY_SEARCH,
        )


class EntityKind(StrEnum):
    """Kind of entity a Spotify link points to."""

    TRACK = "track"
    PLAYLIST = "playlist"
    ALBUM = "album"

    @property
    def query_type(self) -> QueryType:
        """Query type that resolves this kind of entity."""
        match self:
            case EntityKind.TRACK:
                return QueryType.SPOTIFY_SONG
            case EntityKind.PLAYLIST:
                return QueryType.SPOTIFY_PLAYLIST
            case EntityKind.ALBUM:
                return QueryType.SPOTIFY_ALBUM


class PlaylistType(StrEnum):
    """Type tag of a resolved collection."""

    PLAYLIST = "playlist"
    ALBUM = "album"


class PayloadSource(StrEnum):
    """Which provider produced a payload."""

    PRIMARY = "primary"  # Spotify Web API
    FALLBACK = "fallback"  # Spotify embed page scraper
