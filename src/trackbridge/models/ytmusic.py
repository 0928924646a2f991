"""Models for parsing ytmusicapi responses.

These are internal models used by the YouTube Music bridge to parse search
results. They may change if the API changes.
"""

from pydantic import BaseModel, ConfigDict, Field

from trackbridge.utils.url import YOUTUBE_MUSIC_WATCH_URL

__all__ = [
    "AlbumRef",
    "Artist",
    "BridgeMatch",
    "SearchResult",
    "Thumbnail",
]


class YTMusicModel(BaseModel):
    """Base model for ytmusicapi responses."""

    model_config = ConfigDict(extra="ignore", frozen=True)


class Thumbnail(YTMusicModel):
    """Video/album thumbnail."""

    url: str
    width: int
    height: int


class Artist(YTMusicModel):
    """Artist reference."""

    name: str
    id: str | None = None


class AlbumRef(YTMusicModel):
    """Album reference (in search results)."""

    id: str | None = None
    name: str


class SearchResult(YTMusicModel):
    """Song search result."""

    video_id: str = Field(alias="videoId")
    video_type: str | None = Field(default=None, alias="videoType")
    title: str
    artists: list[Artist] = Field(default_factory=list)
    album: AlbumRef | None = None
    thumbnails: list[Thumbnail] = Field(default_factory=list)
    duration_seconds: int | None = None

    @property
    def url(self) -> str:
        """YouTube Music watch URL for this result."""
        return YOUTUBE_MUSIC_WATCH_URL.format(video_id=self.video_id)


class BridgeMatch(YTMusicModel):
    """Equivalent YouTube Music track found for a Spotify track.

    Stored in ``Track.metadata.bridge`` by the default bridge.

    Attributes:
        video_id: YouTube video ID.
        url: Watch URL that yt-dlp can stream.
        title: Title of the matched video.
        author: Artist names joined with ", ".
        duration_seconds: Duration of the matched video, if known.
        thumbnail: Largest thumbnail URL, if any.
        score: Ranking score (0-100).
    """

    video_id: str
    url: str
    title: str
    author: str
    duration_seconds: int | None = None
    thumbnail: str | None = None
    score: float
