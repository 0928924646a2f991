"""Test fixtures and configuration."""

from collections.abc import Callable
from typing import Any

import pytest
from trackbridge.exceptions import ScraperError
from trackbridge.models.spotify import (
    AlbumSummary,
    EmbedAlbum,
    EmbedPlaylist,
    EmbedSong,
    PlaylistSummary,
    SongSummary,
)
from trackbridge.models.track import Track
from trackbridge.models.ytmusic import BridgeMatch
from trackbridge.services.extractor import SpotifyExtractor

# ============================================================================
# Sample payloads
# ============================================================================


@pytest.fixture
def sample_song() -> SongSummary:
    """Create a sample primary song summary."""
    return SongSummary(
        title="One More Time",
        duration=320357,
        artist="Daft Punk",
        url="https://open.spotify.com/track/0DiWol3AO6WpXZgp0goxAV",
        thumbnail="https://i.scdn.co/image/one-more-time",
    )


@pytest.fixture
def sample_songs(sample_song: SongSummary) -> list[SongSummary]:
    """Create two sample primary song summaries."""
    return [
        sample_song,
        SongSummary(
            title="Aerodynamic",
            duration=212546,
            artist="Daft Punk",
            url="https://open.spotify.com/track/1gWsh0T1gi55K45TMGZxT0",
            thumbnail="https://i.scdn.co/image/aerodynamic",
        ),
    ]


@pytest.fixture
def sample_playlist_summary(sample_songs: list[SongSummary]) -> PlaylistSummary:
    """Create a sample primary playlist summary."""
    return PlaylistSummary(
        name="Test Playlist",
        author="Test Owner",
        thumbnail="https://i.scdn.co/image/playlist",
        id="abc123",
        url="https://open.spotify.com/playlist/abc123",
        tracks=sample_songs,
    )


@pytest.fixture
def sample_album_summary(sample_songs: list[SongSummary]) -> AlbumSummary:
    """Create a sample primary album summary."""
    return AlbumSummary(
        name="Discovery",
        author="Daft Punk",
        thumbnail="https://i.scdn.co/image/discovery",
        id="2noRn2Aes5aoNVsU6iWThc",
        url="https://open.spotify.com/album/2noRn2Aes5aoNVsU6iWThc",
        tracks=sample_songs,
    )


@pytest.fixture
def sample_embed_song() -> EmbedSong:
    """Create a sample embed page track entity."""
    return EmbedSong.model_validate(
        {
            "type": "track",
            "id": "0DiWol3AO6WpXZgp0goxAV",
            "name": "One More Time",
            "title": "One More Time",
            "artists": [
                {"name": "Daft Punk", "uri": "spotify:artist:4tZwfgrHOc3mvqYlEYSvVi"}
            ],
            "coverArt": {
                "sources": [{"url": "https://i.scdn.co/image/one-more-time"}]
            },
            "duration": 320357,
        }
    )


def _track_list() -> list[dict[str, Any]]:
    return [
        {
            "uri": "spotify:track:0DiWol3AO6WpXZgp0goxAV",
            "uid": "u1",
            "title": "One More Time",
            "subtitle": "Daft Punk",
            "duration": 320357,
        },
        {
            "uri": "spotify:track:1gWsh0T1gi55K45TMGZxT0",
            "uid": "u2",
            "title": "Aerodynamic",
            "subtitle": "Daft Punk",
            "duration": 212546,
        },
    ]


@pytest.fixture
def sample_embed_playlist() -> EmbedPlaylist:
    """Create a sample embed page playlist entity."""
    return EmbedPlaylist.model_validate(
        {
            "type": "playlist",
            "id": "abc123",
            "name": "Test Playlist",
            "title": "Test Playlist",
            "subtitle": "Test Owner",
            "coverArt": {"sources": [{"url": "https://i.scdn.co/image/playlist"}]},
            "trackList": _track_list(),
        }
    )


@pytest.fixture
def sample_embed_album() -> EmbedAlbum:
    """Create a sample embed page album entity."""
    return EmbedAlbum.model_validate(
        {
            "type": "album",
            "id": "2noRn2Aes5aoNVsU6iWThc",
            "name": "Discovery",
            "title": "Discovery",
            "subtitle": "Daft Punk",
            "trackList": _track_list(),
        }
    )


@pytest.fixture
def sample_bridge_match() -> BridgeMatch:
    """Create a sample YouTube Music bridge match."""
    return BridgeMatch(
        video_id="FGBhQbmPwH8",
        url="https://music.youtube.com/watch?v=FGBhQbmPwH8",
        title="One More Time",
        author="Daft Punk",
        duration_seconds=320,
        thumbnail="https://lh3.googleusercontent.com/one-more-time",
        score=97.0,
    )


# ============================================================================
# Mock collaborators
# ============================================================================


class MockPrimaryClient:
    """Mock Web API client for testing."""

    def __init__(
        self,
        *,
        enabled: bool = True,
        token_expired: bool = False,
        token_error: Exception | None = None,
        search_results: list[SongSummary] | None = None,
        track: SongSummary | None = None,
        playlist: PlaylistSummary | None = None,
        album: AlbumSummary | None = None,
        error: Exception | None = None,
    ) -> None:
        self._enabled = enabled
        self._token_expired = token_expired
        self._token_error = token_error
        self._search_results = search_results
        self._track = track
        self._playlist = playlist
        self._album = album
        self._error = error
        self.token_requests = 0
        self.search_calls: list[str] = []
        self.get_track_calls: list[str] = []
        self.get_playlist_calls: list[str] = []
        self.get_album_calls: list[str] = []
        self.closed = False

    @property
    def enabled(self) -> bool:
        """Mock enabled."""
        return self._enabled

    def is_token_expired(self) -> bool:
        """Mock is_token_expired."""
        return self._token_expired

    async def request_token(self) -> None:
        """Mock request_token."""
        self.token_requests += 1
        if self._token_error is not None:
            raise self._token_error
        self._token_expired = False

    async def search(self, query: str) -> list[SongSummary] | None:
        """Mock search."""
        self.search_calls.append(query)
        if self._error is not None:
            raise self._error
        return self._search_results

    async def get_track(self, track_id: str) -> SongSummary | None:
        """Mock get_track."""
        self.get_track_calls.append(track_id)
        if self._error is not None:
            raise self._error
        return self._track

    async def get_playlist(self, playlist_id: str) -> PlaylistSummary | None:
        """Mock get_playlist."""
        self.get_playlist_calls.append(playlist_id)
        if self._error is not None:
            raise self._error
        return self._playlist

    async def get_album(self, album_id: str) -> AlbumSummary | None:
        """Mock get_album."""
        self.get_album_calls.append(album_id)
        if self._error is not None:
            raise self._error
        return self._album

    @property
    def lookup_count(self) -> int:
        """Number of entity lookups made."""
        return (
            len(self.get_track_calls)
            + len(self.get_playlist_calls)
            + len(self.get_album_calls)
        )

    async def close(self) -> None:
        """Mock close."""
        self.closed = True


class MockScraper:
    """Mock embed page scraper for testing."""

    def __init__(
        self,
        entity: EmbedSong | EmbedPlaylist | EmbedAlbum | None = None,
        error: Exception | None = None,
    ) -> None:
        self._entity = entity
        self._error = error
        self.fetch_calls: list[str] = []
        self.closed = False

    async def fetch_by_url(self, url: str) -> EmbedSong | EmbedPlaylist | EmbedAlbum:
        """Mock fetch_by_url."""
        self.fetch_calls.append(url)
        if self._error is not None:
            raise self._error
        if self._entity is None:
            raise ScraperError("No entity configured")
        return self._entity

    async def close(self) -> None:
        """Mock close."""
        self.closed = True


class MockSearcher:
    """Mock YouTube Music searcher for testing."""

    def __init__(
        self, match: BridgeMatch | None = None, error: Exception | None = None
    ) -> None:
        self._match = match
        self._error = error
        self.search_calls: list[Track] = []

    async def search(self, track: Track) -> BridgeMatch | None:
        """Mock search."""
        self.search_calls.append(track)
        if self._error is not None:
            raise self._error
        return self._match


class RecordingStreamFn:
    """Stream function that records URLs and returns a fake handle."""

    def __init__(self) -> None:
        self.calls: list[str] = []

    async def __call__(self, url: str) -> str:
        self.calls.append(url)
        return f"stream:{url}"


@pytest.fixture
def mock_primary() -> MockPrimaryClient:
    """Create an enabled primary client that finds nothing."""
    return MockPrimaryClient()


@pytest.fixture
def mock_scraper() -> MockScraper:
    """Create a scraper that fails for every URL."""
    return MockScraper()


@pytest.fixture
def mock_searcher(sample_bridge_match: BridgeMatch) -> MockSearcher:
    """Create a searcher that always finds the sample match."""
    return MockSearcher(match=sample_bridge_match)


@pytest.fixture
def stream_fn() -> RecordingStreamFn:
    """Create a recording stream function."""
    return RecordingStreamFn()


@pytest.fixture
def make_extractor(
    mock_primary: MockPrimaryClient,
    mock_scraper: MockScraper,
    mock_searcher: MockSearcher,
    stream_fn: RecordingStreamFn,
) -> Callable[..., SpotifyExtractor]:
    """Build extractors wired to mocks. Keyword arguments override them."""

    def factory(**kwargs: Any) -> SpotifyExtractor:
        kwargs.setdefault("api", mock_primary)
        kwargs.setdefault("scraper", mock_scraper)
        kwargs.setdefault("searcher", mock_searcher)
        kwargs.setdefault("stream_fn", stream_fn)
        return SpotifyExtractor(**kwargs)

    return factory
