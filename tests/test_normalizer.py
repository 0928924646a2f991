"""Tests for payload normalization."""

from typing import Any

import pytest
from trackbridge.models.enums import PlaylistType, QueryType
from trackbridge.models.spotify import (
    AlbumSummary,
    EmbedAlbum,
    EmbedPlaylist,
    EmbedSong,
    PlaylistSummary,
    SongSummary,
)
from trackbridge.models.track import Track
from trackbridge.services.normalizer import (
    PLACEHOLDER_THUMBNAIL,
    UNKNOWN_ARTIST,
    FallbackPayload,
    NormalizeContext,
    PrimaryPayload,
    TrackNormalizer,
)

SONG_CONTEXT = NormalizeContext(
    query="https://open.spotify.com/track/0DiWol3AO6WpXZgp0goxAV",
    query_type=QueryType.SPOTIFY_SONG,
    requested_by="user-1",
)


@pytest.fixture
def normalizer() -> TrackNormalizer:
    return TrackNormalizer()


class TestPrimaryPayload:
    """Tests for Web API payloads."""

    def test_song(self, normalizer: TrackNormalizer, sample_song: SongSummary) -> None:
        result = normalizer.normalize(PrimaryPayload(sample_song), SONG_CONTEXT)

        assert result.playlist is None
        [track] = result.tracks
        assert track.title == "One More Time"
        assert track.description == "One More Time by Daft Punk"
        assert track.author == "Daft Punk"
        assert track.url == sample_song.url
        assert track.thumbnail == sample_song.thumbnail
        assert track.duration == "05:20"
        assert track.duration_ms == 320357
        assert track.views == 0
        assert track.requested_by == "user-1"
        assert track.source == "spotify"
        assert track.query_type is QueryType.SPOTIFY_SONG
        assert track.metadata.source is sample_song
        assert track.metadata.bridge is None

    def test_search_results_keep_order(
        self, normalizer: TrackNormalizer, sample_songs: list[SongSummary]
    ) -> None:
        context = NormalizeContext("daft punk", QueryType.SPOTIFY_SEARCH)

        result = normalizer.normalize(PrimaryPayload(sample_songs), context)

        assert result.playlist is None
        assert [t.title for t in result.tracks] == ["One More Time", "Aerodynamic"]

    def test_defaults_for_missing_fields(self, normalizer: TrackNormalizer) -> None:
        song = SongSummary(title="Untitled", url="https://open.spotify.com/track/x")

        [track] = normalizer.normalize(PrimaryPayload(song), SONG_CONTEXT).tracks

        assert track.author == UNKNOWN_ARTIST
        assert track.description == "Untitled"
        assert track.thumbnail == PLACEHOLDER_THUMBNAIL
        assert track.duration == "0:00"

    def test_playlist(
        self,
        normalizer: TrackNormalizer,
        sample_playlist_summary: PlaylistSummary,
    ) -> None:
        context = NormalizeContext(
            sample_playlist_summary.url, QueryType.SPOTIFY_PLAYLIST
        )

        result = normalizer.normalize(PrimaryPayload(sample_playlist_summary), context)

        playlist = result.playlist
        assert playlist is not None
        assert playlist.type is PlaylistType.PLAYLIST
        assert playlist.id == "abc123"
        assert playlist.title == "Test Playlist"
        assert playlist.author.name == "Test Owner"
        assert playlist.raw is sample_playlist_summary
        assert playlist.tracks == result.tracks
        assert len(result.tracks) == 2
        assert all(t.playlist is playlist for t in result.tracks)

    def test_album(
        self, normalizer: TrackNormalizer, sample_album_summary: AlbumSummary
    ) -> None:
        context = NormalizeContext(sample_album_summary.url, QueryType.SPOTIFY_ALBUM)

        result = normalizer.normalize(PrimaryPayload(sample_album_summary), context)

        assert result.playlist is not None
        assert result.playlist.type is PlaylistType.ALBUM
        assert result.playlist.author.name == "Daft Punk"
        assert result.playlist.url == sample_album_summary.url


class TestFallbackPayload:
    """Tests for embed page payloads."""

    def test_song(
        self, normalizer: TrackNormalizer, sample_embed_song: EmbedSong
    ) -> None:
        result = normalizer.normalize(FallbackPayload(sample_embed_song), SONG_CONTEXT)

        [track] = result.tracks
        assert track.url == "https://open.spotify.com/track/0DiWol3AO6WpXZgp0goxAV"
        assert track.thumbnail == "https://i.scdn.co/image/one-more-time"
        assert track.metadata.source is sample_embed_song

    def test_song_is_tagged_as_song(
        self, normalizer: TrackNormalizer, sample_embed_song: EmbedSong
    ) -> None:
        """The tag follows the entity, not the query type that found it."""
        context = NormalizeContext(SONG_CONTEXT.query, QueryType.SPOTIFY_PLAYLIST)

        [track] = normalizer.normalize(
            FallbackPayload(sample_embed_song), context
        ).tracks

        assert track.query_type is QueryType.SPOTIFY_SONG

    def test_song_without_id_uses_query(self, normalizer: TrackNormalizer) -> None:
        song = EmbedSong.model_validate(
            {"type": "track", "title": "Untitled", "maxDuration": 1000}
        )

        [track] = normalizer.normalize(FallbackPayload(song), SONG_CONTEXT).tracks

        assert track.url == SONG_CONTEXT.query
        assert track.author == UNKNOWN_ARTIST
        assert track.thumbnail == PLACEHOLDER_THUMBNAIL
        assert track.duration_ms == 1000

    def test_playlist(
        self, normalizer: TrackNormalizer, sample_embed_playlist: EmbedPlaylist
    ) -> None:
        context = NormalizeContext(
            "https://open.spotify.com/playlist/abc123", QueryType.SPOTIFY_PLAYLIST
        )

        result = normalizer.normalize(FallbackPayload(sample_embed_playlist), context)

        playlist = result.playlist
        assert playlist is not None
        assert playlist.type is PlaylistType.PLAYLIST
        assert playlist.url == "https://open.spotify.com/playlist/abc123"
        assert playlist.author.name == "Test Owner"
        assert [t.url for t in result.tracks] == [
            "https://open.spotify.com/track/0DiWol3AO6WpXZgp0goxAV",
            "https://open.spotify.com/track/1gWsh0T1gi55K45TMGZxT0",
        ]
        assert all(t.thumbnail == PLACEHOLDER_THUMBNAIL for t in result.tracks)
        assert all(t.playlist is playlist for t in result.tracks)

    def test_album_url_uses_album_path(
        self, normalizer: TrackNormalizer, sample_embed_album: EmbedAlbum
    ) -> None:
        context = NormalizeContext("spotify:album:x", QueryType.SPOTIFY_ALBUM)

        result = normalizer.normalize(FallbackPayload(sample_embed_album), context)

        assert result.playlist is not None
        assert result.playlist.type is PlaylistType.ALBUM
        assert (
            result.playlist.url
            == "https://open.spotify.com/album/2noRn2Aes5aoNVsU6iWThc"
        )
        assert result.playlist.thumbnail == PLACEHOLDER_THUMBNAIL


class TestEquivalence:
    """Both payload shapes must produce the same canonical track."""

    def test_song_shapes_are_equivalent(
        self,
        normalizer: TrackNormalizer,
        sample_song: SongSummary,
        sample_embed_song: EmbedSong,
    ) -> None:
        [primary] = normalizer.normalize(
            PrimaryPayload(sample_song), SONG_CONTEXT
        ).tracks
        [fallback] = normalizer.normalize(
            FallbackPayload(sample_embed_song), SONG_CONTEXT
        ).tracks

        assert primary.to_dict(include_metadata=False) == fallback.to_dict(
            include_metadata=False
        )
        assert primary.metadata.source is not fallback.metadata.source

    def test_collection_shapes_are_equivalent(
        self,
        normalizer: TrackNormalizer,
        sample_playlist_summary: PlaylistSummary,
        sample_embed_playlist: EmbedPlaylist,
    ) -> None:
        context = NormalizeContext(
            "https://open.spotify.com/playlist/abc123", QueryType.SPOTIFY_PLAYLIST
        )

        primary = normalizer.normalize(PrimaryPayload(sample_playlist_summary), context)
        fallback = normalizer.normalize(FallbackPayload(sample_embed_playlist), context)

        def core(track: Track) -> tuple[Any, ...]:
            return (track.title, track.author, track.url, track.duration_ms)

        assert [core(t) for t in primary.tracks] == [core(t) for t in fallback.tracks]
        assert primary.playlist is not None and fallback.playlist is not None
        assert primary.playlist.id == fallback.playlist.id


class TestNormalizerBehavior:
    """Tests for shared normalizer behavior."""

    @pytest.mark.asyncio
    async def test_binds_resolver_without_calling_it(
        self, sample_song: SongSummary
    ) -> None:
        calls: list[Track] = []

        async def resolver(track: Track) -> str:
            calls.append(track)
            return "bridge"

        normalizer = TrackNormalizer(resolver)
        [track] = normalizer.normalize(PrimaryPayload(sample_song), SONG_CONTEXT).tracks

        assert track.has_metadata_resolver
        assert calls == []

        metadata = await track.request_metadata()
        assert metadata.bridge == "bridge"
        assert calls == [track]

    def test_negative_duration_clamps(self, normalizer: TrackNormalizer) -> None:
        song = SongSummary(
            title="Broken", duration=-500, url="https://open.spotify.com/track/x"
        )

        [track] = normalizer.normalize(PrimaryPayload(song), SONG_CONTEXT).tracks

        assert track.duration_ms == 0
        assert track.duration == "0:00"

    def test_unsupported_payload_raises(self, normalizer: TrackNormalizer) -> None:
        payload = PrimaryPayload("not a payload")  # type: ignore[arg-type]
        with pytest.raises(TypeError):
            normalizer.normalize(payload, SONG_CONTEXT)
