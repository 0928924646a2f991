"""Normalization of provider payloads into canonical tracks and playlists.

Pipeline Overview:
==================
1. Callers wrap a provider payload in ``PrimaryPayload`` (Web API) or
   ``FallbackPayload`` (embed scraper).
2. ``TrackNormalizer.normalize()`` dispatches on (payload source x entity
   kind) to one mapping function.
3. Each mapping function fills defaults (placeholder thumbnail,
   "Unknown Artist", timecode) and returns an ``ExtractorResult``.

Tracks keep the provider's order. Deferred metadata resolvers are attached
but never forced here.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any, ClassVar

from trackbridge.models.enums import EntityKind, PayloadSource, PlaylistType, QueryType
from trackbridge.models.spotify import (
    AlbumSummary,
    CollectionSummary,
    EmbedAlbum,
    EmbedCollection,
    EmbedPlaylist,
    EmbedSong,
    EmbedTrackListItem,
    PlaylistSummary,
    SongSummary,
)
from trackbridge.models.track import (
    ExtractorResult,
    Playlist,
    PlaylistAuthor,
    Track,
    TrackMetadata,
)
from trackbridge.utils.timecode import format_duration
from trackbridge.utils.url import build_entity_url, entity_id_from_uri

logger = logging.getLogger(__name__)

PLACEHOLDER_THUMBNAIL = "https://www.scdn.co/i/_global/twitter_card-default.jpg"
UNKNOWN_ARTIST = "Unknown Artist"

MetadataResolver = Callable[[Track], Awaitable[Any]]


@dataclass(frozen=True)
class PrimaryPayload:
    """Payload returned by the Web API client."""

    kind: ClassVar[PayloadSource] = PayloadSource.PRIMARY

    payload: SongSummary | list[SongSummary] | PlaylistSummary | AlbumSummary


@dataclass(frozen=True)
class FallbackPayload:
    """Payload returned by the embed scraper."""

    kind: ClassVar[PayloadSource] = PayloadSource.FALLBACK

    payload: EmbedSong | EmbedPlaylist | EmbedAlbum


ProviderPayload = PrimaryPayload | FallbackPayload


@dataclass(frozen=True)
class NormalizeContext:
    """Request context carried onto every normalized track.

    Attributes:
        query: The original query string (used when a payload has no URL).
        query_type: Query type the caller resolved.
        requested_by: Opaque requester identity.
    """

    query: str
    query_type: QueryType
    requested_by: Any = None


def _describe(title: str, artists: str | None) -> str:
    return f"{title} by {artists}" if artists else title


class TrackNormalizer:
    """Maps provider payloads onto canonical Track/Playlist records."""

    def __init__(self, metadata_resolver: MetadataResolver | None = None) -> None:
        """Initialize the normalizer.

        Args:
            metadata_resolver: Bridge lookup bound to every track as its
                deferred metadata resolver. Tracks get no resolver if None.
        """
        self._metadata_resolver = metadata_resolver

    def normalize(
        self, payload: ProviderPayload, context: NormalizeContext
    ) -> ExtractorResult:
        """Convert a tagged provider payload into an ExtractorResult."""
        match payload:
            case PrimaryPayload(payload=SongSummary() as song):
                return ExtractorResult(tracks=[self._from_summary(song, context)])
            case PrimaryPayload(payload=list() as songs):
                return ExtractorResult(
                    tracks=[self._from_summary(s, context) for s in songs]
                )
            case PrimaryPayload(payload=AlbumSummary() as album):
                return self._from_collection_summary(album, PlaylistType.ALBUM, context)
            case PrimaryPayload(payload=PlaylistSummary() as playlist):
                return self._from_collection_summary(
                    playlist, PlaylistType.PLAYLIST, context
                )
            case FallbackPayload(payload=EmbedSong() as song):
                return ExtractorResult(tracks=[self._from_embed_song(song, context)])
            case FallbackPayload(payload=EmbedAlbum() as album):
                return self._from_embed_collection(album, PlaylistType.ALBUM, context)
            case FallbackPayload(payload=EmbedPlaylist() as playlist):
                return self._from_embed_collection(
                    playlist, PlaylistType.PLAYLIST, context
                )
        raise TypeError(f"Unsupported payload: {type(payload).__name__}")

    # ============================================================================
    # PRIMARY SHAPE - Web API summaries
    # ============================================================================

    def _from_summary(self, song: SongSummary, context: NormalizeContext) -> Track:
        return self._build_track(
            title=song.title,
            description=_describe(song.title, song.artist),
            author=song.artist or UNKNOWN_ARTIST,
            url=song.url,
            thumbnail=song.thumbnail or PLACEHOLDER_THUMBNAIL,
            duration_ms=song.duration,
            query_type=QueryType.SPOTIFY_SONG,
            source=song,
            context=context,
        )

    def _from_collection_summary(
        self,
        summary: CollectionSummary,
        playlist_type: PlaylistType,
        context: NormalizeContext,
    ) -> ExtractorResult:
        playlist = Playlist(
            title=summary.name,
            description=summary.name,
            thumbnail=summary.thumbnail or PLACEHOLDER_THUMBNAIL,
            type=playlist_type,
            author=PlaylistAuthor(name=summary.author or UNKNOWN_ARTIST),
            id=summary.id,
            url=summary.url or context.query,
            raw=summary,
        )
        tracks = playlist.attach(self._from_summary(s, context) for s in summary.tracks)
        return ExtractorResult(playlist=playlist, tracks=tracks)

    # ============================================================================
    # FALLBACK SHAPE - Embed page entities
    # ============================================================================

    def _from_embed_song(self, song: EmbedSong, context: NormalizeContext) -> Track:
        artists = ", ".join(a.name for a in song.artists if a.name) or None
        title = song.title or song.name or ""
        return self._build_track(
            title=title,
            description=_describe(title, artists),
            author=artists or UNKNOWN_ARTIST,
            url=(
                build_entity_url(EntityKind.TRACK, song.id)
                if song.id
                else context.query
            ),
            thumbnail=_first_cover(song.cover_art) or PLACEHOLDER_THUMBNAIL,
            duration_ms=(
                song.duration if song.duration is not None else song.max_duration or 0
            ),
            query_type=QueryType.SPOTIFY_SONG,
            source=song,
            context=context,
        )

    def _from_embed_collection(
        self,
        entity: EmbedCollection,
        playlist_type: PlaylistType,
        context: NormalizeContext,
    ) -> ExtractorResult:
        kind = (
            EntityKind.ALBUM
            if playlist_type is PlaylistType.ALBUM
            else EntityKind.PLAYLIST
        )
        playlist = Playlist(
            title=entity.name or entity.title or "",
            description=entity.title or "",
            thumbnail=_first_cover(entity.cover_art) or PLACEHOLDER_THUMBNAIL,
            type=playlist_type,
            author=PlaylistAuthor(name=entity.subtitle or UNKNOWN_ARTIST),
            id=entity.id,
            url=build_entity_url(kind, entity.id) if entity.id else context.query,
            raw=entity,
        )
        tracks = playlist.attach(
            self._from_track_list_item(item, context) for item in entity.track_list
        )
        return ExtractorResult(playlist=playlist, tracks=tracks)

    def _from_track_list_item(
        self, item: EmbedTrackListItem, context: NormalizeContext
    ) -> Track:
        title = item.title or ""
        track_id = entity_id_from_uri(item.uri)
        return self._build_track(
            title=title,
            description=_describe(title, item.subtitle),
            author=item.subtitle or UNKNOWN_ARTIST,
            url=(
                build_entity_url(EntityKind.TRACK, track_id)
                if track_id
                else context.query
            ),
            thumbnail=PLACEHOLDER_THUMBNAIL,
            duration_ms=item.duration,
            query_type=QueryType.SPOTIFY_SONG,
            source=item,
            context=context,
        )

    # ============================================================================
    # SHARED
    # ============================================================================

    def _build_track(
        self,
        *,
        title: str,
        description: str,
        author: str,
        url: str,
        thumbnail: str,
        duration_ms: int,
        query_type: QueryType,
        source: Any,
        context: NormalizeContext,
    ) -> Track:
        duration_ms = max(0, duration_ms)
        track = Track(
            title=title,
            description=description,
            author=author,
            url=url,
            thumbnail=thumbnail,
            duration=format_duration(duration_ms),
            duration_ms=duration_ms,
            views=0,
            requested_by=context.requested_by,
            query_type=query_type,
            metadata=TrackMetadata(source=source, bridge=None),
        )
        if self._metadata_resolver is not None:
            track.bind_metadata_resolver(self._metadata_resolver)
        return track


def _first_cover(cover_art: Any) -> str | None:
    """Return the first cover source URL, if any."""
    if cover_art is None or not cover_art.sources:
        return None
    return cover_art.sources[0].url
