"""Bridging Spotify tracks to playable streams.

Spotify metadata can't be streamed directly. A bridge strategy turns a
canonical Track into a playable handle (a direct URL or a byte stream):

- ProviderBridge: a caller-supplied BridgeProvider does everything.
- DirectStreamBridge: a caller-supplied stream function receives the
  track URL as is.
- YouTubeBridge (default): searches YouTube Music for an equivalent
  recording and streams it through yt-dlp.

The extractor picks one strategy at construction time.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from dataclasses import dataclass
from typing import Any, Protocol

import yt_dlp
from pydantic import ValidationError
from ytmusicapi import YTMusic
from ytmusicapi.exceptions import YTMusicError

from trackbridge.config import BridgeConfig
from trackbridge.exceptions import BridgeError, NoBridgeCandidateError, StreamError
from trackbridge.lib.matching import find_best_candidate
from trackbridge.models.track import Track
from trackbridge.models.ytmusic import BridgeMatch, SearchResult
from trackbridge.services.normalizer import UNKNOWN_ARTIST
from trackbridge.utils.url import is_youtube_url

logger = logging.getLogger(__name__)

PlayableHandle = str | AsyncIterator[bytes]
StreamFn = Callable[[str], Awaitable[PlayableHandle]]
CreateStreamFn = Callable[[Any, str], Awaitable[PlayableHandle]]


# ============================================================================
# PROTOCOLS
# ============================================================================


@dataclass(frozen=True)
class BridgeData:
    """Opaque bridge result produced by a BridgeProvider."""

    data: Any


class BridgeProvider(Protocol):
    """Caller-supplied playback backend.

    The only extension point for swapping how tracks become streams.
    """

    async def resolve(self, extractor: Any, track: Track) -> BridgeData | None:
        """Find the stream metadata for a track, or None if there is none."""
        ...

    async def stream(self, bridge: BridgeData) -> PlayableHandle:
        """Open a playable handle for previously resolved bridge data."""
        ...


class BridgeStrategy(Protocol):
    """Strategy used by the extractor for metadata and streaming."""

    async def resolve_metadata(self, track: Track) -> Any:
        """Resolve bridge metadata for ``Track.request_metadata()``."""
        ...

    async def stream(self, track: Track) -> PlayableHandle:
        """Obtain a playable handle.

        Raises:
            BridgeError: If no stream can be found for the track.
        """
        ...


# ============================================================================
# YOUTUBE MUSIC BACKEND - Search and stream URL extraction
# ============================================================================


class YouTubeSearcher:
    """Finds the YouTube Music recording equivalent to a track.

    Wraps ytmusicapi (blocking) in a worker thread and ranks results with
    fuzzy title/artist/duration matching.
    """

    def __init__(
        self,
        ytmusic: YTMusic | None = None,
        config: BridgeConfig | None = None,
    ) -> None:
        """Initialize the searcher.

        Args:
            ytmusic: Optional YTMusic instance. Created on first search if
                not provided.
            config: Optional bridge configuration. Uses defaults if not provided.
        """
        self._ytm = ytmusic
        self._config = config or BridgeConfig()

    async def search(self, track: Track) -> BridgeMatch | None:
        """Search for the best equivalent of a track.

        Returns:
            The best match, or None if the search returned no songs.

        Raises:
            BridgeError: If the search request fails.
        """
        artists = _split_artists(track.author)
        query = f"{track.title} {' '.join(artists)}".strip()
        results = await asyncio.to_thread(self._search_songs, query)

        best = find_best_candidate(track.title, artists, track.duration_ms, results)
        if best is None:
            logger.info("No YouTube Music results for '%s'", query)
            return None
        if not best.is_confident:
            logger.warning(
                "Low confidence bridge for '%s': '%s' (score=%.1f)",
                query,
                best.result.title,
                best.score,
            )

        result = best.result
        thumbnail = (
            max(result.thumbnails, key=lambda t: t.width).url
            if result.thumbnails
            else None
        )
        return BridgeMatch(
            video_id=result.video_id,
            url=result.url,
            title=result.title,
            author=", ".join(a.name for a in result.artists) or UNKNOWN_ARTIST,
            duration_seconds=result.duration_seconds,
            thumbnail=thumbnail,
            score=best.score,
        )

    def _search_songs(self, query: str) -> list[SearchResult]:
        """Run the blocking ytmusicapi search and parse valid results."""
        if self._ytm is None:
            self._ytm = YTMusic()

        logger.debug("Searching YouTube Music: %s", query)
        try:
            data = self._ytm.search(
                query,
                filter="songs",
                limit=self._config.search_limit,
                ignore_spelling=self._config.ignore_spelling,
            )
        except (YTMusicError, OSError) as e:
            logger.warning("YouTube Music search failed for '%s': %s", query, e)
            raise BridgeError(f"YouTube Music search failed: {e}") from e

        results: list[SearchResult] = []
        for item in data[: self._config.search_limit]:
            if not item or not item.get("videoId"):
                continue
            try:
                results.append(SearchResult.model_validate(item))
            except ValidationError as e:
                logger.debug("Skipping malformed search result: %s", e)
        return results


class YTDLPStreamer:
    """Stream function backed by yt-dlp.

    Extracts the direct audio URL for a YouTube URL without downloading.
    """

    def __init__(self, config: BridgeConfig | None = None) -> None:
        self._config = config or BridgeConfig()

    async def __call__(self, url: str) -> PlayableHandle:
        return await asyncio.to_thread(self._extract_stream_url, url)

    def _build_yt_dlp_options(self) -> dict[str, Any]:
        return {
            "format": self._config.audio_format,
            "noplaylist": True,
            "color": "never",  # Disable ANSI codes in error messages
            "quiet": self._config.quiet,
            "no_warnings": self._config.quiet,
        }

    def _extract_stream_url(self, url: str) -> str:
        """Resolve a watch URL to a direct audio URL.

        Raises:
            StreamError: If yt-dlp fails or returns no URL.
        """
        logger.debug("Extracting stream URL for %s", url)
        try:
            with yt_dlp.YoutubeDL(self._build_yt_dlp_options()) as ydl:
                info = ydl.extract_info(url, download=False)
        except (KeyboardInterrupt, SystemExit):
            raise
        except Exception as e:
            raise StreamError(f"Failed to extract stream for {url}: {e}") from e

        info = info or {}
        stream_url = info.get("url")
        if not stream_url:
            # Merged formats list their parts; the audio part comes last
            formats = info.get("requested_formats") or []
            stream_url = formats[-1].get("url") if formats else None
        if not stream_url:
            raise StreamError(f"No stream URL found for {url}")
        return stream_url


# ============================================================================
# STRATEGIES
# ============================================================================


class ProviderBridge:
    """Delegates resolution and streaming entirely to a BridgeProvider."""

    def __init__(self, provider: BridgeProvider, extractor: Any) -> None:
        self._provider = provider
        self._extractor = extractor

    async def resolve_metadata(self, track: Track) -> Any:
        data = await self._provider.resolve(self._extractor, track)
        return data.data if data else None

    async def stream(self, track: Track) -> PlayableHandle:
        data = await self._provider.resolve(self._extractor, track)
        if not data:
            raise BridgeError(f"Failed to bridge this track: {track.title}")
        track.set_bridge(data.data)
        return await self._provider.stream(data)


class YouTubeBridge:
    """Default strategy: YouTube Music equivalence search + stream function."""

    def __init__(self, searcher: YouTubeSearcher, stream_fn: StreamFn) -> None:
        self._searcher = searcher
        self._stream_fn = stream_fn

    async def resolve_metadata(self, track: Track) -> BridgeMatch | None:
        # Metadata is best effort; only streaming treats a failed search as fatal
        try:
            return await self._searcher.search(track)
        except BridgeError as e:
            logger.warning("Bridge metadata unavailable for '%s': %s", track.title, e)
            return None

    async def stream(self, track: Track) -> PlayableHandle:
        url = track.raw.get("url")
        if not is_youtube_url(url):
            match = track.metadata.bridge
            if not isinstance(match, BridgeMatch):
                match = await self._searcher.search(track)
            if match is None:
                raise NoBridgeCandidateError(
                    f"No YouTube Music match for '{track.title}' by '{track.author}'"
                )
            track.set_bridge(match)
            track.raw["url"] = url = match.url
            logger.info("Bridged '%s' to %s", track.title, url)
        return await self._stream_fn(url)


class DirectStreamBridge:
    """Streams the track URL through a caller-supplied function.

    Bridge metadata is still looked up on YouTube Music when requested.
    """

    def __init__(
        self,
        create_stream: CreateStreamFn,
        extractor: Any,
        searcher: YouTubeSearcher,
    ) -> None:
        self._create_stream = create_stream
        self._extractor = extractor
        self._metadata = YouTubeBridge(searcher, self._stream_url)

    async def _stream_url(self, url: str) -> PlayableHandle:
        return await self._create_stream(self._extractor, url)

    async def resolve_metadata(self, track: Track) -> BridgeMatch | None:
        return await self._metadata.resolve_metadata(track)

    async def stream(self, track: Track) -> PlayableHandle:
        return await self._stream_url(track.url)


def _split_artists(author: str) -> list[str]:
    """Split a joined artist string, dropping the unknown sentinel."""
    if not author or author == UNKNOWN_ARTIST:
        return []
    return [name.strip() for name in author.split(",") if name.strip()]
