"""Query resolution service."""

from __future__ import annotations

import logging
from types import TracebackType
from typing import Any

from trackbridge.config import APIConfig, BridgeConfig, SpotifySettings
from trackbridge.exceptions import TrackBridgeError
from trackbridge.models.enums import EntityKind, QueryType
from trackbridge.models.spotify import AlbumSummary, PlaylistSummary, SongSummary
from trackbridge.models.track import ExtractorResult, Track
from trackbridge.services.api import PrimaryClientProtocol, SpotifyAPIClient
from trackbridge.services.bridge import (
    BridgeProvider,
    BridgeStrategy,
    CreateStreamFn,
    DirectStreamBridge,
    PlayableHandle,
    ProviderBridge,
    StreamFn,
    YouTubeBridge,
    YouTubeSearcher,
    YTDLPStreamer,
)
from trackbridge.services.normalizer import (
    UNKNOWN_ARTIST,
    FallbackPayload,
    NormalizeContext,
    PrimaryPayload,
    TrackNormalizer,
)
from trackbridge.services.scraper import ScraperProtocol, SpotifyScraper
from trackbridge.utils.url import ParsedQuery, parse_query

logger = logging.getLogger(__name__)

SUPPORTED_QUERY_TYPES = frozenset(
    {
        QueryType.AUTO,
        QueryType.AUTO_SEARCH,
        QueryType.SPOTIFY_SEARCH,
        QueryType.SPOTIFY_SONG,
        QueryType.SPOTIFY_PLAYLIST,
        QueryType.SPOTIFY_ALBUM,
    }
)

_KIND_BY_QUERY_TYPE = {
    QueryType.SPOTIFY_SONG: EntityKind.TRACK,
    QueryType.SPOTIFY_PLAYLIST: EntityKind.PLAYLIST,
    QueryType.SPOTIFY_ALBUM: EntityKind.ALBUM,
}


class SpotifyExtractor:
    """Resolves Spotify queries into canonical tracks and playlists.

    Pipeline Overview:
    ==================
    1. resolve_query_type() - AUTO becomes a structured lookup for Spotify
                   links and a search for anything else
    2. _resolve_entity() - Web API lookup first; on any failure or empty
                   result, the embed page scraper with the original query
    3. TrackNormalizer - Both payload shapes become the same Track/Playlist
    4. stream() - The bridge strategy chosen at construction turns a track
                   into a playable handle

    Calls are sequential: the fallback never runs alongside the primary.
    """

    identifier = "trackbridge.spotify"

    def __init__(
        self,
        *,
        client_id: str | None = None,
        client_secret: str | None = None,
        create_stream: CreateStreamFn | None = None,
        bridge_provider: BridgeProvider | None = None,
        api: PrimaryClientProtocol | None = None,
        scraper: ScraperProtocol | None = None,
        searcher: YouTubeSearcher | None = None,
        stream_fn: StreamFn | None = None,
        api_config: APIConfig | None = None,
        bridge_config: BridgeConfig | None = None,
    ) -> None:
        """Initialize the extractor.

        Args:
            client_id: Spotify client ID. Read from the environment if not
                provided.
            client_secret: Spotify client secret. Read from the environment
                if not provided.
            create_stream: Stream function receiving ``(extractor, url)``.
                Takes precedence over the default YouTube bridge.
            bridge_provider: Full playback backend. Takes precedence over
                everything else.
            api: Primary client. Built from the credentials if not provided.
            scraper: Fallback scraper. Created if not provided.
            searcher: YouTube Music searcher for the bridge metadata.
            stream_fn: Stream function for bridged YouTube URLs. Defaults
                to yt-dlp.
            api_config: HTTP configuration for the default clients.
            bridge_config: Bridge configuration for the default searcher and
                streamer.
        """
        api_config = api_config or APIConfig()
        bridge_config = bridge_config or BridgeConfig()

        if api is None:
            overrides = {
                key: value
                for key, value in (
                    ("client_id", client_id),
                    ("client_secret", client_secret),
                )
                if value is not None
            }
            api = SpotifyAPIClient(SpotifySettings(**overrides), config=api_config)
        self._api = api
        self._scraper = scraper or SpotifyScraper(config=api_config)
        self._searcher = searcher or YouTubeSearcher(config=bridge_config)
        self._bridge = self._select_bridge(
            bridge_provider, create_stream, stream_fn, bridge_config
        )
        self._normalizer = TrackNormalizer(self._bridge.resolve_metadata)

    def _select_bridge(
        self,
        bridge_provider: BridgeProvider | None,
        create_stream: CreateStreamFn | None,
        stream_fn: StreamFn | None,
        bridge_config: BridgeConfig,
    ) -> BridgeStrategy:
        if bridge_provider is not None:
            logger.debug("Using custom bridge provider")
            return ProviderBridge(bridge_provider, self)
        if create_stream is not None:
            logger.debug("Using custom stream function")
            return DirectStreamBridge(create_stream, self, self._searcher)
        return YouTubeBridge(self._searcher, stream_fn or YTDLPStreamer(bridge_config))

    @property
    def api(self) -> PrimaryClientProtocol:
        """Primary metadata client."""
        return self._api

    @property
    def bridge(self) -> BridgeStrategy:
        """Bridge strategy selected at construction."""
        return self._bridge

    # ============================================================================
    # LIFECYCLE
    # ============================================================================

    async def activate(self) -> None:
        """Prepare the primary client by fetching an access token.

        Failures are logged; lookups will retry the token on demand.
        """
        await self._ensure_token()

    async def close(self) -> None:
        """Release the provider clients."""
        await self._api.close()
        await self._scraper.close()

    async def __aenter__(self) -> SpotifyExtractor:
        await self.activate()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()

    # ============================================================================
    # PUBLIC API - Classification
    # ============================================================================

    def validate(self, query: str, query_type: QueryType | str) -> bool:
        """Whether this extractor can handle a query type."""
        return query_type in SUPPORTED_QUERY_TYPES

    def parse(self, query: str) -> ParsedQuery:
        """Classify a query against the Spotify link grammar."""
        return parse_query(query)

    def resolve_query_type(
        self, query: str, query_type: QueryType = QueryType.AUTO
    ) -> QueryType:
        """Turn AUTO into a concrete query type.

        A Spotify link maps to the lookup for its kind. Anything else,
        including plain text, is a search.
        """
        if query_type is not QueryType.AUTO:
            return query_type
        parsed = self.parse(query)
        if parsed.is_match and parsed.kind is not None:
            return parsed.kind.query_type
        return QueryType.AUTO

    # ============================================================================
    # PUBLIC API - Resolution
    # ============================================================================

    async def handle(
        self,
        query: str,
        query_type: QueryType | str = QueryType.AUTO,
        requested_by: Any = None,
    ) -> ExtractorResult:
        """Resolve a query into tracks and, for collections, a playlist.

        Args:
            query: Spotify link, URI, or free-text search.
            query_type: How to resolve the query.
            requested_by: Opaque requester identity copied onto every track.

        Returns:
            The resolved result. Empty when nothing was found or every
            provider failed.
        """
        if not self.validate(query, query_type):
            logger.debug("Unsupported query type: %s", query_type)
            return ExtractorResult()

        query_type = self.resolve_query_type(query, QueryType(query_type))
        context = NormalizeContext(query, query_type, requested_by)

        if query_type.is_search:
            return await self._search(query, context)
        return await self._resolve_entity(
            query, _KIND_BY_QUERY_TYPE[query_type], context
        )

    async def search(self, query: str, requested_by: Any = None) -> ExtractorResult:
        """Search Spotify tracks. There is no fallback for searches."""
        context = NormalizeContext(query, QueryType.SPOTIFY_SEARCH, requested_by)
        return await self._search(query, context)

    async def get_related_tracks(self, track: Track) -> ExtractorResult:
        """Find tracks related to a track by searching its artist."""
        author = track.author if track.author != UNKNOWN_ARTIST else ""
        return await self.search(author or track.title, track.requested_by)

    async def stream(self, track: Track) -> PlayableHandle:
        """Bridge a track to a playable handle.

        Raises:
            BridgeError: If the track can't be bridged.
            StreamError: If the bridged URL can't be streamed.
        """
        logger.debug("Streaming '%s' (%s)", track.title, track.url)
        return await self._bridge.stream(track)

    # ============================================================================
    # PIPELINE
    # ============================================================================

    async def _ensure_token(self) -> bool:
        """Refresh the access token if needed.

        Returns:
            Whether the primary client is usable.
        """
        if not self._api.enabled:
            return False
        if self._api.is_token_expired():
            try:
                await self._api.request_token()
            except TrackBridgeError as e:
                logger.warning("Spotify token refresh failed: %s", e)
                return False
        return True

    async def _search(self, query: str, context: NormalizeContext) -> ExtractorResult:
        if not await self._ensure_token():
            logger.debug("Primary client unavailable, search skipped")
            return ExtractorResult()
        try:
            songs = await self._api.search(query)
        except Exception as e:
            logger.warning("Spotify search failed for '%s': %s", query, e)
            return ExtractorResult()
        if not songs:
            logger.debug("No search results for '%s'", query)
            return ExtractorResult()
        return self._normalizer.normalize(PrimaryPayload(songs), context)

    async def _resolve_entity(
        self, query: str, kind: EntityKind, context: NormalizeContext
    ) -> ExtractorResult:
        parsed = self.parse(query)
        if parsed.is_match and parsed.kind is kind and parsed.id:
            payload = await self._fetch_primary(kind, parsed.id)
            if payload:
                return self._normalizer.normalize(PrimaryPayload(payload), context)
            logger.info("Web API had no %s %s, trying embed page", kind, parsed.id)

        try:
            entity = await self._scraper.fetch_by_url(query)
        except TrackBridgeError as e:
            logger.warning("Embed page fallback failed for '%s': %s", query, e)
            return ExtractorResult()
        return self._normalizer.normalize(FallbackPayload(entity), context)

    async def _fetch_primary(
        self, kind: EntityKind, entity_id: str
    ) -> SongSummary | PlaylistSummary | AlbumSummary | None:
        if not await self._ensure_token():
            return None
        try:
            match kind:
                case EntityKind.TRACK:
                    return await self._api.get_track(entity_id)
                case EntityKind.PLAYLIST:
                    return await self._api.get_playlist(entity_id)
                case EntityKind.ALBUM:
                    return await self._api.get_album(entity_id)
        except Exception as e:
            logger.warning("Web API lookup failed for %s %s: %s", kind, entity_id, e)
        return None
