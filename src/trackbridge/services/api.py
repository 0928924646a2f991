"""Spotify Web API client (primary metadata provider)."""

from __future__ import annotations

import logging
from typing import Any, Protocol

import httpx
from pydantic import ValidationError

from trackbridge.config import APIConfig, SpotifySettings
from trackbridge.exceptions import APIError, TrackBridgeError
from trackbridge.models.enums import EntityKind
from trackbridge.models.spotify import (
    AlbumSummary,
    ApiImage,
    ApiPage,
    ApiSearchResponse,
    ApiTrack,
    PlaylistSummary,
    SongSummary,
)
from trackbridge.services.token import SpotifyTokenManager
from trackbridge.utils.url import build_entity_url

logger = logging.getLogger(__name__)

API_BASE = "https://api.spotify.com/v1"


class PrimaryClientProtocol(Protocol):
    """Protocol for the primary metadata provider.

    This protocol enables dependency injection and testing.
    Implementations never raise from the lookup methods: every failure is
    reported as None.
    """

    @property
    def enabled(self) -> bool:
        """Whether the client can make requests at all."""
        ...

    def is_token_expired(self) -> bool:
        """Whether the access token must be refreshed before use."""
        ...

    async def request_token(self) -> None:
        """Refresh the access token."""
        ...

    async def search(self, query: str) -> list[SongSummary] | None:
        """Search for tracks."""
        ...

    async def get_track(self, track_id: str) -> SongSummary | None:
        """Fetch a track by ID."""
        ...

    async def get_playlist(self, playlist_id: str) -> PlaylistSummary | None:
        """Fetch a playlist with all its tracks."""
        ...

    async def get_album(self, album_id: str) -> AlbumSummary | None:
        """Fetch an album with all its tracks."""
        ...

    async def close(self) -> None:
        """Release network resources."""
        ...


class SpotifyAPIClient:
    """Production Spotify Web API client.

    Wraps api.spotify.com with a client-credentials token and condenses
    responses into summaries. Implements PrimaryClientProtocol.

    Without credentials the client is disabled and every lookup returns
    None without touching the network.
    """

    def __init__(
        self,
        credentials: SpotifySettings | None = None,
        config: APIConfig | None = None,
        http: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            credentials: Client ID and secret. Read from the environment if
                not provided.
            config: Optional HTTP configuration. Uses defaults if not provided.
            http: Optional shared HTTP client. Created (and owned) if not
                provided.
        """
        self._config = config or APIConfig()
        credentials = credentials or SpotifySettings()
        self._owns_http = http is None
        self._http = http or httpx.AsyncClient(
            timeout=self._config.timeout,
            headers={"User-Agent": self._config.user_agent},
        )
        self._tokens = SpotifyTokenManager(
            credentials.client_id, credentials.client_secret, self._http
        )
        if not self.enabled:
            logger.info("No Spotify credentials configured, Web API lookups disabled")

    @property
    def enabled(self) -> bool:
        """Whether client credentials are configured."""
        return self._tokens.enabled

    @property
    def tokens(self) -> SpotifyTokenManager:
        """Token collaborator."""
        return self._tokens

    def is_token_expired(self) -> bool:
        """Whether the access token must be refreshed before use."""
        return self._tokens.is_token_expired()

    async def request_token(self) -> None:
        """Refresh the access token.

        Raises:
            AuthenticationError: If the token endpoint fails.
        """
        await self._tokens.request_token()

    # ============================================================================
    # PUBLIC API - Lookups (never raise)
    # ============================================================================

    async def search(self, query: str) -> list[SongSummary] | None:
        """Search for tracks.

        Returns:
            Matching tracks in relevance order, or None on any failure.
        """
        if not self.enabled or not query.strip():
            return None
        logger.debug("Searching tracks: %s", query)
        try:
            data = await self._get_json(
                f"{API_BASE}/search",
                {"q": query, "type": "track", "market": self._config.market},
            )
            response = ApiSearchResponse.model_validate(data)
            items = response.tracks.items if response.tracks else []
            return self._to_songs(items)
        except (TrackBridgeError, ValidationError) as e:
            logger.warning("Spotify search failed for '%s': %s", query, e)
            return None

    async def get_track(self, track_id: str) -> SongSummary | None:
        """Fetch a track by ID, or None on any failure."""
        if not self.enabled:
            return None
        logger.debug("Fetching track: %s", track_id)
        try:
            data = await self._get_json(
                f"{API_BASE}/tracks/{track_id}", {"market": self._config.market}
            )
            songs = self._to_songs([data])
        except TrackBridgeError as e:
            logger.warning("Spotify track %s failed: %s", track_id, e)
            return None
        return songs[0] if songs else None

    async def get_playlist(self, playlist_id: str) -> PlaylistSummary | None:
        """Fetch a playlist with all pages of tracks.

        Returns:
            The playlist, or None on failure or when it has no playable tracks.
        """
        if not self.enabled:
            return None
        logger.debug("Fetching playlist: %s", playlist_id)
        try:
            data = await self._get_json(
                f"{API_BASE}/playlists/{playlist_id}",
                {"market": self._config.market},
            )
            # Playlist items wrap the track; removed and local tracks are null
            items = await self._collect_pages(data.get("tracks") or {})
            tracks = self._to_songs(
                item.get("track") for item in items if isinstance(item, dict)
            )
            if not tracks:
                logger.debug("Playlist %s has no tracks", playlist_id)
                return None
            return PlaylistSummary(
                name=data["name"],
                author=(data.get("owner") or {}).get("display_name"),
                thumbnail=_first_image(data.get("images")),
                id=data.get("id") or playlist_id,
                url=(data.get("external_urls") or {}).get("spotify")
                or build_entity_url(EntityKind.PLAYLIST, playlist_id),
                tracks=tracks,
            )
        except (
            TrackBridgeError,
            AttributeError,
            KeyError,
            TypeError,
            ValidationError,
        ) as e:
            logger.warning("Spotify playlist %s failed: %s", playlist_id, e)
            return None

    async def get_album(self, album_id: str) -> AlbumSummary | None:
        """Fetch an album with all pages of tracks.

        Album track objects are simplified and carry no images, so every
        track gets the album cover.
        """
        if not self.enabled:
            return None
        logger.debug("Fetching album: %s", album_id)
        try:
            data = await self._get_json(
                f"{API_BASE}/albums/{album_id}", {"market": self._config.market}
            )
            thumbnail = _first_image(data.get("images"))
            items = await self._collect_pages(data.get("tracks") or {})
            tracks = self._to_songs(items, thumbnail=thumbnail)
            if not tracks:
                logger.debug("Album %s has no tracks", album_id)
                return None
            artists = [a["name"] for a in data.get("artists") or [] if a.get("name")]
            return AlbumSummary(
                name=data["name"],
                author=", ".join(artists) or None,
                thumbnail=thumbnail,
                id=data.get("id") or album_id,
                url=(data.get("external_urls") or {}).get("spotify")
                or build_entity_url(EntityKind.ALBUM, album_id),
                tracks=tracks,
            )
        except (
            TrackBridgeError,
            AttributeError,
            KeyError,
            TypeError,
            ValidationError,
        ) as e:
            logger.warning("Spotify album %s failed: %s", album_id, e)
            return None

    async def close(self) -> None:
        """Close the HTTP client if this instance created it."""
        if self._owns_http:
            await self._http.aclose()

    # ============================================================================
    # REQUESTS
    # ============================================================================

    async def _authorization(self) -> str:
        """Return the Authorization header, refreshing the token if expired."""
        if self._tokens.is_token_expired():
            await self._tokens.request_token()
        token = self._tokens.token
        if token is None:
            raise APIError("No access token available")
        return token.authorization

    async def _get_json(
        self, url: str, params: dict[str, Any] | None = None
    ) -> dict[str, Any]:
        """GET a JSON object from the Web API.

        Raises:
            AuthenticationError: If no token can be obtained.
            APIError: On transport errors, non-2xx responses or non-object bodies.
        """
        headers = {"Authorization": await self._authorization()}
        try:
            response = await self._http.get(url, params=params, headers=headers)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            raise APIError(
                f"Spotify API returned {e.response.status_code} for {url}"
            ) from e
        except (httpx.HTTPError, ValueError) as e:
            raise APIError(f"Spotify API request failed: {e}") from e

        if not isinstance(data, dict):
            raise APIError(f"Unexpected response from {url}")
        return data

    async def _collect_pages(self, raw_page: Any) -> list[Any]:
        """Gather items from a paging object, following ``next`` links.

        Raises:
            ValidationError: If the first page isn't a paging object.
        """
        page = ApiPage.model_validate(raw_page or {})
        items = list(page.items)
        pages = 1
        while page.next and pages < self._config.max_pages:
            next_url = page.next
            try:
                page = ApiPage.model_validate(await self._get_json(next_url))
            except (APIError, ValidationError) as e:
                # Keep what we have; a partial collection is still playable
                logger.warning("Stopped paging at %s: %s", next_url, e)
                break
            items.extend(page.items)
            pages += 1
        return items

    def _to_songs(
        self, items: Any, thumbnail: str | None = None
    ) -> list[SongSummary]:
        """Condense track objects into summaries, skipping invalid entries."""
        songs: list[SongSummary] = []
        for item in items:
            if not item:
                continue
            try:
                track = ApiTrack.model_validate(item)
            except ValidationError as e:
                logger.debug("Skipping malformed track object: %s", e)
                continue
            if not track.id:
                # Local files have no ID and can't be bridged reliably
                continue
            artists = [a.name for a in track.artists if a.name]
            songs.append(
                SongSummary(
                    title=track.name,
                    duration=track.duration_ms,
                    artist=", ".join(artists) or None,
                    url=track.external_urls.get("spotify")
                    or build_entity_url(EntityKind.TRACK, track.id),
                    thumbnail=_first_image(track.album.images if track.album else None)
                    or thumbnail,
                )
            )
        return songs


def _first_image(images: Any) -> str | None:
    """Return the first (largest) image URL from a Spotify image list."""
    if not images:
        return None
    first = images[0]
    if isinstance(first, ApiImage):
        return first.url
    if isinstance(first, dict):
        return first.get("url")
    return None
