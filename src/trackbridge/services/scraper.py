"""Spotify embed page scraper (fallback metadata provider).

Embed pages on open.spotify.com are public and need no token. They carry
the entity as JSON inside the ``__NEXT_DATA__`` script. The scraper
resolves tracks, playlists and albums whose IDs the Web API can't serve.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Protocol

import httpx
from bs4 import BeautifulSoup
from pydantic import ValidationError

from trackbridge.config import APIConfig
from trackbridge.exceptions import QueryParseError, ScraperError
from trackbridge.models.spotify import (
    EmbedAlbum,
    EmbedPlaylist,
    EmbedSong,
    parse_embed_entity,
)
from trackbridge.utils.url import find_entity_ref

logger = logging.getLogger(__name__)

EMBED_URL = "https://open.spotify.com/embed/{kind}/{id}"


class ScraperProtocol(Protocol):
    """Protocol for the fallback metadata provider.

    This protocol enables dependency injection and testing.
    """

    async def fetch_by_url(self, url: str) -> EmbedSong | EmbedPlaylist | EmbedAlbum:
        """Fetch the entity a URL points to.

        Raises:
            ScraperError: If the entity can't be fetched or parsed.
        """
        ...

    async def close(self) -> None:
        """Release network resources."""
        ...


class SpotifyScraper:
    """Production embed page scraper. Implements ScraperProtocol."""

    def __init__(
        self,
        config: APIConfig | None = None,
        http: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the scraper.

        Args:
            config: Optional HTTP configuration. Uses defaults if not provided.
            http: Optional shared HTTP client. Created (and owned) if not
                provided.
        """
        self._config = config or APIConfig()
        self._owns_http = http is None
        self._http = http or httpx.AsyncClient(
            timeout=self._config.timeout,
            headers={"User-Agent": self._config.user_agent},
            follow_redirects=True,
        )

    async def fetch_by_url(self, url: str) -> EmbedSong | EmbedPlaylist | EmbedAlbum:
        """Fetch and parse the entity a URL points to.

        Args:
            url: Spotify link, URI, or any text containing ``<kind>/<id>``.

        Returns:
            Typed embed entity (track, playlist or album).

        Raises:
            QueryParseError: If no entity reference can be found in the URL.
            ScraperError: If the page can't be fetched or parsed.
        """
        ref = find_entity_ref(url)
        if not ref.is_match or ref.kind is None:
            raise QueryParseError(f"Could not extract a Spotify entity from: {url}")

        embed_url = EMBED_URL.format(kind=ref.kind.value, id=ref.id)
        logger.debug("Scraping %s", embed_url)
        try:
            response = await self._http.get(embed_url)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise ScraperError(
                f"Embed page returned {e.response.status_code} for {url}"
            ) from e
        except httpx.HTTPError as e:
            raise ScraperError(f"Embed page request failed: {e}") from e

        entity = self._extract_entity(response.text)
        try:
            return parse_embed_entity(entity)
        except ValidationError as e:
            raise ScraperError(f"Unexpected embed entity for {url}: {e}") from e

    def _extract_entity(self, html: str) -> dict[str, Any]:
        """Pull the entity object out of the page's ``__NEXT_DATA__`` script.

        Raises:
            ScraperError: If the script is missing or has an unexpected shape.
        """
        soup = BeautifulSoup(html, "html.parser")
        script = soup.find("script", id="__NEXT_DATA__")
        if script is None or not script.string:
            raise ScraperError("Embed page has no __NEXT_DATA__ script")

        try:
            data = json.loads(script.string)
            entity = data["props"]["pageProps"]["state"]["data"]["entity"]
        except (ValueError, KeyError, TypeError) as e:
            raise ScraperError(f"Malformed embed data: {e}") from e

        if not isinstance(entity, dict):
            raise ScraperError("Embed data has no entity")
        return entity

    async def close(self) -> None:
        """Close the HTTP client if this instance created it."""
        if self._owns_http:
            await self._http.aclose()
