"""Configuration for trackbridge."""

from dataclasses import dataclass

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36"
)


class SpotifySettings(BaseSettings):
    """Spotify Web API credentials.

    Read from ``TRACKBRIDGE_SPOTIFY_CLIENT_ID`` and
    ``TRACKBRIDGE_SPOTIFY_CLIENT_SECRET`` (or a ``.env`` file) unless passed
    explicitly. Missing credentials disable the primary client instead of
    failing.
    """

    model_config = SettingsConfigDict(
        env_prefix="TRACKBRIDGE_SPOTIFY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    client_id: str | None = Field(default=None, description="Client ID")
    client_secret: str | None = Field(default=None, description="Client secret")

    @property
    def has_credentials(self) -> bool:
        """Whether both client ID and secret are set."""
        return bool(self.client_id and self.client_secret)


@dataclass(frozen=True)
class APIConfig:
    """HTTP configuration shared by the Spotify API client and scraper.

    Attributes:
        market: Market code sent with catalog requests.
        timeout: Request timeout in seconds.
        user_agent: User-Agent header for all requests.
        max_pages: Maximum number of pagination requests per collection.
    """

    market: str = "US"
    timeout: float = 30.0
    user_agent: str = DEFAULT_USER_AGENT
    max_pages: int = 50


@dataclass(frozen=True)
class BridgeConfig:
    """YouTube Music bridge configuration.

    Attributes:
        search_limit: Maximum number of search results to rank.
        ignore_spelling: Whether to ignore spelling in search queries.
        quiet: Suppress yt-dlp output.
        audio_format: yt-dlp format selector for the stream URL.
    """

    search_limit: int = 5
    ignore_spelling: bool = True
    quiet: bool = True
    audio_format: str = "bestaudio/best"
