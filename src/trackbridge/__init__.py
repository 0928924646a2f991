"""trackbridge - Resolve Spotify queries into playable tracks.

This library classifies Spotify links, resolves them through the Spotify
Web API with a fallback to public embed pages, normalizes everything into
one Track/Playlist model, and bridges tracks to playable streams (by
default through YouTube Music and yt-dlp).

Designed for use as a library in music bots and players, with a CLI for
debugging and development.

Examples:
    Resolve a playlist:
    ```python
    from trackbridge import create_extractor

    async with create_extractor() as extractor:
        result = await extractor.handle("https://open.spotify.com/playlist/...")
        for track in result.tracks:
            print(f"{track.author} - {track.title} ({track.duration})")
    ```

    Stream a track:
    ```python
    async with create_extractor() as extractor:
        result = await extractor.handle("spotify:track:4uLU6hMCjMI75M1A2tKUQC")
        url = await extractor.stream(result.tracks[0])
    ```
"""

from trackbridge.config import APIConfig, BridgeConfig, SpotifySettings
from trackbridge.exceptions import (
    APIError,
    AuthenticationError,
    BridgeError,
    NoBridgeCandidateError,
    QueryParseError,
    ScraperError,
    StreamError,
    TrackBridgeError,
)
from trackbridge.models.enums import EntityKind, PlaylistType, QueryType
from trackbridge.models.track import (
    ExtractorResult,
    Playlist,
    PlaylistAuthor,
    Track,
    TrackMetadata,
)
from trackbridge.services import (
    BridgeData,
    BridgeProvider,
    PlayableHandle,
    SpotifyExtractor,
)
from trackbridge.services.bridge import CreateStreamFn
from trackbridge.utils.url import ParsedQuery, parse_query


def create_extractor(
    *,
    client_id: str | None = None,
    client_secret: str | None = None,
    create_stream: CreateStreamFn | None = None,
    bridge_provider: BridgeProvider | None = None,
    api_config: APIConfig | None = None,
    bridge_config: BridgeConfig | None = None,
) -> SpotifyExtractor:
    """Create a configured Spotify extractor.

    This is the recommended way to create an extractor for library usage.
    It handles client instantiation internally.

    Args:
        client_id: Spotify client ID. Falls back to
            ``TRACKBRIDGE_SPOTIFY_CLIENT_ID``.
        client_secret: Spotify client secret. Falls back to
            ``TRACKBRIDGE_SPOTIFY_CLIENT_SECRET``.
        create_stream: Optional stream function receiving
            ``(extractor, url)``.
        bridge_provider: Optional playback backend. Overrides
            ``create_stream`` and the default YouTube Music bridge.
        api_config: Optional HTTP configuration. Uses defaults if not provided.
        bridge_config: Optional bridge configuration. Uses defaults if not
            provided.

    Returns:
        A configured SpotifyExtractor instance.

    Examples:
        Credentials from the environment:
        ```python
        extractor = create_extractor()
        ```

        With a custom stream function:
        ```python
        async def create_stream(extractor, url):
            return await my_player.open(url)

        extractor = create_extractor(create_stream=create_stream)
        ```
    """
    return SpotifyExtractor(
        client_id=client_id,
        client_secret=client_secret,
        create_stream=create_stream,
        bridge_provider=bridge_provider,
        api_config=api_config,
        bridge_config=bridge_config,
    )


__all__ = [
    "APIConfig",
    "APIError",
    "AuthenticationError",
    "BridgeConfig",
    "BridgeData",
    "BridgeError",
    "BridgeProvider",
    "EntityKind",
    "ExtractorResult",
    "NoBridgeCandidateError",
    "ParsedQuery",
    "PlayableHandle",
    "Playlist",
    "PlaylistAuthor",
    "PlaylistType",
    "QueryParseError",
    "QueryType",
    "ScraperError",
    "SpotifyExtractor",
    "SpotifySettings",
    "StreamError",
    "Track",
    "TrackBridgeError",
    "TrackMetadata",
    "create_extractor",
    "parse_query",
]
