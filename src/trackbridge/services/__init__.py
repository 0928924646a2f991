"""Business logic services for trackbridge.

Public API:
    SpotifyExtractor - Resolve Spotify queries into tracks and playlists

Protocols (for dependency injection):
    PrimaryClientProtocol - Web API client abstraction
    ScraperProtocol - Embed page scraper abstraction
    BridgeProvider - Caller-supplied playback backend

Internal (not exported):
    SpotifyAPIClient, SpotifyScraper - Production provider clients
    SpotifyTokenManager - Client-credentials token handling
    TrackNormalizer - Payload to Track/Playlist mapping
    YouTubeSearcher, YTDLPStreamer - Default YouTube Music bridge backend
"""

from trackbridge.services.api import PrimaryClientProtocol
from trackbridge.services.bridge import BridgeData, BridgeProvider, PlayableHandle
from trackbridge.services.extractor import SpotifyExtractor
from trackbridge.services.scraper import ScraperProtocol

__all__ = [
    "BridgeData",
    "BridgeProvider",
    "PlayableHandle",
    "PrimaryClientProtocol",
    "ScraperProtocol",
    "SpotifyExtractor",
]
