"""Custom exceptions for trackbridge.

All exceptions include an HTTP status_code attribute for easy
integration with web frameworks like FastAPI.

Only the bridge errors are expected to reach callers of the extractor.
Provider errors (API, scraper, authentication) are raised internally and
recovered by the resolution pipeline, which turns them into empty results.
"""


class TrackBridgeError(Exception):
    """Base exception for trackbridge.

    Attributes:
        status_code: HTTP status code for API error responses.
    """

    status_code: int = 500

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class QueryParseError(TrackBridgeError):
    """Failed to extract an entity kind and ID from a query.

    Raised by the scraper when neither the strict link grammar nor the
    lenient search finds a track, playlist or album reference.
    """

    status_code: int = 400  # Bad Request


class AuthenticationError(TrackBridgeError):
    """Failed to obtain an access token for the Spotify Web API."""

    status_code: int = 401  # Unauthorized


class APIError(TrackBridgeError):
    """Spotify Web API error.

    Raised when a request fails at the transport level, returns a non-2xx
    status, or returns a body that doesn't match the expected shape.
    """

    status_code: int = 502  # Bad Gateway (upstream failure)


class ScraperError(TrackBridgeError):
    """Failed to scrape an entity from a Spotify embed page."""

    status_code: int = 502  # Bad Gateway (upstream failure)


class BridgeError(TrackBridgeError):
    """Failed to bridge a track to a playable stream.

    Raised when the configured bridge provider can't resolve the track.
    """

    status_code: int = 502  # Bad Gateway (upstream failure)


class NoBridgeCandidateError(BridgeError):
    """The bridge search found no equivalent track.

    The track can't be played: there is no further fallback.
    """

    status_code: int = 404  # Not Found


class StreamError(TrackBridgeError):
    """Failed to open a stream for a bridged URL.

    Raised when yt-dlp can't extract a playable audio URL.
    """

    status_code: int = 502  # Bad Gateway (upstream failure)
