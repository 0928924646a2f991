"""URL parsing utilities."""

import re
from dataclasses import dataclass
from urllib.parse import urlparse

from trackbridge.models.enums import EntityKind

DEFAULT_SERVICE = "spotify"

# https://open.<svc>.com/[intl-xx/][user/<name>/]<kind>/<id> or spotify:<kind>:<id>
_QUERY_PATTERN = re.compile(
    r"^(?:https://open\.(?P<host>[a-z0-9-]+)\.com/"
    r"(?:intl-[A-Za-z]{0,3}/)?"
    r"(?:user/[A-Za-z0-9._-]+/)?"
    rf"|(?P<scheme>{DEFAULT_SERVICE}):)"
    r"(?P<kind>album|playlist|track)[/:](?P<id>[A-Za-z0-9]+).*$"
)

# Lenient reference search used when the strict grammar fails
_ENTITY_REF_PATTERN = re.compile(r"(album|playlist|track)[/:]([A-Za-z0-9]+)")

VIDEO_ID_PATTERN = re.compile(r"[?&]v=([A-Za-z0-9_-]+)")

# Path-based video ID patterns (youtu.be, shorts, live, embed)
_PATH_VIDEO_ID_PATTERN = re.compile(r"^/(?:shorts|live|embed|e|v|vi)/([A-Za-z0-9_-]+)")

# Recognized YouTube hostnames for video ID extraction
_YOUTUBE_HOSTS = {
    "youtube.com",
    "www.youtube.com",
    "m.youtube.com",
    "music.youtube.com",
    "youtube-nocookie.com",
    "www.youtube-nocookie.com",
}

YOUTUBE_MUSIC_WATCH_URL = "https://music.youtube.com/watch?v={video_id}"

# Maximum URL length to prevent potential abuse (standard browser limit)
MAX_URL_LENGTH = 2048


@dataclass(frozen=True)
class ParsedQuery:
    """Classification of a query string.

    All fields are None when the query is not a structured link. That is
    a normal outcome, not an error.

    Attributes:
        kind: Entity kind the link points to.
        id: Opaque entity ID.
        service: Service name taken from the host or URI scheme.
    """

    kind: EntityKind | None = None
    id: str | None = None
    service: str | None = None

    @property
    def is_match(self) -> bool:
        """Whether the query matched the link grammar."""
        return self.kind is not None and self.id is not None


def parse_query(query: str) -> ParsedQuery:
    """Classify a query against the link grammar.

    Accepts ``https://open.<service>.com/<kind>/<id>`` links, optionally
    with an ``intl-xx/`` locale segment and a ``user/<name>/`` segment, and
    ``<service>:<kind>:<id>`` URIs. Never touches the network.

    Args:
        query: Raw user input.

    Returns:
        ParsedQuery with kind and ID, or an empty ParsedQuery on no match.
    """
    if not query or len(query) > MAX_URL_LENGTH:
        return ParsedQuery()
    match = _QUERY_PATTERN.match(query)
    if not match:
        return ParsedQuery()
    return ParsedQuery(
        kind=EntityKind(match.group("kind")),
        id=match.group("id"),
        service=match.group("host") or match.group("scheme"),
    )


def find_entity_ref(text: str) -> ParsedQuery:
    """Find a ``<kind>/<id>`` or ``<kind>:<id>`` reference anywhere in text.

    Looser than ``parse_query``: tolerates unknown hosts, embed URLs and
    surrounding text. The strict grammar is tried first.
    """
    parsed = parse_query(text)
    if parsed.is_match or not text or len(text) > MAX_URL_LENGTH:
        return parsed
    if match := _ENTITY_REF_PATTERN.search(text):
        return ParsedQuery(kind=EntityKind(match.group(1)), id=match.group(2))
    return ParsedQuery()


def entity_id_from_uri(uri: str | None) -> str | None:
    """Extract the ID from a ``spotify:track:<id>`` style URI."""
    if not uri:
        return None
    return parse_query(uri).id


def build_entity_url(
    kind: EntityKind, entity_id: str, service: str = DEFAULT_SERVICE
) -> str:
    """Build the canonical open.<service>.com URL for an entity."""
    return f"https://open.{service}.com/{kind.value}/{entity_id}"


def parse_video_id(url: str | None) -> str | None:
    """Extract a video ID from a YouTube or YouTube Music URL.

    Supports watch URLs (v= parameter), youtu.be short URLs and path-based
    formats (/shorts/, /live/, /embed/, /e/, /v/, /vi/).

    Returns:
        The video ID, or None if the URL isn't a YouTube video URL.
    """
    if not url or len(url) > MAX_URL_LENGTH:
        return None

    parsed = urlparse(url)
    host = parsed.hostname or ""
    path = parsed.path or ""

    # youtu.be/VIDEO_ID
    if host == "youtu.be" and len(path) > 1:
        video_id = path.split("/")[1]
        return video_id if re.fullmatch(r"[A-Za-z0-9_-]+", video_id) else None

    if host not in _YOUTUBE_HOSTS:
        return None

    if path == "/watch" and (match := VIDEO_ID_PATTERN.search(f"?{parsed.query}")):
        return match.group(1)

    if match := _PATH_VIDEO_ID_PATTERN.match(path):
        return match.group(1)

    return None


def is_youtube_url(url: str | None) -> bool:
    """Check if a URL can be streamed directly without bridging."""
    return parse_video_id(url) is not None
