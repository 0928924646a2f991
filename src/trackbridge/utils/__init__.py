"""Utility functions for trackbridge.

Available via `from trackbridge.utils import ...` for power users.
Not re-exported at the top-level `trackbridge` package.
"""

from trackbridge.utils.timecode import build_time_code, format_duration, parse_ms
from trackbridge.utils.url import (
    ParsedQuery,
    build_entity_url,
    entity_id_from_uri,
    find_entity_ref,
    is_youtube_url,
    parse_query,
    parse_video_id,
)

__all__ = [
    "ParsedQuery",
    "build_entity_url",
    "build_time_code",
    "entity_id_from_uri",
    "find_entity_ref",
    "format_duration",
    "is_youtube_url",
    "parse_ms",
    "parse_query",
    "parse_video_id",
]
