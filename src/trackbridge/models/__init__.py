"""Data models for trackbridge.

Public API:
    Track, Playlist, PlaylistAuthor - Canonical resolved entities
    TrackMetadata - Envelope holding the provider payload and bridge data
    ExtractorResult - Outcome of a resolution call
    QueryType, EntityKind, PlaylistType - Enumerations

Internal (not exported):
    spotify.py - Models for parsing Web API and embed page payloads
    lazy.py - Deferred value cell backing Track.request_metadata()
"""

from trackbridge.models.enums import EntityKind, PlaylistType, QueryType
from trackbridge.models.track import (
    ExtractorResult,
    Playlist,
    PlaylistAuthor,
    Track,
    TrackMetadata,
)

__all__ = [
    "EntityKind",
    "ExtractorResult",
    "Playlist",
    "PlaylistAuthor",
    "PlaylistType",
    "QueryType",
    "Track",
    "TrackMetadata",
]
