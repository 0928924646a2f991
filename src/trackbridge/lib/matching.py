"""String matching utilities for picking a bridge candidate.

This module provides fuzzy matching functions used to compare a Spotify
track against YouTube Music search results so the default bridge streams
the closest equivalent recording.

All fuzzy matching logic is encapsulated here - consumers should use the
high-level result types (CandidateMatch, TitleMatchResult,
ArtistMatchResult) rather than working with raw similarity scores and
thresholds directly.
"""

import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass

from rapidfuzz import fuzz

from trackbridge.models.ytmusic import SearchResult

logger = logging.getLogger(__name__)

# ============================================================================
# PRIVATE CONSTANTS - Thresholds and configuration (not exported)
# ============================================================================

# Fuzzy matching thresholds (scale 0-100)
_TITLE_THRESHOLD = 70
_ARTIST_THRESHOLD = 70
_CONFIDENT_SCORE = 60  # Combined score below this is logged as low confidence

# Combined score weights
_TITLE_WEIGHT = 0.6
_ARTIST_WEIGHT = 0.3
_DURATION_WEIGHT = 0.1

# Duration difference (seconds) at which the duration score reaches 0
_DURATION_TOLERANCE_SECONDS = 30

# Common video suffixes to strip when comparing titles (case-insensitive)
_VIDEO_SUFFIXES = (
    "(official video)",
    "(official music video)",
    "(official audio)",
    "(official lyric video)",
    "(official visualizer)",
    "(music video)",
    "(lyric video)",
    "(lyrics)",
    "(visualizer)",
    "(audio)",
    "(video)",
)


# ============================================================================
# RESULT DATACLASSES - Encapsulate match results with context
# ============================================================================


@dataclass(frozen=True)
class TitleMatchResult:
    """Result of comparing two track titles.

    Attributes:
        similarity: Full title similarity score (0-100).
        base_similarity: Base title similarity (without parenthetical content).
        is_good_match: Whether either similarity exceeds the title threshold.
    """

    similarity: float
    base_similarity: float
    is_good_match: bool

    @property
    def best(self) -> float:
        """Higher of the full and base similarity."""
        return max(self.similarity, self.base_similarity)


@dataclass(frozen=True)
class ArtistMatchResult:
    """Result of comparing artist sets.

    Attributes:
        best_score: Highest similarity score among all artist pairs.
        is_good_match: Whether any artist pair exceeds the threshold.
    """

    best_score: float
    is_good_match: bool


@dataclass(frozen=True)
class CandidateMatch:
    """A search result scored against the track being bridged.

    Attributes:
        result: The YouTube Music search result.
        score: Weighted combined score (0-100).
        title_match: Details about the title match.
        artist_match: Details about the artist match.
        is_confident: Whether the score exceeds the confidence threshold.
    """

    result: SearchResult
    score: float
    title_match: TitleMatchResult
    artist_match: ArtistMatchResult
    is_confident: bool


# ============================================================================
# PUBLIC API - High-level matching functions
# ============================================================================


def normalize_title(title: str) -> str:
    """Lowercase a title and strip one common video suffix."""
    normalized = title.lower().strip()
    for suffix in _VIDEO_SUFFIXES:
        if normalized.endswith(suffix):
            normalized = normalized[: -len(suffix)].strip()
            break  # Only strip one suffix
    return normalized


def extract_base_title(title: str) -> str:
    """Remove all parenthetical and bracketed content from a title.

    "neverender (feat. tame impala)" and "neverender [radio edit]" both
    have base title "neverender".
    """
    base = re.sub(r"\s*\([^)]*\)\s*", " ", title)
    base = re.sub(r"\s*\[[^\]]*\]\s*", " ", base)
    # Spotify marks versions with " - Remastered 2011" style suffixes
    base = re.sub(r"\s+-\s+.*$", "", base)
    return base.strip()


def match_title(target: str, candidate: str) -> TitleMatchResult:
    """Compare two track titles, with and without parenthetical content."""
    target_normalized = normalize_title(target)
    candidate_normalized = normalize_title(candidate)

    similarity = fuzz.ratio(target_normalized, candidate_normalized)

    target_base = extract_base_title(target_normalized)
    candidate_base = extract_base_title(candidate_normalized)
    base_similarity = (
        fuzz.ratio(target_base, candidate_base)
        if target_base and candidate_base
        else similarity
    )

    return TitleMatchResult(
        similarity=similarity,
        base_similarity=base_similarity,
        is_good_match=max(similarity, base_similarity) >= _TITLE_THRESHOLD,
    )


def _normalize_artists(artists: Iterable[str]) -> frozenset[str]:
    """Normalize artist names to a lowercase string set."""
    return frozenset(name for a in artists if a and (name := a.lower().strip()))


def match_artists(
    target_artists: Iterable[str], candidate_artists: Iterable[str]
) -> ArtistMatchResult:
    """Find the best fuzzy match between any pair of artists."""
    target_set = _normalize_artists(target_artists)
    candidate_set = _normalize_artists(candidate_artists)

    best_score = max(
        (fuzz.ratio(t, c) for t in target_set for c in candidate_set),
        default=0.0,
    )

    return ArtistMatchResult(
        best_score=best_score,
        is_good_match=best_score >= _ARTIST_THRESHOLD,
    )


def score_duration(target_ms: int, candidate_seconds: int | None) -> float:
    """Score how close two durations are (0-100).

    Unknown durations score a neutral 50.
    """
    if target_ms <= 0 or candidate_seconds is None:
        return 50.0
    diff = abs(target_ms / 1000 - candidate_seconds)
    return max(0.0, 100.0 * (1 - diff / _DURATION_TOLERANCE_SECONDS))


def rank_candidates(
    title: str,
    artists: list[str],
    duration_ms: int,
    results: list[SearchResult],
) -> list[CandidateMatch]:
    """Score search results against a track, best first.

    Ties keep the search engine's order.
    """
    matches: list[CandidateMatch] = []
    for result in results:
        title_match = match_title(title, result.title)
        artist_match = match_artists(artists, [a.name for a in result.artists])
        score = (
            _TITLE_WEIGHT * title_match.best
            + _ARTIST_WEIGHT * artist_match.best_score
            + _DURATION_WEIGHT * score_duration(duration_ms, result.duration_seconds)
        )
        matches.append(
            CandidateMatch(
                result=result,
                score=score,
                title_match=title_match,
                artist_match=artist_match,
                is_confident=score >= _CONFIDENT_SCORE,
            )
        )
    return sorted(matches, key=lambda m: m.score, reverse=True)


def find_best_candidate(
    title: str,
    artists: list[str],
    duration_ms: int,
    results: list[SearchResult],
) -> CandidateMatch | None:
    """Pick the best search result for a track.

    Note: Returns the best result even when it's not confident, because
    streaming something close beats not streaming at all. Callers should
    log based on ``is_confident``.

    Returns:
        The best CandidateMatch, or None if there are no results.
    """
    ranked = rank_candidates(title, artists, duration_ms, results)
    if not ranked:
        return None
    best = ranked[0]
    logger.debug(
        "Best candidate for '%s': '%s' (score=%.1f, title=%.1f, artist=%.1f)",
        title,
        best.result.title,
        best.score,
        best.title_match.best,
        best.artist_match.best_score,
    )
    return best
