"""Duration formatting."""

import math
from typing import NamedTuple


class TimeData(NamedTuple):
    """Duration split into calendar units."""

    days: int
    hours: int
    minutes: int
    seconds: int


def parse_ms(milliseconds: object) -> TimeData:
    """Split a millisecond duration into days, hours, minutes and seconds.

    Total: non-numeric input (including None, bools and NaN) counts as 0,
    negative durations clamp to 0 and fractional values are floored.
    """
    if isinstance(milliseconds, bool) or not isinstance(milliseconds, int | float):
        ms = 0
    elif isinstance(milliseconds, float) and not math.isfinite(milliseconds):
        ms = 0
    else:
        ms = max(0, math.floor(milliseconds))

    total_seconds = ms // 1000
    return TimeData(
        days=total_seconds // 86400,
        hours=total_seconds // 3600 % 24,
        minutes=total_seconds // 60 % 60,
        seconds=total_seconds % 60,
    )


def build_time_code(data: TimeData) -> str:
    """Render a duration as a zero-padded timecode.

    Leading zero units are dropped; short results keep a ``0:`` minutes
    prefix. Examples: ``0:00``, ``0:05``, ``01:05``, ``01:02:03``,
    ``01:00:00:00``.
    """
    units = list(data)
    first = next((i for i, value in enumerate(units) if value != 0), len(units) - 1)
    code = ":".join(f"{value:02d}" for value in units[first:])
    if len(code) <= 3:
        return f"0:{code}"
    return code


def format_duration(milliseconds: object) -> str:
    """Format milliseconds as a timecode string. Never raises."""
    return build_time_code(parse_ms(milliseconds))
