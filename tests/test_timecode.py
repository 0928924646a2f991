"""Tests for duration formatting."""

import math

import pytest
from trackbridge.utils.timecode import (
    TimeData,
    build_time_code,
    format_duration,
    parse_ms,
)


class TestParseMs:
    """Tests for parse_ms."""

    def test_splits_units(self) -> None:
        """Should split into days, hours, minutes and seconds."""
        ms = ((1 * 24 + 2) * 3600 + 3 * 60 + 4) * 1000
        assert parse_ms(ms) == TimeData(days=1, hours=2, minutes=3, seconds=4)

    def test_floors_fractional_values(self) -> None:
        assert parse_ms(1999.9) == TimeData(0, 0, 0, 1)

    @pytest.mark.parametrize(
        "value",
        [-5000, None, "320357", math.nan, math.inf, True, object()],
        ids=["negative", "none", "string", "nan", "inf", "bool", "object"],
    )
    def test_invalid_input_is_zero(self, value: object) -> None:
        """Should never raise; invalid input counts as zero."""
        assert parse_ms(value) == TimeData(0, 0, 0, 0)


class TestBuildTimeCode:
    """Tests for timecode rendering."""

    @pytest.mark.parametrize(
        ("ms", "expected"),
        [
            (0, "0:00"),
            (999, "0:00"),
            (5000, "0:05"),
            (59000, "0:59"),
            (65000, "01:05"),
            (320357, "05:20"),
            (3723000, "01:02:03"),
            (86400000, "01:00:00:00"),
        ],
    )
    def test_format(self, ms: int, expected: str) -> None:
        assert build_time_code(parse_ms(ms)) == expected

    def test_negative_duration_is_zero_timecode(self) -> None:
        assert format_duration(-1) == "0:00"

    def test_keeps_inner_zero_units(self) -> None:
        """Only leading zero units are dropped."""
        assert build_time_code(TimeData(0, 1, 0, 5)) == "01:00:05"
