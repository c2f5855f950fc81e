"""Tests for hud/timeutil.py - duration and countdown formatting."""

import sys
from pathlib import Path

import pytest

# Add scripts to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "scripts"))

from hud.timeutil import format_duration, format_time_until


class TestFormatDuration:
    """Tests for format_duration function."""

    @pytest.mark.parametrize(
        "ms, expected",
        [
            (0, "0s"),
            (5000, "5s"),
            (60_000, "1m"),
            (65_000, "1m 5s"),
            (3_600_000, "1h"),
            (3_665_000, "1h 1m"),
            (86_400_000, "1d"),
            (90_000_000, "1d 1h"),
            (-500, "0s"),
        ],
    )
    def test_format(self, ms: int, expected: str) -> None:
        """Test compact duration strings."""
        assert format_duration(ms) == expected


class TestFormatTimeUntil:
    """Tests for format_time_until function."""

    def test_past_is_expired(self) -> None:
        assert format_time_until("2000-01-01T00:00:00Z") == "expired"

    def test_unparseable(self) -> None:
        assert format_time_until("soon") is None
        assert format_time_until(None) is None

    def test_future(self) -> None:
        assert "d" in format_time_until("2999-01-01T00:00:00+00:00")
