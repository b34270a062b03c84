"""Unit tests for timestamp helpers."""

from datetime import datetime, timedelta

import pytest

from skillfit.utils.timestamp import format_timestamp


@pytest.mark.unit
def test_absolute():
    """Test ISO timestamps rendered at second precision."""
    assert format_timestamp("2025-11-13T18:45:40.572549") == "2025-11-13 18:45:40"


@pytest.mark.unit
@pytest.mark.parametrize(
    "delta,expected",
    [
        (timedelta(minutes=15, seconds=5), "15m ago"),
        (timedelta(hours=2, minutes=1), "2h ago"),
        (timedelta(days=5, minutes=1), "5d ago"),
    ],
)
def test_relative(delta, expected):
    """Test compact relative formatting."""
    stamp = (datetime.now() - delta).isoformat()
    assert format_timestamp(stamp, relative=True) == expected


@pytest.mark.unit
@pytest.mark.parametrize("value", ["not a date", None])
def test_unparseable_returned_unchanged(value):
    """Test that bad input is passed through."""
    assert format_timestamp(value) == value
