"""Tests for textual date/time recognition."""

from datetime import datetime, timedelta, timezone

import pytest

from typedmatter.properties import parse_datetime


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("2006-01-02", datetime(2006, 1, 2, tzinfo=timezone.utc)),
        ("2006-01-02T15:04:05Z", datetime(2006, 1, 2, 15, 4, 5, tzinfo=timezone.utc)),
        ("2006-01-02 15:04:05", datetime(2006, 1, 2, 15, 4, 5, tzinfo=timezone.utc)),
        ("20060102", datetime(2006, 1, 2, tzinfo=timezone.utc)),
        ("20060102150405", datetime(2006, 1, 2, 15, 4, 5, tzinfo=timezone.utc)),
        ("01/02/2006", datetime(2006, 1, 2, tzinfo=timezone.utc)),
        ("2 January 2006", datetime(2006, 1, 2, tzinfo=timezone.utc)),
        ("Jan 2, 2006", datetime(2006, 1, 2, tzinfo=timezone.utc)),
    ],
)
def test_parse_datetime_common_layouts(text: str, expected: datetime) -> None:
    assert parse_datetime(text) == expected


def test_parse_datetime_unsigned_offset_after_z() -> None:
    parsed = parse_datetime("2006-01-02T15:04:05Z07:00")

    assert parsed.utcoffset() == timedelta(hours=7)
    assert parsed.hour == 15


def test_parse_datetime_keeps_explicit_offset() -> None:
    parsed = parse_datetime("Mon, 02 Jan 2006 15:04:05 -0700")

    assert parsed.utcoffset() == timedelta(hours=-7)


@pytest.mark.parametrize("text", ["221", "2006", "", "   ", "test description", "true"])
def test_parse_datetime_rejects_non_dates(text: str) -> None:
    with pytest.raises(ValueError):
        parse_datetime(text)
