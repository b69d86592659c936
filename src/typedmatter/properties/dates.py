"""Recognition of common textual date/time layouts."""

from __future__ import annotations

import re
from datetime import datetime, timezone

_COMPACT_LAYOUTS = {
    8: "%Y%m%d",
    14: "%Y%m%d%H%M%S",
}

# Tried in order after ISO 8601 parsing fails.
_LAYOUTS = (
    "%Y-%m-%d %H:%M:%S %z",
    "%Y-%m-%d %H:%M:%S %Z",
    "%Y-%m-%d %H:%M %z",
    "%Y/%m/%d",
    "%Y/%m/%d %H:%M",
    "%Y/%m/%d %H:%M:%S",
    "%m/%d/%Y",
    "%m/%d/%Y %H:%M",
    "%m/%d/%Y %H:%M:%S",
    "%m/%d/%Y %I:%M %p",
    "%m/%d/%Y %I:%M:%S %p",
    "%d.%m.%Y",
    "%d-%b-%Y",
    "%d %B %Y",
    "%d %b %Y",
    "%B %d, %Y",
    "%b %d, %Y",
    "%B %d %Y",
    "%b %d %Y",
    "%a, %d %b %Y %H:%M:%S %z",
    "%a, %d %b %Y %H:%M:%S %Z",
    "%d %b %y %H:%M %z",
    "%a %b %d %H:%M:%S %Y",
    "%a %b %d %H:%M:%S %z %Y",
    "%a %b %d %H:%M:%S %Z %Y",
)

_UNSIGNED_OFFSET = re.compile(r"Z(\d{2}:?\d{2})\Z")


def _with_zone(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment


def parse_datetime(text: str) -> datetime:
    """Parse ``text`` as a date/time in any of the commonly used layouts.

    ISO 8601 (including a trailing ``Z``) is tried first, followed by a fixed
    list of RFC and US/European layouts. Strings made only of digits are dates
    solely in the compact ``YYYYMMDD`` and ``YYYYMMDDhhmmss`` forms, so plain
    numbers such as ``"221"`` are left for integer parsing. Results without a
    zone are placed in UTC.

    Args:
        text: Raw text to interpret.

    Returns:
        datetime: Timezone-aware timestamp.

    Raises:
        ValueError: If no layout matches.
    """
    candidate = text.strip()
    if not candidate:
        raise ValueError("empty date/time text")

    if candidate.isascii() and candidate.isdigit():
        layout = _COMPACT_LAYOUTS.get(len(candidate))
        if layout is None:
            raise ValueError(f"{text!r} is a number, not a date/time")
        return _with_zone(datetime.strptime(candidate, layout))

    iso_candidate = _UNSIGNED_OFFSET.sub(r"+\1", candidate)
    if iso_candidate.endswith(("Z", "z")):
        iso_candidate = iso_candidate[:-1] + "+00:00"
    try:
        return _with_zone(datetime.fromisoformat(iso_candidate))
    except ValueError:
        pass

    for layout in _LAYOUTS:
        try:
            return _with_zone(datetime.strptime(candidate, layout))
        except ValueError:
            continue

    raise ValueError(f"unrecognized date/time text: {text!r}")


__all__ = ["parse_datetime"]
