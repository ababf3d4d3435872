"""General utility helpers shared across modules."""

from __future__ import annotations

import re
from datetime import datetime, timezone

_RFC3339 = re.compile(
    r"(?P<date>\d{4}-\d{2}-\d{2})[Tt ](?P<time>\d{2}:\d{2}:\d{2})"
    r"(?:\.(?P<fraction>\d+))?(?P<offset>[Zz]|[+-]\d{2}:\d{2})?"
)


def is_aware(value: datetime) -> bool:
    """Return True when ``value`` carries a usable UTC offset."""

    return value.tzinfo is not None and value.utcoffset() is not None


def parse_timestamp(text: str) -> datetime:
    """Parse an RFC 3339 timestamp into a timezone-aware datetime.

    Accepts ``T``, ``t`` or a space between date and time, any number of
    fraction digits (truncated to microseconds) and ``Z``/``z`` for UTC.
    Values without an offset are rejected because the sample instant would
    be ambiguous.

    Raises:
        ValueError: If the text is blank, malformed or has no offset.
    """

    candidate = text.strip()
    if not candidate:
        raise ValueError("Timestamp is blank")
    match = _RFC3339.fullmatch(candidate)
    if match is None:
        raise ValueError(f"Invalid RFC 3339 timestamp: {text!r}")
    offset = match["offset"]
    if offset is None:
        raise ValueError(f"Timestamp has no UTC offset: {text!r}")
    if offset in ("Z", "z"):
        offset = "+00:00"
    fraction = ""
    if match["fraction"]:
        fraction = "." + match["fraction"][:6].ljust(6, "0")
    try:
        return datetime.fromisoformat(f"{match['date']}T{match['time']}{fraction}{offset}")
    except ValueError as exc:
        raise ValueError(f"Invalid RFC 3339 timestamp: {text!r}") from exc


def utc_date_string(value: datetime) -> str:
    """Format the UTC calendar date of ``value`` as ``YYYY-MM-DD``."""

    if not is_aware(value):
        raise ValueError(f"Timestamp is not timezone-aware: {value!r}")
    return value.astimezone(timezone.utc).date().isoformat()
