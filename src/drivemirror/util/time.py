from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Optional


def now_utc() -> datetime:
    return datetime.now(timezone.utc)


def normalize_dt(dt: datetime) -> datetime:
    """Return `dt` in UTC. Naive datetimes are rejected."""
    if not isinstance(dt, datetime):
        raise TypeError("dt must be a datetime")
    if dt.tzinfo is None:
        raise ValueError("naive datetime is not allowed; timezone-aware required")
    return dt.astimezone(timezone.utc)


def parse_rfc3339(value: str) -> datetime:
    """
    Parse a Drive/Firestore RFC3339 timestamp ('2025-01-01T12:34:56.123Z',
    '2025-01-01T12:34:56+09:00') into a UTC datetime.
    """
    if not isinstance(value, str) or not value.strip():
        raise ValueError("RFC3339 value must be a non-empty string")
    text = value.strip()
    if text[-1] in "zZ":
        # fromisoformat only learned 'Z' in 3.11
        text = f"{text[:-1]}+00:00"
    return normalize_dt(datetime.fromisoformat(text))


def to_rfc3339(dt: datetime) -> str:
    """UTC RFC3339 with microseconds and a 'Z' suffix."""
    return normalize_dt(dt).strftime("%Y-%m-%dT%H:%M:%S.%fZ")


def coerce_datetime(value: Any) -> Optional[datetime]:
    """
    Best-effort conversion of a stored timestamp to a tz-aware UTC datetime.

    Firestore returns timestamps as datetime subclasses; the Drive API and
    older mirror documents carry RFC3339 strings. Anything else yields None.
    """
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)
    if isinstance(value, str) and value:
        try:
            return parse_rfc3339(value)
        except ValueError:
            return None
    return None
