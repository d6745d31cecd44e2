"""UTC timestamp helpers.

Catalog payloads carry ``createdAt`` strings in a handful of ISO 8601
variants; everything inside the engine is a timezone-aware UTC datetime.
"""

from datetime import datetime, timezone
from typing import Optional


def utc_now() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def ensure_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """Make a datetime timezone-aware UTC.

    Naive values are taken to already be UTC; aware values are converted.

    Example:
        >>> ensure_utc(datetime(2025, 11, 4, 12, 0)).tzinfo == timezone.utc
        True
    """
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def parse_iso_datetime(value: Optional[str]) -> Optional[datetime]:
    """Parse an ISO 8601 string into a UTC datetime.

    Accepts a trailing 'Z', explicit offsets, naive timestamps and bare dates.
    Returns None for empty or unparseable input instead of raising.

    Example:
        >>> parse_iso_datetime("2025-11-04T12:00:00.000Z").day
        4
    """
    if not isinstance(value, str) or not value.strip():
        return None

    cleaned = value.strip()
    if cleaned.endswith("Z"):
        cleaned = cleaned[:-1] + "+00:00"

    try:
        return ensure_utc(datetime.fromisoformat(cleaned))
    except ValueError:
        pass

    for fmt in ("%Y-%m-%dT%H:%M:%S", "%Y-%m-%d"):
        try:
            return ensure_utc(datetime.strptime(value.strip(), fmt))
        except ValueError:
            continue

    return None
