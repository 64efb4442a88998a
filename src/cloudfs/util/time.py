from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Optional


def now_utc() -> datetime:
    """Return current time as tz-aware UTC datetime."""
    return datetime.now(timezone.utc)


def from_timestamp(value: Any) -> Optional[datetime]:
    """
    Convert a service timestamp (epoch seconds) into tz-aware UTC datetime.

    Returns None for missing or non-numeric values.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        try:
            value = float(value)
        except ValueError:
            return None
    if not isinstance(value, (int, float)):
        return None
    return datetime.fromtimestamp(value, tz=timezone.utc)


def to_timestamp(dt: datetime) -> int:
    """Convert tz-aware datetime to epoch seconds (as the service stores them)."""
    return int(normalize_dt(dt).astimezone(timezone.utc).timestamp())


def to_signature_date(dt: datetime) -> str:
    """
    Format a datetime for the Date header of signed requests.

    Matches `%a, %e %b %Y %H:%M:%S UTC` (day of month space padded) without
    depending on the platform's strftime extensions.
    """
    dt = normalize_dt(dt).astimezone(timezone.utc)
    return f"{dt:%a}, {dt.day:>2} {dt:%b %Y %H:%M:%S} UTC"


def normalize_dt(dt: datetime) -> datetime:
    """Ensure datetime is tz-aware. Raises if naive."""
    if not isinstance(dt, datetime):
        raise TypeError("dt must be a datetime")
    if dt.tzinfo is None:
        raise ValueError("naive datetime is not allowed; timezone-aware required")
    return dt
