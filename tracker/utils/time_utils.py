"""
Time parsing and formatting utilities for EVC Track.

Provides consistent date/time handling for both persistence paths:
- Multiple input formats (ISO, YYYY-MM-DD, Unix timestamp)
- UTC normalization (SQLite hands back naive datetimes, PostgreSQL aware ones)
- ISO output in the same shape browsers produce (``2026-10-18T09:30:00.000Z``)
- Month keys and labels for history grouping
"""

import logging
from datetime import datetime, timezone
from typing import Optional, Union

from dateutil import parser as date_parser

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    """
    Get current UTC time with timezone info.

    Example:
        >>> now = utc_now()
        >>> print(now.tzinfo)
        UTC
    """
    return datetime.now(timezone.utc)


def ensure_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """
    Ensure a datetime is timezone-aware in UTC.

    Naive datetimes are assumed to already be UTC.
    """
    if dt is None:
        return None

    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)

    return dt.astimezone(timezone.utc)


def parse_datetime(
    value: Union[str, datetime, None],
    default: Optional[datetime] = None,
) -> Optional[datetime]:
    """
    Parse a date/time value into an aware UTC datetime.

    Supports:
    - ISO 8601: "2024-01-15T14:30:00Z", "2024-01-15T14:30:00.000Z"
    - Date only: "2024-01-15"
    - Unix timestamp: "1705329000"
    - Anything else python-dateutil understands

    Returns:
        datetime object or ``default`` if parsing fails

    Example:
        >>> parse_datetime("2024-01-15")
        datetime.datetime(2024, 1, 15, 0, 0, tzinfo=datetime.timezone.utc)
        >>> parse_datetime("invalid") is None
        True
    """
    if value is None or value == "":
        return default

    if isinstance(value, datetime):
        return ensure_utc(value)

    value = str(value).strip()

    if value.isdigit():
        try:
            return datetime.fromtimestamp(int(value), tz=timezone.utc)
        except (ValueError, OSError, OverflowError):
            pass

    try:
        return ensure_utc(date_parser.parse(value))
    except (ValueError, TypeError, OverflowError):
        logger.warning(f"Failed to parse datetime string: {value}")
        return default


def format_datetime_iso(dt: Optional[datetime]) -> Optional[str]:
    """
    Format a datetime the way browser storage does (millisecond precision, Z suffix).

    Example:
        >>> format_datetime_iso(datetime(2024, 1, 15, 14, 30, tzinfo=timezone.utc))
        '2024-01-15T14:30:00.000Z'
    """
    if dt is None:
        return None
    dt = ensure_utc(dt)
    return dt.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def month_key(dt: datetime) -> str:
    """Year-month bucket key, e.g. ``2026-10``."""
    return ensure_utc(dt).strftime("%Y-%m")


def month_label(key: str) -> str:
    """Human label for a month key, e.g. ``2026-10`` -> ``October 2026``."""
    return datetime.strptime(key, "%Y-%m").strftime("%B %Y")


def format_elapsed(seconds: float) -> str:
    """
    Format a duration as HH:MM:SS (hours are not wrapped at 24).

    Example:
        >>> format_elapsed(3725)
        '01:02:05'
    """
    total = max(int(seconds), 0)
    hours, remainder = divmod(total, 3600)
    minutes, secs = divmod(remainder, 60)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"
