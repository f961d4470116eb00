"""Utility modules for EVC Track."""

from .time_utils import (
    utc_now,
    ensure_utc,
    parse_datetime,
    format_datetime_iso,
    month_key,
    month_label,
    format_elapsed,
)

__all__ = [
    'utc_now',
    'ensure_utc',
    'parse_datetime',
    'format_datetime_iso',
    'month_key',
    'month_label',
    'format_elapsed',
]
