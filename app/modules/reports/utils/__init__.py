"""
Utilities for Reports module

Date normalization and parsing shared by the report filters and services.
"""

from datetime import date, datetime, timezone
from typing import Optional


def as_naive_utc(value) -> datetime:
    """
    Normalize a timestamp for comparison.

    Aware datetimes are converted to UTC and stripped of tzinfo; plain dates
    become midnight of that day. Stored timestamps are naive UTC already.
    """
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            return value.astimezone(timezone.utc).replace(tzinfo=None)
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    raise TypeError(f"Expected date or datetime, got {type(value).__name__}")


def parse_report_date(value) -> Optional[datetime]:
    """
    Parse an ISO-8601 date or date-time bound.

    Accepts ``YYYY-MM-DD`` and full timestamps (with or without offset).
    Raises ValueError for anything else instead of ignoring the bound.

    Args:
        value: String, date, datetime or None

    Returns:
        Naive UTC datetime, or None when no bound was given
    """
    if value is None:
        return None
    if isinstance(value, str):
        raw = value.strip()
        if not raw:
            return None
        try:
            value = datetime.fromisoformat(raw)
        except ValueError:
            raise ValueError(f"'{value}' is not a valid ISO-8601 date")
    return as_naive_utc(value)


def period_key(moment: datetime, granularity: str) -> str:
    """ISO period label for a timestamp: YYYY-MM-DD for 'day', YYYY-MM for 'month'"""
    moment = as_naive_utc(moment)
    if granularity == "day":
        return moment.strftime("%Y-%m-%d")
    if granularity == "month":
        return moment.strftime("%Y-%m")
    raise ValueError(f"Unsupported granularity: {granularity}")
