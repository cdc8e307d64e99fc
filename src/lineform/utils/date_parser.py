"""Date parsing utilities for rate effective dates."""

from datetime import date, timedelta
from typing import Optional

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta


def _period_start(today: date, modifier: str, period: str) -> Optional[date]:
    """Return the first day of a relative week/month/year period."""
    offsets = {"last": -1, "this": 0, "next": 1}
    if modifier not in offsets:
        return None
    step = offsets[modifier]

    if period == "week":
        monday = today - timedelta(days=today.weekday())
        return monday + timedelta(weeks=step)
    if period == "month":
        return today.replace(day=1) + relativedelta(months=step)
    if period == "year":
        return today.replace(month=1, day=1) + relativedelta(years=step)
    return None


def parse_date(date_str: str, today: Optional[date] = None) -> date:
    """Parse a date string into a date object.

    Supports absolute dates ("2024-01-15", "January 15, 2024") and relative
    ones: "today", "yesterday", "tomorrow", and "last/this/next" followed by
    "week", "month" or "year" (resolving to the first day of that period).

    Args:
        date_str: Date string
        today: Reference date for relative forms (defaults to date.today())

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    date_str = date_str.strip().lower()
    today = today or date.today()

    relative_dates = {
        "today": today,
        "yesterday": today - timedelta(days=1),
        "tomorrow": today + timedelta(days=1),
    }
    if date_str in relative_dates:
        return relative_dates[date_str]

    parts = date_str.split()
    if len(parts) == 2:
        start = _period_start(today, parts[0], parts[1])
        if start is not None:
            return start

    try:
        return date_parser.parse(date_str).date()
    except (ValueError, OverflowError, TypeError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")
