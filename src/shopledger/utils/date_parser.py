"""Date parsing utilities."""

import re
from datetime import date, timedelta
from dateutil import parser as date_parser

WEEKDAYS = ["monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"]

YEAR_MONTH_PATTERN = re.compile(r"^\d{4}-(0[1-9]|1[0-2])$")


def parse_date(date_str: str, today: date | None = None) -> date:
    """Parse a date string into a date object.

    Supports:
    - Absolute dates: "2025-06-01", "June 1, 2025", etc.
    - Relative days: "today", "yesterday", "tomorrow"
    - The most recent weekday: "last monday", "last friday", ...

    Args:
        date_str: Date string in various formats
        today: Reference day for relative dates (defaults to the current date)

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

    if date_str.startswith("last ") and date_str[5:] in WEEKDAYS:
        target_day = WEEKDAYS.index(date_str[5:])
        days_ago = (today.weekday() - target_day) % 7
        if days_ago == 0:
            days_ago = 7
        return today - timedelta(days=days_ago)

    # Try parsing as absolute date
    try:
        dt = date_parser.parse(date_str, default=None, yearfirst=True)
        return dt.date()
    except (ValueError, TypeError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def parse_year_month(value: str, today: date | None = None) -> str:
    """Normalize a month reference to YYYY-MM.

    Accepts "YYYY-MM", "this month" and "last month".

    Raises:
        ValueError: If the month cannot be parsed
    """
    value = value.strip().lower()
    today = today or date.today()
    if value == "this month":
        return today.strftime("%Y-%m")
    if value == "last month":
        return (today.replace(day=1) - timedelta(days=1)).strftime("%Y-%m")
    if YEAR_MONTH_PATTERN.match(value):
        return value
    raise ValueError(f"Could not parse month '{value}' (expected YYYY-MM)")
