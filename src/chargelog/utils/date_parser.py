"""Date and month parsing utilities."""

from datetime import date, datetime, timedelta
from typing import Any, Optional
import re

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

_MONTH_RE = re.compile(r"^(\d{4})[-/](\d{1,2})$")


def parse_date(date_str: str) -> date:
    """Parse a date string into a date object.

    Supports various formats including relative dates:
    - Absolute dates: "2024-01-15", "2024/01/15", "January 15, 2024", etc.
    - Relative dates: "today", "yesterday", "tomorrow"

    Args:
        date_str: Date string in various formats

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    date_str = date_str.strip().lower()
    today = date.today()

    relative_dates = {
        "today": today,
        "yesterday": today - timedelta(days=1),
        "tomorrow": today + timedelta(days=1),
    }

    if date_str in relative_dates:
        return relative_dates[date_str]

    try:
        dt = date_parser.parse(date_str)
        return dt.date()
    except (ValueError, TypeError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def current_month(today: Optional[date] = None) -> str:
    """Return the current month as YYYY-MM."""
    today = today or date.today()
    return today.strftime("%Y-%m")


def parse_month(month_str: str) -> str:
    """Parse a month selector into a normalized "YYYY-MM" string.

    Supports "2024-03", "2024/3", "this month" and "last month".

    Raises:
        ValueError: If the string is not a month
    """
    text = month_str.strip().lower()
    today = date.today()

    if text in ("this month", "this-month"):
        return current_month(today)
    if text in ("last month", "last-month"):
        return current_month(today - relativedelta(months=1))

    match = _MONTH_RE.match(text)
    if match is None:
        raise ValueError(f"Could not parse month '{month_str}': expected YYYY-MM")
    year, month = int(match.group(1)), int(match.group(2))
    if not 1 <= month <= 12:
        raise ValueError(f"Could not parse month '{month_str}': month out of range")
    return f"{year:04d}-{month:02d}"


def month_key(value: Any) -> Optional[str]:
    """Normalize a record date (date, datetime or string) to "YYYY-MM".

    Returns None when the value carries no usable date.
    """
    if value is None:
        return None
    if isinstance(value, (date, datetime)):
        return value.strftime("%Y-%m")
    text = str(value).strip()
    if not text:
        return None
    match = re.match(r"^(\d{4})[-/](\d{1,2})", text)
    if match:
        return f"{int(match.group(1)):04d}-{int(match.group(2)):02d}"
    try:
        return date_parser.parse(text).strftime("%Y-%m")
    except (ValueError, TypeError, OverflowError):
        return None


def month_bounds(month: str) -> tuple[date, date]:
    """Return the first and last day of a "YYYY-MM" month.

    Raises:
        ValueError: If the string is not a month
    """
    first = datetime.strptime(parse_month(month), "%Y-%m").date()
    last = first + relativedelta(months=1) - timedelta(days=1)
    return first, last
