"""Wall-clock time parsing utilities."""

from datetime import date, datetime, time, timedelta
from typing import Optional
import re

from dateutil import parser as date_parser

_CLOCK_RE = re.compile(r"^(\d{1,2}):(\d{2})(?::(\d{2}))?$")


def parse_time(time_str: str) -> time:
    """Parse a wall-clock time.

    Accepts "HH:MM", "HH:MM:SS" and full ISO-8601 timestamps (the time of day
    is kept, the date part is dropped).

    Raises:
        ValueError: If the string is not a time
    """
    if time_str is None or not str(time_str).strip():
        raise ValueError("Empty time string")
    time_str = str(time_str).strip()

    match = _CLOCK_RE.match(time_str)
    if match:
        hour, minute = int(match.group(1)), int(match.group(2))
        second = int(match.group(3) or 0)
        try:
            return time(hour, minute, second)
        except ValueError as e:
            raise ValueError(f"Could not parse time '{time_str}': {e}") from e

    try:
        parsed = date_parser.isoparse(time_str)
    except (ValueError, TypeError) as e:
        raise ValueError(f"Could not parse time '{time_str}': {e}") from e
    return parsed.time().replace(tzinfo=None)


def parse_optional_time(time_str: Optional[str]) -> Optional[time]:
    """Parse a time that may be left empty."""
    if time_str is None or not str(time_str).strip():
        return None
    return parse_time(time_str)


def format_time(value: Optional[time]) -> str:
    """Format a time as HH:MM (empty string for None)."""
    if value is None:
        return ""
    return value.strftime("%H:%M")


def anchor_times(
    day: date, start: Optional[time], end: Optional[time]
) -> tuple[Optional[datetime], Optional[datetime]]:
    """Anchor wall-clock times to a calendar day.

    An end time earlier than the start time belongs to the following day.
    """
    start_at = datetime.combine(day, start) if start is not None else None
    end_at = datetime.combine(day, end) if end is not None else None
    if start_at is not None and end_at is not None and end_at < start_at:
        end_at += timedelta(days=1)
    return start_at, end_at
