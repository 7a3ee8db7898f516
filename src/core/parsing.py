"""
Free-form date and time-of-day parsing for manual time entry.

Pure functions: they raise typed errors and never log or persist anything.
"""

import re
from datetime import date, datetime, time

from dateutil import parser as date_parser

from core.errors import InvalidDate, InvalidTime, NonPositiveDuration
from core.intervals import TimeInterval

ISO_DATE_PATTERN = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")
US_DATE_PATTERN = re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{4})$")
TIME_PATTERN = re.compile(r"^(\d{1,2})(:(\d{2}))?$")
MERIDIEM_PATTERN = re.compile(r"(AM|PM)$")


def parse_date(value: str) -> date:
    """
    Parse a calendar date.

    Accepts YYYY-MM-DD, M/D/YYYY, and falls back to free-form parsing
    (e.g. 'Aug 12 2025').

    Raises:
        InvalidDate: if no format yields a real calendar date
    """
    text = (value or "").strip()
    if not text:
        raise InvalidDate("Date is required")

    try:
        match = ISO_DATE_PATTERN.match(text)
        if match:
            year, month, day = (int(part) for part in match.groups())
            return date(year, month, day)

        match = US_DATE_PATTERN.match(text)
        if match:
            month, day, year = (int(part) for part in match.groups())
            return date(year, month, day)
    except ValueError:
        raise InvalidDate(f"Invalid date '{value}'") from None

    try:
        parsed = date_parser.parse(text)
    except (ValueError, OverflowError):
        raise InvalidDate(f"Invalid date '{value}'") from None

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone()
    return parsed.date()


def parse_time(value: str) -> tuple[int, int]:
    """
    Parse a time of day into (hour, minute) on a 24-hour clock.

    Accepts H or H:MM with an optional AM/PM suffix, e.g. '9', '17:30',
    '9:00AM', '2:30 pm'.

    Raises:
        InvalidTime: if the value does not match
    """
    text = re.sub(r"\s+", "", value or "").upper()
    if not text:
        raise InvalidTime("Time is required")

    meridiem = None
    match = MERIDIEM_PATTERN.search(text)
    if match:
        meridiem = match.group(1)
        text = text[: match.start()]

    match = TIME_PATTERN.match(text)
    if not match:
        raise InvalidTime(f"Invalid time '{value}'. Use a format like '9:00 AM' or '14:30'")

    hours = int(match.group(1))
    minutes = int(match.group(3) or 0)
    if hours > 23 or minutes > 59:
        raise InvalidTime(f"Invalid time '{value}'")

    if meridiem == "PM" and hours < 12:
        hours += 12
    elif meridiem == "AM" and hours == 12:
        hours = 0

    return hours, minutes


def combine_local(day: date, hours: int, minutes: int) -> datetime:
    """Place a wall-clock time on a local calendar day as an aware datetime."""
    return datetime.combine(day, time(hours, minutes)).astimezone()


def parse_interval(date_str: str, start_str: str, end_str: str) -> TimeInterval:
    """
    Build an interval from a date and two times of day.

    Example: ('2025-08-12', '9:00AM', '5:00PM') spans 8 hours.

    Raises:
        InvalidDate, InvalidTime: on unparseable input
        NonPositiveDuration: if end is not after start
    """
    day = parse_date(date_str)
    start = combine_local(day, *parse_time(start_str))
    end = combine_local(day, *parse_time(end_str))

    if end <= start:
        raise NonPositiveDuration(f"End time '{end_str}' must be after start time '{start_str}'")

    return TimeInterval(start, end)
