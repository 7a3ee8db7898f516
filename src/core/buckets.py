"""
Local-calendar reporting buckets (day, week, month, quarter, year).

Bucket bounds are naive wall-clock datetimes in host local time. Membership is
decided on local calendar dates, never on raw UTC instants, so an entry stamped
at midnight UTC lands on the local day it actually belongs to.
"""

import calendar
import re
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from enum import Enum

from core.config import WEEK_START_DAY
from core.errors import InvalidDate, UnsupportedUnit
from core.intervals import parse_timestamp

DATE_ONLY_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")
END_OF_DAY = time(23, 59, 59, 999000)


class TimeUnit(str, Enum):
    """Reporting timeframes, ordered from finest to coarsest."""

    DAY = "daily"
    WEEK = "weekly"
    MONTH = "monthly"
    QUARTER = "quarterly"
    YEAR = "yearly"

    @property
    def rank(self) -> int:
        return UNIT_ORDER.index(self)


UNIT_ORDER = [TimeUnit.DAY, TimeUnit.WEEK, TimeUnit.MONTH, TimeUnit.QUARTER, TimeUnit.YEAR]

UNIT_ALIASES = {
    "day": TimeUnit.DAY,
    "week": TimeUnit.WEEK,
    "month": TimeUnit.MONTH,
    "quarter": TimeUnit.QUARTER,
    "year": TimeUnit.YEAR,
    "annual": TimeUnit.YEAR,
    "annually": TimeUnit.YEAR,
}


def parse_unit(value: str | TimeUnit) -> TimeUnit:
    """
    Resolve a timeframe name ('daily', 'week', 'annual', ...) to a TimeUnit.

    Raises:
        UnsupportedUnit: for unknown names
    """
    if isinstance(value, TimeUnit):
        return value
    key = str(value or "").strip().lower()
    try:
        return TimeUnit(key)
    except ValueError:
        pass
    if key in UNIT_ALIASES:
        return UNIT_ALIASES[key]
    raise UnsupportedUnit(f"Unsupported timeframe '{value}'")


@dataclass(frozen=True)
class Bucket:
    """A local-calendar window; both bounds are inclusive."""

    start: datetime
    end: datetime
    unit: TimeUnit

    @property
    def start_date(self) -> date:
        return self.start.date()

    @property
    def end_date(self) -> date:
        return self.end.date()

    def contains(self, value) -> bool:
        return in_bucket(value, self)

    def to_dict(self) -> dict:
        return {
            "unit": self.unit.value,
            "start": self.start.isoformat(timespec="milliseconds"),
            "end": self.end.isoformat(timespec="milliseconds"),
        }


def to_local(value: str | datetime | date) -> datetime:
    """Convert to a naive local wall-clock datetime."""
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value
        return value.astimezone().replace(tzinfo=None)
    if isinstance(value, date):
        return datetime.combine(value, time.min)
    return parse_timestamp(value).astimezone().replace(tzinfo=None)


def local_date(value: str | datetime | date) -> date:
    """
    Local calendar date of a record's date field.

    Date-only strings (YYYY-MM-DD) are taken literally; timestamps are shifted
    into local time first.

    Raises:
        InvalidDate: if the value is not a date or timestamp
    """
    if isinstance(value, datetime):
        return to_local(value).date()
    if isinstance(value, date):
        return value
    if isinstance(value, str) and DATE_ONLY_PATTERN.match(value.strip()):
        try:
            return date.fromisoformat(value.strip())
        except ValueError:
            raise InvalidDate(f"Invalid date '{value}'") from None
    return to_local(value).date()


def week_start(day: date, start_on: int = WEEK_START_DAY) -> date:
    """First day of the week containing ``day`` (start_on: 0=Monday, 6=Sunday)."""
    return day - timedelta(days=(day.weekday() - start_on) % 7)


def _bounds_for_dates(first: date, last: date, unit: TimeUnit) -> Bucket:
    return Bucket(datetime.combine(first, time.min), datetime.combine(last, END_OF_DAY), unit)


def bucket_bounds(
    now: str | datetime | date,
    unit: str | TimeUnit,
    week_start_on: int = WEEK_START_DAY,
) -> Bucket:
    """
    Compute the local-calendar bucket of ``unit`` that contains ``now``.

    Every bucket starts at local midnight of its first day and ends at
    23:59:59.999 of its last day.

    Raises:
        UnsupportedUnit: for unknown units
    """
    unit = parse_unit(unit)
    today = local_date(now)

    if unit is TimeUnit.DAY:
        return _bounds_for_dates(today, today, unit)

    if unit is TimeUnit.WEEK:
        first = week_start(today, week_start_on)
        return _bounds_for_dates(first, first + timedelta(days=6), unit)

    if unit is TimeUnit.MONTH:
        _, last_day = calendar.monthrange(today.year, today.month)
        return _bounds_for_dates(today.replace(day=1), today.replace(day=last_day), unit)

    if unit is TimeUnit.QUARTER:
        first_month = 3 * ((today.month - 1) // 3) + 1
        last_month = first_month + 2
        _, last_day = calendar.monthrange(today.year, last_month)
        return _bounds_for_dates(
            date(today.year, first_month, 1), date(today.year, last_month, last_day), unit
        )

    return _bounds_for_dates(date(today.year, 1, 1), date(today.year, 12, 31), unit)


def in_bucket(value: str | datetime | date, bounds: Bucket) -> bool:
    """Whether the local calendar date of ``value`` falls inside ``bounds``."""
    return bounds.start_date <= local_date(value) <= bounds.end_date


def day_buckets(now: str | datetime | date, days: int) -> list[Bucket]:
    """Trailing ``days`` day buckets ending on the date of ``now``, oldest first."""
    today = local_date(now)
    return [
        bucket_bounds(today - timedelta(days=offset), TimeUnit.DAY)
        for offset in range(days - 1, -1, -1)
    ]
