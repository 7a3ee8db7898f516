"""
Time intervals and ISO-8601 timestamp handling.

Every interval holds timezone-aware datetimes. Naive inputs are taken to be
host local time, which is the only timezone the engine knows about.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from core.errors import InvalidDate, NonPositiveDuration

ZERO = timedelta(0)


def parse_timestamp(value: str | datetime) -> datetime:
    """
    Parse an ISO-8601 timestamp into an aware datetime.

    Accepts a trailing 'Z' as well as explicit offsets. Values without an
    offset are interpreted in host local time.

    Raises:
        InvalidDate: if the value is not a timestamp
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value.strip():
        try:
            parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError:
            raise InvalidDate(f"Invalid timestamp '{value}'") from None
    else:
        raise InvalidDate(f"Invalid timestamp {value!r}")

    if parsed.tzinfo is None:
        parsed = parsed.astimezone()
    return parsed


def format_timestamp(dt: datetime) -> str:
    """Format as UTC ISO-8601 with millisecond precision, e.g. 2025-08-12T13:00:00.000Z."""
    if dt.tzinfo is None:
        dt = dt.astimezone()
    return dt.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


@dataclass(frozen=True)
class TimeInterval:
    """A closed span of time between two aware datetimes."""

    start: datetime
    end: datetime

    def __post_init__(self):
        if self.end < self.start:
            raise NonPositiveDuration(
                f"Interval end {self.end.isoformat()} is before start {self.start.isoformat()}"
            )

    @classmethod
    def from_iso(cls, start: str | datetime, end: str | datetime) -> "TimeInterval":
        return cls(parse_timestamp(start), parse_timestamp(end))

    @property
    def duration(self) -> timedelta:
        return self.end - self.start

    @property
    def duration_seconds(self) -> float:
        return self.duration.total_seconds()

    def overlap(self, other: "TimeInterval") -> timedelta:
        return overlap(self, other)


def overlap(reference: TimeInterval, candidate: TimeInterval) -> timedelta:
    """
    Duration during which both intervals hold.

    max(0, min(end1, end2) - max(start1, start2)); zero when they do not intersect.
    """
    latest_start = max(reference.start, candidate.start)
    earliest_end = min(reference.end, candidate.end)
    return max(ZERO, earliest_end - latest_start)
