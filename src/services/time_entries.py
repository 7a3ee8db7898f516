"""
Time entry construction and snapshot edits.

Entries are immutable once created; the only edits are append and hard delete,
both expressed as functions from one snapshot to the next.
"""

import uuid
from datetime import datetime, time, timedelta, timezone

from core.aggregation import select_entries
from core.buckets import Bucket
from core.config import ENTRY_SOURCE_CLOCK, ENTRY_SOURCE_MANUAL, ENTRY_STATUS_COMPLETED
from core.errors import NonPositiveDuration
from core.intervals import TimeInterval, format_timestamp
from core.parsing import parse_date, parse_interval
from models.entries import Goal, TimeEntry


def new_entry_id() -> str:
    return f"entry-{uuid.uuid4().hex[:12]}"


def _entry_from_interval(
    interval: TimeInterval,
    anchor: datetime,
    user_id: str,
    description: str,
    case_id: str | None,
    billable: bool,
    source: str,
    duration: float | None = None,
) -> TimeEntry:
    now = format_timestamp(datetime.now(timezone.utc))
    return {
        "id": new_entry_id(),
        "userId": user_id,
        "teamId": None,
        "caseId": case_id,
        "date": format_timestamp(anchor),
        "startTime": format_timestamp(interval.start),
        "endTime": format_timestamp(interval.end),
        "duration": int(duration if duration is not None else interval.duration_seconds),
        "billable": billable,
        "description": description,
        "status": ENTRY_STATUS_COMPLETED,
        "source": source,
        "createdAt": now,
        "updatedAt": now,
    }


def build_manual_entry(
    user_id: str,
    date_str: str,
    description: str,
    case_id: str | None = None,
    start: str | None = None,
    end: str | None = None,
    duration: float | None = None,
    billable: bool = True,
) -> TimeEntry:
    """
    Build a manually submitted entry.

    With ``duration`` (seconds) the entry is anchored at local midnight of the
    date and only its length matters; otherwise ``start`` and ``end`` are
    times of day on that date.

    Raises:
        InvalidDate, InvalidTime, NonPositiveDuration
    """
    day = parse_date(date_str)
    anchor = datetime.combine(day, time.min).astimezone()

    if duration:
        if duration < 0:
            raise NonPositiveDuration(f"Duration must be positive, got {duration}")
        interval = TimeInterval(anchor, anchor + timedelta(seconds=duration))
        return _entry_from_interval(
            interval, anchor, user_id, description, case_id, billable,
            ENTRY_SOURCE_MANUAL, duration=duration,
        )

    interval = parse_interval(date_str, start, end)
    return _entry_from_interval(
        interval, anchor, user_id, description, case_id, billable, ENTRY_SOURCE_MANUAL
    )


def build_clock_entry(
    user_id: str,
    clock_in: str | datetime,
    clock_out: str | datetime,
    description: str,
    case_id: str | None = None,
    billable: bool = True,
) -> TimeEntry:
    """
    Build an entry from a clock-in/clock-out pair of timestamps.

    Raises:
        InvalidDate: on unparseable timestamps
        NonPositiveDuration: if clock-out is not after clock-in
    """
    interval = TimeInterval.from_iso(clock_in, clock_out)
    if interval.duration_seconds <= 0:
        raise NonPositiveDuration("Clock-out must be after clock-in")

    local_start = interval.start.astimezone()
    anchor = datetime.combine(local_start.date(), time.min).astimezone()
    return _entry_from_interval(
        interval, anchor, user_id, description, case_id, billable, ENTRY_SOURCE_CLOCK
    )


def append_entry(snapshot: list[TimeEntry], entry: TimeEntry) -> list[TimeEntry]:
    return [*snapshot, entry]


def remove_entry(snapshot: list[TimeEntry], entry_id: str) -> tuple[list[TimeEntry], TimeEntry | None]:
    """Drop the entry with ``entry_id``; returns the new snapshot and the removed entry (or None)."""
    remaining = []
    removed = None
    for entry in snapshot:
        if removed is None and entry.get("id") == entry_id:
            removed = entry
        else:
            remaining.append(entry)
    return remaining, removed


def append_goal(snapshot: list[Goal], goal: Goal) -> list[Goal]:
    return [*snapshot, goal]


def entries_in_bucket(
    entries: list[TimeEntry],
    bucket: Bucket,
    user_id: str | None = None,
) -> list[TimeEntry]:
    """Entries of the user accounted to ``bucket``, newest first."""
    selection = select_entries(entries, bucket, user_id=user_id)
    selected = [accounted.entry for accounted in selection.entries]
    return sorted(selected, key=lambda entry: entry.get("startTime") or entry.get("date"), reverse=True)
