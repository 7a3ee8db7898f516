"""
Time entry validation and record coercion.
"""

import math
from datetime import date
from numbers import Real

from core.buckets import local_date
from core.errors import MalformedRecord, TimeEngineError
from core.intervals import TimeInterval

REQUIRED_ENTRY_FIELDS = ("id", "userId", "date", "duration", "billable")


def entry_interval(entry: dict) -> TimeInterval:
    """
    Interval between an entry's startTime and endTime.

    Raises:
        MalformedRecord: if either timestamp is missing or unparseable, or end < start
    """
    start = entry.get("startTime")
    end = entry.get("endTime")
    if not start or not end:
        raise MalformedRecord(f"Entry {entry.get('id')!r} has no start/end time")
    try:
        return TimeInterval.from_iso(start, end)
    except TimeEngineError as e:
        raise MalformedRecord(f"Entry {entry.get('id')!r}: {e}") from None


def entry_duration_seconds(entry: dict) -> float:
    """
    Duration of an entry in seconds.

    The start/end timestamps win over the stored ``duration`` field when they
    describe a positive interval, since a stored duration can go stale.

    Raises:
        MalformedRecord: if neither the timestamps nor the stored duration are usable
    """
    try:
        interval = entry_interval(entry)
    except MalformedRecord:
        interval = None
    if interval is not None and interval.duration_seconds > 0:
        return interval.duration_seconds

    duration = entry.get("duration")
    if isinstance(duration, bool) or not isinstance(duration, Real):
        raise MalformedRecord(f"Entry {entry.get('id')!r} has non-numeric duration {duration!r}")
    duration = float(duration)
    if math.isnan(duration) or math.isinf(duration) or duration < 0:
        raise MalformedRecord(f"Entry {entry.get('id')!r} has invalid duration {duration!r}")
    return duration


def entry_local_date(entry: dict) -> date:
    """
    Local calendar date an entry is accounted to.

    Raises:
        MalformedRecord: if the date field is missing or unparseable
    """
    value = entry.get("date")
    if not value:
        raise MalformedRecord(f"Entry {entry.get('id')!r} has no date")
    try:
        return local_date(value)
    except TimeEngineError as e:
        raise MalformedRecord(f"Entry {entry.get('id')!r}: {e}") from None


def entry_is_billable(entry: dict) -> bool:
    """
    Raises:
        MalformedRecord: if the billable flag is not a boolean
    """
    billable = entry.get("billable")
    if not isinstance(billable, bool):
        raise MalformedRecord(f"Entry {entry.get('id')!r} has non-boolean billable flag {billable!r}")
    return billable


def validate_time_entry(entry: dict) -> list[str]:
    """
    Check a time entry before it is written to the store.

    Returns a list of error messages; empty when the entry is usable.
    """
    errors = []

    for field_name in REQUIRED_ENTRY_FIELDS:
        if entry.get(field_name) is None or entry.get(field_name) == "":
            errors.append(f"Missing {field_name}")

    if not str(entry.get("description") or "").strip():
        errors.append("Missing description")

    checks = (entry_local_date, entry_duration_seconds, entry_is_billable)
    for check in checks:
        try:
            check(entry)
        except MalformedRecord as e:
            errors.append(str(e))

    if entry.get("startTime") or entry.get("endTime"):
        try:
            entry_interval(entry)
        except MalformedRecord as e:
            errors.append(str(e))

    return errors


def validate_entries(entries: list[dict]) -> list[dict]:
    """
    Annotate each entry with an ``error_message`` (None when valid).

    Used by reports so malformed rows are visible instead of silently dropped.
    """
    annotated = []
    for entry in entries:
        errors = validate_time_entry(entry)
        annotated.append({**entry, "error_message": "; ".join(errors) if errors else None})
    return annotated
