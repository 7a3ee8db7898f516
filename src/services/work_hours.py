"""
Office-session reconciliation.

Work hours are the billable time a user logged inside their office session on
a given day, counting only the part of each entry that falls inside the session.
"""

from core.aggregation import matches_user, round_hours
from core.buckets import TimeUnit, bucket_bounds, in_bucket
from core.errors import MalformedRecord, NonPositiveDuration
from core.intervals import TimeInterval
from core.overlap import compute_overlap
from core.parsing import parse_date
from core.validation import entry_local_date


def office_session_interval(office_start: str, office_end: str) -> TimeInterval:
    """
    Raises:
        InvalidDate: on unparseable timestamps
        NonPositiveDuration: if the session does not end after it starts
    """
    session = TimeInterval.from_iso(office_start, office_end)
    if session.duration_seconds <= 0:
        raise NonPositiveDuration("Office end time must be after start time")
    return session


def entries_on_date(entries: list[dict], user_id: str, date_str: str) -> list[dict]:
    """The user's entries accounted to the local calendar day ``date_str``; malformed dates are dropped."""
    day = bucket_bounds(parse_date(date_str), TimeUnit.DAY)
    selected = []
    for entry in entries:
        if not matches_user(entry, user_id):
            continue
        try:
            entry_date = entry_local_date(entry)
        except MalformedRecord:
            continue
        if in_bucket(entry_date, day):
            selected.append(entry)
    return selected


def reconcile_office_session(
    entries: list[dict],
    user_id: str,
    office_start: str,
    office_end: str,
    date_str: str,
) -> dict:
    """
    Billable hours logged inside an office session.

    Raises:
        InvalidDate, NonPositiveDuration: on a bad session or date
    """
    session = office_session_interval(office_start, office_end)
    day_entries = entries_on_date(entries, user_id, date_str)
    result = compute_overlap(session, day_entries, billable=True)

    return {
        "workHours": result.total_overlap_hours,
        "officeSession": {
            "start": office_start,
            "end": office_end,
            "duration": round_hours(session.duration_seconds),
        },
        "overlappingEntries": [
            {
                "entryId": item.entry.get("id"),
                "description": item.entry.get("description"),
                "entryStart": item.entry.get("startTime"),
                "entryEnd": item.entry.get("endTime"),
                "overlapHours": item.overlap_hours,
            }
            for item in result.per_entry
        ],
        "totalEntries": result.total_entries,
        "billableEntries": result.billable_entries,
        "skippedCount": result.skipped_count,
    }
