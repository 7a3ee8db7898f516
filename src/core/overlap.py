"""
Overlap of logged time entries with a reference interval (e.g. an office session).

Only the intersected portion of each entry counts; an entry may run past the
reference window or lie entirely outside it.
"""

from dataclasses import dataclass, field
from datetime import timedelta

from core.aggregation import matches_billable, matches_user, round_hours
from core.errors import MalformedRecord
from core.intervals import ZERO, TimeInterval, overlap
from core.validation import entry_interval


@dataclass
class EntryOverlap:
    """One entry and the part of it inside the reference interval."""

    entry: dict
    overlap: timedelta

    @property
    def overlap_hours(self) -> float:
        return round_hours(self.overlap.total_seconds())


@dataclass
class OverlapResult:
    """Per-entry overlaps plus totals for one reference interval."""

    reference: TimeInterval
    per_entry: list[EntryOverlap] = field(default_factory=list)
    total_overlap: timedelta = ZERO
    total_entries: int = 0
    billable_entries: int = 0
    skipped_count: int = 0

    @property
    def total_overlap_hours(self) -> float:
        return round_hours(self.total_overlap.total_seconds())


def compute_overlap(
    reference: TimeInterval,
    candidates: list[dict],
    user_id: str | None = None,
    billable: bool | None = None,
) -> OverlapResult:
    """
    Overlap every candidate entry with ``reference``.

    Candidates are filtered by user and billable flag first. Entries with zero
    overlap are left out of ``per_entry`` but still counted in ``total_entries``.
    Entries without a usable start/end are skipped and counted.
    """
    result = OverlapResult(reference=reference)

    for entry in candidates:
        if not matches_user(entry, user_id):
            continue
        result.total_entries += 1
        if entry.get("billable") is True:
            result.billable_entries += 1
        if not matches_billable(entry, billable):
            continue

        try:
            interval = entry_interval(entry)
        except MalformedRecord:
            result.skipped_count += 1
            continue

        shared = overlap(reference, interval)
        if shared > ZERO:
            result.per_entry.append(EntryOverlap(entry=entry, overlap=shared))
            result.total_overlap += shared

    return result
