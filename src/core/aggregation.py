"""
Hour totals over a reporting bucket.

Durations are summed in seconds and converted to hours only at the end, with
round-half-up to two decimals, so per-entry rounding never compounds.
"""

from collections.abc import Callable
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from core.buckets import Bucket, in_bucket
from core.config import SECONDS_PER_HOUR
from core.errors import MalformedRecord
from core.validation import entry_duration_seconds, entry_is_billable, entry_local_date

ALL_USERS = "all"
TWO_PLACES = Decimal("0.01")


def round_hours(seconds: float) -> float:
    """Seconds to hours, rounded half-up to two decimals."""
    hours = Decimal(str(seconds)) / Decimal(SECONDS_PER_HOUR)
    return float(hours.quantize(TWO_PLACES, rounding=ROUND_HALF_UP))


def percentage(part: float, whole: float) -> float:
    """part / whole as a percentage rounded half-up to two decimals; 0 when whole is 0."""
    if not whole:
        return 0.0
    value = Decimal(str(part)) * 100 / Decimal(str(whole))
    return float(value.quantize(TWO_PLACES, rounding=ROUND_HALF_UP))


def matches_user(entry: dict, user_id: str | None) -> bool:
    return user_id is None or user_id == ALL_USERS or entry.get("userId") == user_id


def matches_billable(entry: dict, billable: bool | None) -> bool:
    return billable is None or entry.get("billable") is billable


@dataclass
class HoursSummary:
    """Running totals for one bucket (or one group inside a bucket)."""

    billable_seconds: float = 0.0
    non_billable_seconds: float = 0.0
    entry_count: int = 0
    skipped_count: int = 0

    def add(self, seconds: float, billable: bool) -> None:
        if billable:
            self.billable_seconds += seconds
        else:
            self.non_billable_seconds += seconds
        self.entry_count += 1

    @property
    def total_hours(self) -> float:
        return round_hours(self.billable_seconds + self.non_billable_seconds)

    @property
    def billable_hours(self) -> float:
        return round_hours(self.billable_seconds)

    @property
    def non_billable_hours(self) -> float:
        return round_hours(self.non_billable_seconds)

    @property
    def billable_rate(self) -> float:
        return percentage(
            self.billable_seconds, self.billable_seconds + self.non_billable_seconds
        )

    def to_dict(self) -> dict:
        return {
            "totalHours": self.total_hours,
            "billableHours": self.billable_hours,
            "nonBillableHours": self.non_billable_hours,
            "billableRate": self.billable_rate,
            "entryCount": self.entry_count,
            "skippedCount": self.skipped_count,
        }


@dataclass
class AccountedEntry:
    """A stored entry together with the values the engine derived from it."""

    entry: dict
    seconds: float
    billable: bool


@dataclass
class Selection:
    entries: list[AccountedEntry] = field(default_factory=list)
    skipped_count: int = 0


def select_entries(
    entries: list[dict],
    bucket: Bucket,
    user_id: str | None = None,
    billable: bool | None = None,
) -> Selection:
    """
    Entries matching user AND billable flag AND bucket.

    A malformed record is skipped and counted only when the filters would
    otherwise have let it through: one dated outside the bucket, or carrying
    the other billable flag, is simply not selected.
    """
    selection = Selection()

    for entry in entries:
        if not matches_user(entry, user_id):
            continue
        try:
            entry_date = entry_local_date(entry)
        except MalformedRecord:
            selection.skipped_count += 1
            continue
        if not in_bucket(entry_date, bucket):
            continue
        if not matches_billable(entry, billable):
            continue
        try:
            flag = entry_is_billable(entry)
            seconds = entry_duration_seconds(entry)
        except MalformedRecord:
            selection.skipped_count += 1
            continue
        selection.entries.append(AccountedEntry(entry=entry, seconds=seconds, billable=flag))

    return selection


def aggregate(
    entries: list[dict],
    bucket: Bucket,
    user_id: str | None = None,
    billable: bool | None = None,
) -> HoursSummary:
    """Total, billable and non-billable hours of the matching entries in ``bucket``."""
    selection = select_entries(entries, bucket, user_id=user_id, billable=billable)
    summary = HoursSummary(skipped_count=selection.skipped_count)
    for accounted in selection.entries:
        summary.add(accounted.seconds, accounted.billable)
    return summary


@dataclass
class GroupedSummary:
    groups: dict[Any, HoursSummary] = field(default_factory=dict)
    skipped_count: int = 0

    def to_dict(self) -> dict:
        return {
            "groups": {str(key): summary.to_dict() for key, summary in self.groups.items()},
            "skippedCount": self.skipped_count,
        }


def aggregate_by(
    entries: list[dict],
    bucket: Bucket,
    key: str | Callable[[dict], Any],
    user_id: str | None = None,
    billable: bool | None = None,
) -> GroupedSummary:
    """
    Aggregate per group, e.g. key="userId" or key="caseId".

    Groups appear in order of first occurrence.
    """
    key_func = key if callable(key) else (lambda entry: entry.get(key))
    selection = select_entries(entries, bucket, user_id=user_id, billable=billable)

    grouped = GroupedSummary(skipped_count=selection.skipped_count)
    for accounted in selection.entries:
        group = key_func(accounted.entry)
        grouped.groups.setdefault(group, HoursSummary()).add(accounted.seconds, accounted.billable)
    return grouped
