"""Tests for building, appending and deleting time entries."""

from datetime import datetime, timedelta

import pytest

from core.buckets import bucket_bounds
from core.errors import InvalidDate, InvalidTime, NonPositiveDuration
from core.intervals import parse_timestamp
from core.validation import validate_time_entry
from services.time_entries import (
    append_entry,
    build_clock_entry,
    build_manual_entry,
    entries_in_bucket,
    remove_entry,
)


class TestBuildManualEntry:
    def test_start_and_end(self):
        entry = build_manual_entry("cole", "8/12/2025", "Deposition prep", case_id="case-1",
                                   start="9:00 AM", end="5:00 PM")

        assert entry["duration"] == 28800
        assert entry["billable"] is True
        assert entry["source"] == "manual-api"
        assert entry["status"] == "COMPLETED"
        assert entry["id"].startswith("entry-")
        assert parse_timestamp(entry["startTime"]) == datetime(2025, 8, 12, 9).astimezone()
        assert parse_timestamp(entry["date"]) == datetime(2025, 8, 12).astimezone()
        assert validate_time_entry(entry) == []

    def test_duration_only(self):
        entry = build_manual_entry("cole", "2025-08-12", "Research", duration=5400, billable=False)

        assert entry["duration"] == 5400
        assert entry["billable"] is False
        start = parse_timestamp(entry["startTime"])
        end = parse_timestamp(entry["endTime"])
        assert end - start == timedelta(seconds=5400)

    def test_end_before_start(self):
        with pytest.raises(NonPositiveDuration):
            build_manual_entry("cole", "2025-08-12", "Research", start="9:00AM", end="8:00AM")

    def test_negative_duration(self):
        with pytest.raises(NonPositiveDuration):
            build_manual_entry("cole", "2025-08-12", "Research", duration=-60)

    def test_bad_date(self):
        with pytest.raises(InvalidDate):
            build_manual_entry("cole", "2025-19-01", "Research", start="9:00AM", end="10:00AM")

    def test_bad_time(self):
        with pytest.raises(InvalidTime):
            build_manual_entry("cole", "2025-08-12", "Research", start="9:00AM", end="later")


class TestBuildClockEntry:
    def test_clock_pair(self):
        entry = build_clock_entry("cole", "2025-08-12T13:00:00Z", "2025-08-12T15:30:00Z",
                                  "Client call")

        assert entry["duration"] == 9000
        assert entry["source"] == "clock-session"
        assert entry["startTime"] == "2025-08-12T13:00:00.000Z"
        assert validate_time_entry(entry) == []

    def test_clock_out_before_clock_in(self):
        with pytest.raises(NonPositiveDuration):
            build_clock_entry("cole", "2025-08-12T15:00:00Z", "2025-08-12T13:00:00Z", "Client call")

    def test_zero_length_session(self):
        with pytest.raises(NonPositiveDuration):
            build_clock_entry("cole", "2025-08-12T15:00:00Z", "2025-08-12T15:00:00Z", "Client call")


class TestSnapshotEdits:
    def test_append_does_not_mutate(self, sample_entries):
        new = {"id": "entry-new"}
        updated = append_entry(sample_entries, new)

        assert updated[-1] is new
        assert len(updated) == len(sample_entries) + 1
        assert new not in sample_entries

    def test_remove_existing(self, sample_entries):
        remaining, removed = remove_entry(sample_entries, "entry-2")

        assert removed["id"] == "entry-2"
        assert "entry-2" not in [entry["id"] for entry in remaining]
        assert len(remaining) == len(sample_entries) - 1

    def test_remove_missing(self, sample_entries):
        remaining, removed = remove_entry(sample_entries, "entry-404")

        assert removed is None
        assert remaining == sample_entries


def test_entries_in_bucket_newest_first(sample_entries):
    bucket = bucket_bounds(datetime(2025, 8, 12, 12).astimezone(), "daily")

    selected = entries_in_bucket(sample_entries, bucket, user_id="cole")

    assert [entry["id"] for entry in selected] == ["entry-3", "entry-2", "entry-1"]
