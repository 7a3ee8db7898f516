"""Tests for date, time-of-day and interval parsing."""

from datetime import date, datetime, timedelta

import pytest

from core.errors import InvalidDate, InvalidTime, NonPositiveDuration, TimeEngineError
from core.intervals import format_timestamp, parse_timestamp
from core.parsing import combine_local, parse_date, parse_interval, parse_time


class TestParseDate:
    def test_iso_date(self):
        assert parse_date("2025-08-12") == date(2025, 8, 12)

    def test_us_date(self):
        assert parse_date("8/12/2025") == date(2025, 8, 12)

    def test_us_date_zero_padded(self):
        assert parse_date("08/02/2025") == date(2025, 8, 2)

    def test_free_form_date(self):
        assert parse_date("Aug 12 2025") == date(2025, 8, 12)

    def test_surrounding_whitespace(self):
        assert parse_date("  2025-08-12 ") == date(2025, 8, 12)

    @pytest.mark.parametrize("value", ["", "   ", None, "2025-02-30", "13/45/2025", "not a date"])
    def test_invalid_dates(self, value):
        with pytest.raises(InvalidDate):
            parse_date(value)


class TestParseTime:
    @pytest.mark.parametrize(
        "value, expected",
        [
            ("9:00AM", (9, 0)),
            ("9:00 am", (9, 0)),
            ("5:00PM", (17, 0)),
            ("2:30 pm", (14, 30)),
            ("12:00 PM", (12, 0)),
            ("12:15 AM", (0, 15)),
            ("17:45", (17, 45)),
            ("9", (9, 0)),
            ("0:05", (0, 5)),
            ("9:00 P M", (21, 0)),
        ],
    )
    def test_valid_times(self, value, expected):
        assert parse_time(value) == expected

    @pytest.mark.parametrize("value", ["", "25:00", "9:60", "nine", "9:0", "9:00 XM"])
    def test_invalid_times(self, value):
        with pytest.raises(InvalidTime):
            parse_time(value)


class TestParseInterval:
    def test_business_day_is_eight_hours(self):
        interval = parse_interval("2025-08-12", "9:00AM", "5:00PM")

        assert interval.duration == timedelta(hours=8)
        assert interval.duration_seconds == 28800
        assert interval.start == datetime(2025, 8, 12, 9).astimezone()

    def test_us_date_and_24_hour_times(self):
        interval = parse_interval("8/12/2025", "13:15", "14:45")
        assert interval.duration_seconds == 5400

    def test_end_before_start_is_rejected(self):
        with pytest.raises(NonPositiveDuration):
            parse_interval("2025-08-12", "9:00AM", "8:00AM")

    def test_zero_length_is_rejected(self):
        with pytest.raises(NonPositiveDuration):
            parse_interval("2025-08-12", "9:00AM", "9:00 AM")

    def test_errors_are_value_errors_with_codes(self):
        with pytest.raises(ValueError) as excinfo:
            parse_interval("2025-08-12", "9:00AM", "noon-ish")
        assert isinstance(excinfo.value, TimeEngineError)
        assert excinfo.value.code == "INVALID_TIME"

    def test_combine_local_is_aware(self):
        value = combine_local(date(2025, 8, 12), 9, 30)
        assert value.tzinfo is not None
        assert value.replace(tzinfo=None) == datetime(2025, 8, 12, 9, 30)


class TestTimestamps:
    def test_zulu_suffix(self):
        value = parse_timestamp("2025-08-12T13:00:00Z")
        assert value.utcoffset() == timedelta(0)
        assert value.hour == 13

    def test_naive_timestamp_is_local(self):
        value = parse_timestamp("2025-08-12T09:00:00")
        assert value == datetime(2025, 8, 12, 9).astimezone()

    def test_invalid_timestamp(self):
        with pytest.raises(InvalidDate):
            parse_timestamp("yesterday-ish")

    def test_format_timestamp_is_utc_with_milliseconds(self):
        value = parse_timestamp("2025-08-12T09:00:00-04:00")
        assert format_timestamp(value) == "2025-08-12T13:00:00.000Z"
