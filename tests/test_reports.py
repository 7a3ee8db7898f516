"""Tests for the billable hours Excel workbook."""

from datetime import datetime
from io import BytesIO

from openpyxl import load_workbook

from core.buckets import bucket_bounds
from core.goals import evaluate_goals
from services.reports import (
    create_billable_workbook,
    format_bucket_title,
    format_date_display,
    format_time_display,
    report_filename,
    save_billable_report,
    workbook_to_bytes,
)

NOW = datetime(2025, 8, 12, 18).astimezone()


def rows(ws):
    return [list(row) for row in ws.iter_rows(values_only=True)]


def test_format_helpers():
    bucket = bucket_bounds(NOW, "monthly")

    assert format_date_display(bucket.start_date) == "8/1/2025"
    assert format_bucket_title(bucket) == "Monthly 8/1/2025 - 8/31/2025"
    assert format_time_display(datetime(2025, 8, 12, 14, 5).astimezone().isoformat()) == "2:05 PM"
    assert format_time_display(datetime(2025, 8, 12, 0, 30).astimezone().isoformat()) == "12:30 AM"
    assert format_time_display(None) == ""


def test_report_filename():
    assert report_filename(bucket_bounds(NOW, "weekly")) == "billable_report_weekly_2025_08_11.xlsx"


def test_workbook_sheets(sample_entries, sample_goals):
    bucket = bucket_bounds(NOW, "monthly")
    completions = evaluate_goals(sample_goals, sample_entries, NOW, bucket.unit)

    wb = load_workbook(BytesIO(workbook_to_bytes(
        create_billable_workbook(sample_entries, bucket, sample_goals, completions)
    )))

    assert wb.sheetnames == ["Time Entries", "Billable Summary", "Goals"]
    assert wb.properties.title == "Monthly 8/1/2025 - 8/31/2025"

    detail = rows(wb["Time Entries"])
    assert detail[0] == ["Date", "User", "Case", "Start", "End", "Hours", "Billable", "Description"]
    assert len(detail) == 6
    assert sum(row[5] for row in detail[1:]) == 15.0

    summary = rows(wb["Billable Summary"])
    assert summary[1][:4] == ["cole", 9.0, 1.0, 10.0]
    assert summary[2][:4] == ["dana", 5.0, 0.0, 5.0]
    assert summary[3][0] == "Total"
    assert summary[3][3] == 15.0

    goals = rows(wb["Goals"])
    assert [row[5] for row in goals[1:]] == ["Met", "Missed"]


def test_errors_sheet_for_malformed_records(sample_entries):
    bucket = bucket_bounds(NOW, "monthly")
    broken = {**sample_entries[0], "billable": "yes"}

    wb = create_billable_workbook([broken, *sample_entries[1:]], bucket, user_id="cole")

    assert wb.sheetnames == ["Time Entries", "Billable Summary", "Errors"]
    errors = rows(wb["Errors"])
    assert errors[1][0] == "entry-1"
    summary = rows(wb["Billable Summary"])
    assert summary[-1][0] == "Skipped malformed records: 1"


def test_user_filter(sample_entries):
    bucket = bucket_bounds(NOW, "monthly")

    wb = create_billable_workbook(sample_entries, bucket, user_id="dana")

    detail = rows(wb["Time Entries"])
    assert {row[1] for row in detail[1:]} == {"dana"}


def test_save_report(tmp_path, sample_entries):
    bucket = bucket_bounds(NOW, "daily")
    output_path = tmp_path / "reports" / "daily" / "report.xlsx"

    save_billable_report(create_billable_workbook(sample_entries, bucket), output_path)

    assert output_path.exists()
    assert load_workbook(output_path)["Time Entries"].max_row == 5
