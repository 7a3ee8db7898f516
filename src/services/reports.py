"""
Excel report generation for a reporting bucket.
"""

from datetime import date
from io import BytesIO
from pathlib import Path

from openpyxl import Workbook
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter

from core.aggregation import aggregate, aggregate_by, round_hours
from core.buckets import Bucket, to_local
from core.config import DETAIL_HEADERS, GOAL_HEADERS, SUMMARY_HEADERS
from core.goals import STATUS_MET, STATUS_MISSED, GoalCompletion
from core.validation import entry_duration_seconds, entry_local_date, validate_entries
from services.time_entries import entries_in_bucket

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def format_date_display(d: date) -> str:
    """Format date as M/D/YYYY (platform-safe, no zero-padding)."""
    return f"{d.month}/{d.day}/{d.year}"


def format_time_display(value: str | None) -> str:
    """Local wall-clock time as H:MM AM/PM, or '' when missing."""
    if not value:
        return ""
    local = to_local(value)
    hour = local.hour % 12 or 12
    suffix = "AM" if local.hour < 12 else "PM"
    return f"{hour}:{local.minute:02d} {suffix}"


def format_bucket_title(bucket: Bucket) -> str:
    """E.g. 'Monthly 8/1/2025 - 8/31/2025'."""
    return (
        f"{bucket.unit.value.capitalize()} "
        f"{format_date_display(bucket.start_date)} - {format_date_display(bucket.end_date)}"
    )


def write_header_row(ws, headers: list[str]):
    for col_idx, header in enumerate(headers, start=1):
        cell = ws.cell(row=1, column=col_idx, value=header)
        cell.font = Font(bold=True)


def autosize_columns(ws, headers: list[str], width: int = 14):
    for col_idx, header in enumerate(headers, start=1):
        ws.column_dimensions[get_column_letter(col_idx)].width = max(width, len(header) + 2)


def write_excel_detail_sheet(ws, entries: list[dict]):
    """
    Write the entry detail sheet.

    Columns: Date, User, Case, Start, End, Hours, Billable, Description
    """
    write_header_row(ws, DETAIL_HEADERS)

    for row_idx, entry in enumerate(entries, start=2):
        row_data = [
            format_date_display(entry_local_date(entry)),
            entry.get("userId") or "",
            entry.get("caseId") or "",
            format_time_display(entry.get("startTime")),
            format_time_display(entry.get("endTime")),
            round_hours(entry_duration_seconds(entry)),
            "Yes" if entry.get("billable") else "No",
            entry.get("description") or "",
        ]
        for col_idx, value in enumerate(row_data, start=1):
            ws.cell(row=row_idx, column=col_idx, value=value)

    autosize_columns(ws, DETAIL_HEADERS)


def write_excel_summary_sheet(ws, entries: list[dict], bucket: Bucket, user_id: str | None):
    """
    Write the per-user summary sheet.

    Structure:
    Row 1: Headers - User | Billable | Non-billable | Total | Rate | Entries
    Rows 2..n: one row per user, sorted by user
    Last row: Total (engine totals, not a column sum, so rounding happens once)
    """
    write_header_row(ws, SUMMARY_HEADERS)

    by_user = aggregate_by(entries, bucket, "userId", user_id=user_id)
    row_idx = 2
    for user, summary in sorted(by_user.groups.items(), key=lambda item: str(item[0])):
        row_data = [
            str(user),
            summary.billable_hours,
            summary.non_billable_hours,
            summary.total_hours,
            summary.billable_rate,
            summary.entry_count,
        ]
        for col_idx, value in enumerate(row_data, start=1):
            ws.cell(row=row_idx, column=col_idx, value=value)
        row_idx += 1

    total = aggregate(entries, bucket, user_id=user_id)
    total_row = ["Total", total.billable_hours, total.non_billable_hours,
                 total.total_hours, total.billable_rate, total.entry_count]
    for col_idx, value in enumerate(total_row, start=1):
        cell = ws.cell(row=row_idx, column=col_idx, value=value)
        cell.font = Font(bold=True)

    if total.skipped_count:
        ws.cell(row=row_idx + 2, column=1, value=f"Skipped malformed records: {total.skipped_count}")

    autosize_columns(ws, SUMMARY_HEADERS)


def write_excel_goals_sheet(ws, goals: list[dict], completions: list[GoalCompletion]):
    """Write one row per goal in view: name, type, frequency, target, current, Met/Missed."""
    write_header_row(ws, GOAL_HEADERS)

    goals_by_id = {str(goal.get("id")): goal for goal in goals}
    for row_idx, completion in enumerate(completions, start=2):
        goal = goals_by_id.get(completion.goal_id, {})
        row_data = [
            goal.get("title") or goal.get("name") or completion.goal_id,
            goal.get("type") or "",
            completion.unit.value,
            completion.target,
            completion.current,
            STATUS_MET if completion.completed else STATUS_MISSED,
        ]
        for col_idx, value in enumerate(row_data, start=1):
            ws.cell(row=row_idx, column=col_idx, value=value)

    autosize_columns(ws, GOAL_HEADERS)


def write_excel_errors_sheet(ws, entries: list[dict]):
    """List malformed records so they are visible rather than silently dropped."""
    write_header_row(ws, ["Entry ID", "User", "Error"])
    flagged = [entry for entry in validate_entries(entries) if entry["error_message"]]
    for row_idx, entry in enumerate(flagged, start=2):
        ws.cell(row=row_idx, column=1, value=str(entry.get("id") or ""))
        ws.cell(row=row_idx, column=2, value=str(entry.get("userId") or ""))
        ws.cell(row=row_idx, column=3, value=entry["error_message"])


def create_billable_workbook(
    entries: list[dict],
    bucket: Bucket,
    goals: list[dict] | None = None,
    completions: list[GoalCompletion] | None = None,
    user_id: str | None = None,
) -> Workbook:
    """
    Create the billable hours workbook.

    Sheet 1: "Time Entries" - entries accounted to the bucket
    Sheet 2: "Billable Summary" - per-user hours and billable rate
    Sheet 3: "Goals" - goal completion for the bucket's view (when goals given)
    Sheet 4: "Errors" - malformed records of the requested user (only if any)
    """
    wb = Workbook()
    wb.properties.title = format_bucket_title(bucket)

    ws_detail = wb.active
    ws_detail.title = "Time Entries"
    write_excel_detail_sheet(ws_detail, entries_in_bucket(entries, bucket, user_id=user_id))

    ws_summary = wb.create_sheet(title="Billable Summary")
    write_excel_summary_sheet(ws_summary, entries, bucket, user_id)

    if goals is not None and completions is not None:
        ws_goals = wb.create_sheet(title="Goals")
        write_excel_goals_sheet(ws_goals, goals, completions)

    user_entries = [
        entry for entry in entries
        if user_id in (None, "all") or entry.get("userId") == user_id
    ]
    if any(entry["error_message"] for entry in validate_entries(user_entries)):
        ws_errors = wb.create_sheet(title="Errors")
        write_excel_errors_sheet(ws_errors, user_entries)

    return wb


def workbook_to_bytes(wb: Workbook) -> bytes:
    buffer = BytesIO()
    wb.save(buffer)
    return buffer.getvalue()


def report_filename(bucket: Bucket) -> str:
    """E.g. billable_report_monthly_2025_08_01.xlsx"""
    return f"billable_report_{bucket.unit.value}_{bucket.start_date.strftime('%Y_%m_%d')}.xlsx"


def save_billable_report(wb: Workbook, output_path: Path):
    output_path.parent.mkdir(parents=True, exist_ok=True)
    wb.save(str(output_path))
    print(f"Saved Excel report to: {output_path}")
