#!/usr/bin/env python3
"""
Create a billable hours Excel report from the time entry store.

Generates a workbook with sheets:
- Time Entries: entries accounted to the bucket
- Billable Summary: billable/non-billable hours and billable rate per user
- Goals: goal completion for the bucket's view
- Errors: malformed records (only when there are any)

Usage:
    uv run python src/scripts/create_billable_report.py --timeframe monthly --date 2025-08-12
"""

import argparse
import sys
import traceback
from datetime import datetime, time
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.aggregation import aggregate
from core.buckets import bucket_bounds
from core.config import DEFAULT_TIMEFRAME, OUTPUT_DIR, PERSONAL_GOALS_PATH, TIME_ENTRIES_PATH
from core.database import create_report_record, create_schema, generate_report_name, get_connection
from core.goals import goal_completion_counts
from core.parsing import parse_date
from services.goals import evaluate_user_goals, normalize_user
from services.reports import create_billable_workbook, format_bucket_title, save_billable_report
from services.store import JsonStore


def resolve_as_of(date_str: str | None) -> datetime:
    """Reference instant for the report: noon of --date, or now."""
    if date_str:
        return datetime.combine(parse_date(date_str), time(12)).astimezone()
    return datetime.now().astimezone()


def main(timeframe: str, date_str: str | None = None, user_id: str | None = None):
    """Main entry point."""
    try:
        # 1. Resolve the bucket
        user_id = normalize_user(user_id)
        now = resolve_as_of(date_str)
        bucket = bucket_bounds(now, timeframe)
        print(f"Generating report for {format_bucket_title(bucket)}")

        # 2. Load snapshots
        entries = JsonStore(TIME_ENTRIES_PATH).read()
        goals = JsonStore(PERSONAL_GOALS_PATH).read()
        print(f"Loaded {len(entries)} time entries and {len(goals)} goals")

        # 3. Aggregate
        summary = aggregate(entries, bucket, user_id=user_id)
        print(f"Entries in bucket: {summary.entry_count}")
        print(f"Billable hours: {summary.billable_hours}  Non-billable hours: {summary.non_billable_hours}")
        if summary.skipped_count:
            print(f"Skipped malformed records: {summary.skipped_count}")

        goals, completions = evaluate_user_goals(goals, entries, now, bucket.unit, user_id)
        counts = goal_completion_counts(completions)
        print(f"Goals completed: {counts.display}")

        # 4. Create report record
        report_type = f"billable_report_{bucket.unit.value}"
        conn = get_connection()
        try:
            create_schema(conn)
            report_name = generate_report_name(report_type, now.date(), conn)
            report_id = create_report_record(conn, report_type, report_name)
        finally:
            conn.close()
        print(f"\nCreated report: {report_name} (ID: {report_id})")

        # 5. Generate Excel file
        wb = create_billable_workbook(entries, bucket, goals, completions, user_id=user_id)
        output_path = OUTPUT_DIR / "reports" / bucket.unit.value / f"{report_name}.xlsx"
        save_billable_report(wb, output_path)

        print("\nDone!")
        return output_path

    except Exception as e:
        print(f"\nError: {e}")
        traceback.print_exc()
        raise


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Generate billable hours report")
    parser.add_argument(
        "--timeframe",
        default=DEFAULT_TIMEFRAME,
        help="daily, weekly, monthly, quarterly or yearly",
    )
    parser.add_argument(
        "--date",
        help="Any date inside the report period. Defaults to today.",
    )
    parser.add_argument(
        "--user",
        help="Limit the report to one user ID.",
    )
    args = parser.parse_args()

    try:
        main(args.timeframe, args.date, args.user)
    except Exception:
        sys.exit(1)
