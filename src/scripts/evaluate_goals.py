#!/usr/bin/env python3
"""
Evaluate personal goals as Met/Missed for their current period and store the history.

Meant to run at the end of a period (e.g. nightly from cron): each goal is
measured in its own bucket, so running it twice in one period replaces the
earlier row for that period.

Usage:
    uv run python src/scripts/evaluate_goals.py --user cole
"""

import argparse
import sys
import traceback
from datetime import datetime
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.buckets import TimeUnit
from core.config import PERSONAL_GOALS_PATH, TIME_ENTRIES_PATH
from core.database import create_schema, get_connection, insert_goal_history
from core.intervals import parse_timestamp
from services.goals import goal_history_records
from services.store import JsonStore


def main(as_of: str | None = None, user_id: str | None = None) -> list[dict]:
    """Main entry point."""
    try:
        now = parse_timestamp(as_of) if as_of else datetime.now().astimezone()
        print(f"Evaluating goals as of {now.isoformat(timespec='seconds')}")

        goals = JsonStore(PERSONAL_GOALS_PATH).read()
        entries = JsonStore(TIME_ENTRIES_PATH).read()
        records = goal_history_records(goals, entries, now, TimeUnit.YEAR, user_id=user_id)

        for record in records:
            print(
                f"  {record['goalName'] or record['goalId']} ({record['frequency']}): "
                f"{record['actualValue']}/{record['targetValue']} {record['status']}"
            )

        conn = get_connection()
        try:
            create_schema(conn)
            written = insert_goal_history(conn, records)
        finally:
            conn.close()
        print(f"\nStored {written} goal evaluation(s)")
        return records

    except Exception as e:
        print(f"\nError: {e}")
        traceback.print_exc()
        raise


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Evaluate goals and store goal history")
    parser.add_argument(
        "--as-of",
        help="Reference date or timestamp (ISO-8601). Defaults to now.",
    )
    parser.add_argument(
        "--user",
        help="Only evaluate goals of this user ID (\"all\" for everyone).",
    )
    args = parser.parse_args()

    try:
        main(args.as_of, args.user)
    except Exception:
        sys.exit(1)
