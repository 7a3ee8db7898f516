"""
SQLite database operations: request logs, goal history and generated reports.
"""

import sqlite3
from datetime import date
from pathlib import Path

from core.config import DB_PATH


def get_connection(db_path: Path | None = None) -> sqlite3.Connection:
    """Get a database connection, creating the parent directory if needed."""
    path = Path(db_path or DB_PATH)
    path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(path)
    conn.execute("PRAGMA foreign_keys = ON")
    return conn


def create_schema(conn: sqlite3.Connection) -> None:
    """Create all tables and indexes if they don't exist."""
    cursor = conn.cursor()

    cursor.execute("""
        CREATE TABLE IF NOT EXISTS reports (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            type TEXT NOT NULL CHECK(type IN ('billable_report_daily', 'billable_report_weekly', 'billable_report_monthly', 'billable_report_quarterly', 'billable_report_yearly')),
            name TEXT UNIQUE NOT NULL,
            create_date TEXT DEFAULT CURRENT_TIMESTAMP
        )
    """)

    cursor.execute("""
        CREATE TABLE IF NOT EXISTS goal_history (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            goal_id TEXT NOT NULL,
            user_id TEXT,
            goal_name TEXT,
            goal_type TEXT,
            frequency TEXT NOT NULL,
            target_value REAL NOT NULL,
            actual_value REAL NOT NULL,
            status TEXT NOT NULL CHECK(status IN ('Met', 'Missed')),
            period_start TEXT NOT NULL,
            period_end TEXT NOT NULL,
            completion_date TEXT NOT NULL,
            goal_scope TEXT NOT NULL CHECK(goal_scope IN ('PERSONAL', 'TEAM'))
        )
    """)

    cursor.execute("""
        CREATE TABLE IF NOT EXISTS api_requests (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            request_id TEXT UNIQUE NOT NULL,
            timestamp TEXT NOT NULL,
            endpoint TEXT NOT NULL,
            method TEXT NOT NULL,
            client_ip TEXT,
            user_id TEXT,
            timeframe TEXT,
            status_code INTEGER NOT NULL,
            error_code TEXT,
            error_message TEXT,
            processing_time_ms INTEGER NOT NULL,
            entry_count INTEGER,
            skipped_count INTEGER,
            total_hours REAL
        )
    """)

    cursor.execute("""
        CREATE TABLE IF NOT EXISTS api_request_details (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            request_id TEXT NOT NULL,
            detail_type TEXT NOT NULL CHECK(detail_type IN ('validation_error', 'skipped_record', 'warning')),
            message TEXT NOT NULL,
            FOREIGN KEY (request_id) REFERENCES api_requests(request_id)
        )
    """)

    cursor.execute(
        "CREATE INDEX IF NOT EXISTS idx_api_requests_timestamp ON api_requests(timestamp)"
    )
    cursor.execute(
        "CREATE INDEX IF NOT EXISTS idx_api_requests_status ON api_requests(status_code)"
    )
    cursor.execute(
        "CREATE INDEX IF NOT EXISTS idx_api_request_details_request ON api_request_details(request_id)"
    )
    cursor.execute(
        "CREATE INDEX IF NOT EXISTS idx_goal_history_user ON goal_history(user_id)"
    )
    # One row per goal, user and period; an ownerless goal gets a row per user.
    cursor.execute(
        "CREATE UNIQUE INDEX IF NOT EXISTS idx_goal_history_period "
        "ON goal_history(goal_id, IFNULL(user_id, ''), period_start)"
    )

    conn.commit()


def generate_report_name(report_type: str, as_of_date: date, conn: sqlite3.Connection) -> str:
    """
    Generate unique report name with auto-incremented suffix.

    Example: billable_report_daily_2025_08_12_a, billable_report_monthly_2025_08_a
    """
    # Coarse reports use YYYY_MM (or YYYY), daily and weekly use YYYY_MM_DD
    if report_type.endswith("yearly"):
        date_str = as_of_date.strftime("%Y")
    elif report_type.endswith(("monthly", "quarterly")):
        date_str = as_of_date.strftime("%Y_%m")
    else:
        date_str = as_of_date.strftime("%Y_%m_%d")
    base_pattern = f"{report_type}_{date_str}_"

    cursor = conn.cursor()
    cursor.execute(
        "SELECT name FROM reports WHERE name LIKE ? ORDER BY name DESC",
        (f"{base_pattern}%",),
    )
    existing = cursor.fetchall()

    if not existing:
        return f"{base_pattern}a"

    # Find the highest suffix
    highest_suffix = "a"
    for (name,) in existing:
        suffix = name.replace(base_pattern, "")
        if suffix and suffix > highest_suffix:
            highest_suffix = suffix

    next_suffix = chr(ord(highest_suffix) + 1)
    return f"{base_pattern}{next_suffix}"


def create_report_record(
    conn: sqlite3.Connection, report_type: str, report_name: str
) -> int:
    """Create report record and return report_id."""
    cursor = conn.cursor()
    cursor.execute(
        "INSERT INTO reports (type, name) VALUES (?, ?)",
        (report_type, report_name),
    )
    conn.commit()
    return cursor.lastrowid


def insert_goal_history(conn: sqlite3.Connection, records: list[dict]) -> int:
    """
    Insert goal evaluation records; re-evaluating the same goal, user and period replaces the old row.

    Returns the number of rows written.
    """
    cursor = conn.cursor()
    for record in records:
        cursor.execute(
            """
            INSERT OR REPLACE INTO goal_history (
                goal_id, user_id, goal_name, goal_type, frequency,
                target_value, actual_value, status, period_start,
                period_end, completion_date, goal_scope
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                record["goalId"],
                record["userId"],
                record["goalName"],
                record["goalType"],
                record["frequency"],
                record["targetValue"],
                record["actualValue"],
                record["status"],
                record["periodStart"],
                record["periodEnd"],
                record["completionDate"],
                record["goalScope"],
            ),
        )
    conn.commit()
    return len(records)


def fetch_goal_history(conn: sqlite3.Connection, user_id: str | None = None) -> list[dict]:
    """Goal history rows, newest period first, optionally for one user."""
    cursor = conn.cursor()
    query = """
        SELECT goal_id, user_id, goal_name, goal_type, frequency, target_value,
               actual_value, status, period_start, period_end, completion_date, goal_scope
        FROM goal_history
    """
    params: tuple = ()
    if user_id:
        query += " WHERE user_id = ?"
        params = (user_id,)
    query += " ORDER BY period_start DESC, goal_id"
    cursor.execute(query, params)

    keys = (
        "goalId", "userId", "goalName", "goalType", "frequency", "targetValue",
        "actualValue", "status", "periodStart", "periodEnd", "completionDate", "goalScope",
    )
    return [dict(zip(keys, row)) for row in cursor.fetchall()]
