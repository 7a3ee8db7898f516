#!/usr/bin/env python3
"""Create the timekeeping SQLite3 database and the JSON collection files."""

import json
import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.config import DB_PATH, PERSONAL_GOALS_PATH, TIME_ENTRIES_PATH
from core.database import create_schema, get_connection


def create_collections():
    """Create empty JSON collections if they don't exist."""
    for path in (TIME_ENTRIES_PATH, PERSONAL_GOALS_PATH):
        path.parent.mkdir(parents=True, exist_ok=True)
        if not path.exists():
            path.write_text(json.dumps([], indent=2))
            print(f"Created collection: {path}")


def create_database():
    """Create the database and tables if they don't exist."""
    conn = get_connection(DB_PATH)
    try:
        create_schema(conn)
    finally:
        conn.close()
    print(f"Database created successfully at: {DB_PATH}")


if __name__ == "__main__":
    create_collections()
    create_database()
