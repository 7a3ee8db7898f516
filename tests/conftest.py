"""
Pytest configuration and shared fixtures.

Timestamps are built from local wall-clock times so the tests hold in any
host timezone.
"""

import sys
from datetime import datetime, time, timedelta
from pathlib import Path

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

TEST_API_KEY = "test-api-key"


def local(year, month, day, hour=0, minute=0) -> datetime:
    """Aware datetime for a local wall-clock time."""
    return datetime(year, month, day, hour, minute).astimezone()


@pytest.fixture
def make_entry():
    """Factory for stored time entries starting at a local wall-clock time."""

    def _make_entry(entry_id, user_id, start, hours, billable=True, case_id="case-1",
                    description="Drafted motion"):
        start = start if start.tzinfo else start.astimezone()
        end = start + timedelta(hours=hours)
        anchor = datetime.combine(start.date(), time.min).astimezone()
        return {
            "id": entry_id,
            "userId": user_id,
            "teamId": None,
            "caseId": case_id,
            "date": anchor.isoformat(),
            "startTime": start.isoformat(),
            "endTime": end.isoformat(),
            "duration": int(hours * 3600),
            "billable": billable,
            "description": description,
            "status": "COMPLETED",
            "source": "manual-api",
        }

    return _make_entry


@pytest.fixture
def sample_entries(make_entry):
    """Two users' entries in August 2025 (Tuesday 8/12 and neighbouring days)."""
    return [
        make_entry("entry-1", "cole", local(2025, 8, 12, 9), 4),
        make_entry("entry-2", "cole", local(2025, 8, 12, 14), 2),
        make_entry("entry-3", "cole", local(2025, 8, 12, 16), 1, billable=False,
                   description="Team meeting"),
        make_entry("entry-4", "cole", local(2025, 8, 4, 10), 3, case_id="case-2"),
        make_entry("entry-5", "dana", local(2025, 8, 12, 10), 5, case_id="case-2"),
        make_entry("entry-6", "dana", local(2025, 7, 31, 10), 2),
    ]


@pytest.fixture
def sample_goals():
    return [
        {
            "id": "goal-daily",
            "userId": "cole",
            "title": "Daily billable hours",
            "type": "billable_hours",
            "frequency": "daily",
            "target": 6,
            "current": 0,
            "scope": "PERSONAL",
        },
        {
            "id": "goal-monthly",
            "userId": "cole",
            "title": "Monthly billable hours",
            "type": "billable_hours",
            "frequency": "monthly",
            "target": 160,
            "current": 0,
            "scope": "PERSONAL",
        },
    ]


@pytest.fixture
def entry_store(tmp_path):
    from services.store import JsonStore

    return JsonStore(tmp_path / "time-entries.json")


@pytest.fixture
def goal_store(tmp_path):
    from services.store import JsonStore

    return JsonStore(tmp_path / "personal-goals.json")


@pytest.fixture
def db_path(tmp_path, monkeypatch):
    """Point every SQLite writer at a throwaway database."""
    import api.logging
    import core.database

    path = tmp_path / "db" / "timekeeping.db"
    monkeypatch.setattr(core.database, "DB_PATH", path)
    monkeypatch.setattr(api.logging, "DB_PATH", path)
    return path


@pytest.fixture
def client(entry_store, goal_store, db_path, tmp_path, monkeypatch):
    """TestClient wired to temporary stores and database."""
    from fastapi.testclient import TestClient

    import api.dependencies
    import api.routes.health
    from api.dependencies import get_entry_store, get_goal_store
    from api.main import app

    monkeypatch.setattr(api.dependencies, "TIMEKEEPING_API_KEY", TEST_API_KEY)
    monkeypatch.setattr(api.routes.health, "DATA_DIR", tmp_path)

    app.dependency_overrides[get_entry_store] = lambda: entry_store
    app.dependency_overrides[get_goal_store] = lambda: goal_store
    with TestClient(app) as test_client:
        test_client.headers.update({"X-API-Key": TEST_API_KEY})
        yield test_client
    app.dependency_overrides.clear()
