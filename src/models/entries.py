"""
Data models for stored time entries and goals.

Stored records are plain JSON objects, so TypedDict describes their shape;
the engine's own values (intervals, buckets, summaries) are dataclasses in core.
"""

from typing import TypedDict


class TimeEntry(TypedDict, total=False):
    """Time entry as stored in the time-entries collection."""
    id: str
    userId: str
    teamId: str | None
    caseId: str | None
    date: str  # ISO-8601; accounted to its local calendar date
    startTime: str
    endTime: str
    duration: float  # seconds
    billable: bool
    description: str
    status: str
    source: str
    createdAt: str
    updatedAt: str


class Goal(TypedDict, total=False):
    """Personal or team goal."""
    id: str
    userId: str | None
    title: str
    type: str
    frequency: str  # daily | weekly | monthly | quarterly | annual
    target: float
    current: float
    status: str
    scope: str  # PERSONAL | TEAM
    createdAt: str


class OfficeSession(TypedDict):
    """Presence window reconciled against logged time; never stored."""
    userId: str
    officeStart: str
    officeEnd: str
    date: str
