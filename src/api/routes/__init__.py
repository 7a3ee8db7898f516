"""API route modules."""

from .goals import router as goals_router
from .health import router as health_router
from .metrics import router as metrics_router
from .reports import router as reports_router
from .time_entries import router as time_entries_router
from .work_hours import router as work_hours_router

__all__ = [
    "goals_router",
    "health_router",
    "metrics_router",
    "reports_router",
    "time_entries_router",
    "work_hours_router",
]
