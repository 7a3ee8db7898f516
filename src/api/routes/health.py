"""Health check endpoint."""

import asyncio
import json
from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from api.dependencies import get_entry_store, get_goal_store
from api.models.responses import HealthResponse
from core.config import API_VERSION, DATA_DIR
from services.store import JsonStore

router = APIRouter()


def _collection_sizes(entry_store: JsonStore, goal_store: JsonStore) -> tuple[int, int]:
    return len(entry_store.read()), len(goal_store.read())


@router.get("/health", response_model=HealthResponse)
async def health_check(
    entry_store: JsonStore = Depends(get_entry_store),
    goal_store: JsonStore = Depends(get_goal_store),
):
    """
    Health check endpoint for monitoring.

    Returns 200 when the data directory exists and both collections parse,
    503 otherwise.
    """
    timestamp = datetime.now(timezone.utc).isoformat()
    data_dir_available = DATA_DIR.is_dir()

    error = None
    entry_count = goal_count = None
    if not data_dir_available:
        error = "Data directory not found"
    else:
        try:
            entry_count, goal_count = await asyncio.to_thread(
                _collection_sizes, entry_store, goal_store
            )
        except (OSError, json.JSONDecodeError) as e:
            error = f"Collection unreadable: {e}"

    health = HealthResponse(
        status="unhealthy" if error else "healthy",
        version=API_VERSION,
        data_dir_available=data_dir_available,
        entry_count=entry_count,
        goal_count=goal_count,
        timestamp=timestamp,
        error=error,
    )
    if error:
        return JSONResponse(status_code=503, content=health.model_dump())
    return health
