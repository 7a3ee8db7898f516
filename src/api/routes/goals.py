"""Personal goals and goal completion endpoints."""

import asyncio
import uuid
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Query, Request

from api.dependencies import get_entry_store, get_goal_store, get_now, verify_api_key
from api.logging import annotate_request
from api.models.requests import GoalRequest
from core.buckets import parse_unit
from core.config import DEFAULT_TIMEFRAME
from core.database import create_schema, get_connection, insert_goal_history
from core.intervals import format_timestamp
from services.goals import goal_history_records, goals_for_user
from services.metrics import goal_summary
from services.store import JsonStore
from services.time_entries import append_goal

router = APIRouter(prefix="/v1", dependencies=[Depends(verify_api_key)])


@router.get("/personal-goals")
async def list_personal_goals(
    user_id: str | None = Query(None, alias="userId"),
    store: JsonStore = Depends(get_goal_store),
):
    goals = await asyncio.to_thread(store.read)
    return {"success": True, "personalGoals": goals_for_user(goals, user_id)}


@router.post("/personal-goals")
async def create_personal_goal(
    body: GoalRequest,
    store: JsonStore = Depends(get_goal_store),
):
    """Create a goal; its frequency must be a known timeframe."""
    unit = parse_unit(body.frequency)
    goal = {
        "id": f"goal-{uuid.uuid4().hex[:12]}",
        "userId": body.user_id,
        "title": body.title,
        "type": body.type,
        "frequency": unit.value,
        "target": body.target,
        "current": body.current,
        "status": "active",
        "scope": body.scope.upper(),
        "createdAt": format_timestamp(datetime.now(timezone.utc)),
    }
    await asyncio.to_thread(store.update, lambda snapshot: append_goal(snapshot, goal))
    return {"success": True, "goal": goal}


@router.get("/goals/completion")
async def get_goal_completion(
    request: Request,
    timeframe: str = Query(DEFAULT_TIMEFRAME, alias="timeFrame"),
    user_id: str | None = Query(None, alias="userId"),
    now: datetime = Depends(get_now),
    goal_store: JsonStore = Depends(get_goal_store),
    entry_store: JsonStore = Depends(get_entry_store),
):
    """
    Goal completion counts for a dashboard view.

    A daily goal counts in daily and coarser views, a monthly goal only in
    monthly and coarser ones.
    """
    goals = await asyncio.to_thread(goal_store.read)
    entries = await asyncio.to_thread(entry_store.read)
    summary = goal_summary(goals, entries, timeframe, now, user_id=user_id)
    annotate_request(request, user_id=user_id, timeframe=summary["timeframe"])

    return {"success": True, **summary}


@router.post("/goals/evaluate")
async def evaluate_goal_history(
    request: Request,
    timeframe: str = Query("yearly", alias="timeFrame"),
    user_id: str | None = Query(None, alias="userId"),
    now: datetime = Depends(get_now),
    goal_store: JsonStore = Depends(get_goal_store),
    entry_store: JsonStore = Depends(get_entry_store),
):
    """Evaluate goals in view as Met/Missed for their current period and store the history."""
    goals = await asyncio.to_thread(goal_store.read)
    entries = await asyncio.to_thread(entry_store.read)
    records = goal_history_records(goals, entries, now, timeframe, user_id=user_id)

    def persist() -> int:
        conn = get_connection()
        try:
            create_schema(conn)
            return insert_goal_history(conn, records)
        finally:
            conn.close()

    written = await asyncio.to_thread(persist)
    annotate_request(request, user_id=user_id, timeframe=parse_unit(timeframe).value)

    return {"success": True, "evaluated": written, "goalHistory": records}
