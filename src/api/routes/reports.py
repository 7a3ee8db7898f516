"""Excel report download endpoint."""

import asyncio
from datetime import datetime

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import Response

from api.dependencies import get_entry_store, get_goal_store, get_now, verify_api_key
from api.logging import annotate_request
from core.aggregation import aggregate
from core.buckets import bucket_bounds
from core.config import DEFAULT_TIMEFRAME
from services.goals import evaluate_user_goals, normalize_user
from services.reports import (
    XLSX_MEDIA_TYPE,
    create_billable_workbook,
    report_filename,
    workbook_to_bytes,
)
from services.store import JsonStore

router = APIRouter(prefix="/v1/reports", dependencies=[Depends(verify_api_key)])


def _build_report(entries, goals, timeframe, now, user_id) -> tuple[bytes, str]:
    bucket = bucket_bounds(now, timeframe)
    user_filter = normalize_user(user_id)
    goals, completions = evaluate_user_goals(goals, entries, now, bucket.unit, user_filter)
    wb = create_billable_workbook(entries, bucket, goals, completions, user_id=user_filter)
    return workbook_to_bytes(wb), report_filename(bucket)


@router.get("/billable")
async def download_billable_report(
    request: Request,
    timeframe: str = Query(DEFAULT_TIMEFRAME),
    user_id: str = Query("all", alias="userId"),
    now: datetime = Depends(get_now),
    entry_store: JsonStore = Depends(get_entry_store),
    goal_store: JsonStore = Depends(get_goal_store),
):
    """Excel workbook with entry detail, per-user summary and goals for the timeframe."""
    entries = await asyncio.to_thread(entry_store.read)
    goals = await asyncio.to_thread(goal_store.read)

    excel_bytes, output_filename = await asyncio.to_thread(
        _build_report, entries, goals, timeframe, now, user_id
    )

    summary = aggregate(entries, bucket_bounds(now, timeframe), user_id=user_id)
    annotate_request(request, user_id=user_id, timeframe=timeframe,
                     entry_count=summary.entry_count, skipped_count=summary.skipped_count,
                     total_hours=summary.total_hours)

    return Response(
        content=excel_bytes,
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{output_filename}"'},
    )
