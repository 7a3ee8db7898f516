"""Billable hours and case breakdown metrics endpoints."""

import asyncio
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status

from api.dependencies import get_entry_store, get_now, verify_api_key
from api.logging import annotate_request
from api.models.responses import ErrorCodes
from core.config import DEFAULT_TIMEFRAME
from services.metrics import billable_hours_metrics, case_breakdown
from services.store import JsonStore

router = APIRouter(prefix="/v1/metrics", dependencies=[Depends(verify_api_key)])


@router.get("/billable-hours")
async def get_billable_hours(
    request: Request,
    timeframe: str = Query(DEFAULT_TIMEFRAME),
    user_id: str = Query("all", alias="userId"),
    now: datetime = Depends(get_now),
    store: JsonStore = Depends(get_entry_store),
):
    """Billable/non-billable totals for the timeframe, with daily and per-user breakdowns."""
    entries = await asyncio.to_thread(store.read)
    data = billable_hours_metrics(entries, timeframe, now, user_id=user_id)

    annotate_request(request, user_id=user_id, timeframe=data["timeframe"],
                     entry_count=data["entryCount"], skipped_count=data["skippedCount"],
                     total_hours=data["totalHours"])
    if data["skippedCount"]:
        annotate_request(request, details=[
            ("skipped_record", f"{data['skippedCount']} malformed time entries skipped")
        ])

    return {"success": True, "data": data}


@router.get("/case-breakdown")
async def get_case_breakdown(
    request: Request,
    timeframe: str = Query(DEFAULT_TIMEFRAME, alias="timeFrame"),
    user_id: str | None = Query(None, alias="userId"),
    now: datetime = Depends(get_now),
    store: JsonStore = Depends(get_entry_store),
):
    """Hours per case for one user, largest case first."""
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={
                "error": "Missing required parameters",
                "code": ErrorCodes.INVALID_REQUEST,
                "details": ["userId is required"],
            },
        )

    entries = await asyncio.to_thread(store.read)
    data = case_breakdown(entries, timeframe, now, user_id=user_id)
    annotate_request(request, user_id=user_id, timeframe=data["timeframe"],
                     entry_count=sum(case["entryCount"] for case in data["breakdown"]),
                     skipped_count=data["summary"]["skippedCount"],
                     total_hours=data["summary"]["totalHours"])

    return {"success": True, "data": data}
