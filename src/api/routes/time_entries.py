"""Time entry endpoints: manual entry, clock entries, listing and deletion."""

import asyncio
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status

from api.dependencies import get_entry_store, get_now, verify_api_key
from api.logging import annotate_request
from api.models.requests import ClockEntryRequest, ManualTimeRequest
from api.models.responses import ErrorCodes
from core.aggregation import aggregate, round_hours
from core.buckets import bucket_bounds
from core.config import DEFAULT_TIMEFRAME
from core.validation import validate_time_entry
from services.store import JsonStore
from services.time_entries import (
    append_entry,
    build_clock_entry,
    build_manual_entry,
    entries_in_bucket,
    remove_entry,
)

router = APIRouter(prefix="/v1", dependencies=[Depends(verify_api_key)])


async def _save_entry(store: JsonStore, entry: dict) -> dict:
    errors = validate_time_entry(entry)
    if errors:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={
                "error": "Time entry validation failed",
                "code": ErrorCodes.VALIDATION_ERROR,
                "details": errors,
            },
        )
    await asyncio.to_thread(store.update, lambda snapshot: append_entry(snapshot, entry))
    return entry


@router.post("/manual-time")
async def create_manual_time(
    request: Request,
    body: ManualTimeRequest,
    store: JsonStore = Depends(get_entry_store),
):
    """
    Create a time entry from a date and either start/end times or a duration.

    Example body: {"userId": "cole", "caseId": "case-1", "date": "8/12/2025",
    "start": "9:00 AM", "end": "5:00 PM", "description": "Deposition prep"}
    """
    if not body.duration and (not body.start or not body.end):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={
                "error": "Missing required fields: duration OR (start AND end times)",
                "code": ErrorCodes.INVALID_REQUEST,
                "details": [],
            },
        )

    entry = build_manual_entry(
        user_id=body.user_id,
        date_str=body.date,
        description=body.description,
        case_id=body.case_id,
        start=body.start,
        end=body.end,
        duration=body.duration,
        billable=body.billable,
    )
    await _save_entry(store, entry)
    annotate_request(request, user_id=body.user_id, entry_count=1,
                     total_hours=round_hours(entry["duration"]))

    return {"success": True, "timeEntry": entry}


@router.post("/time-entries")
async def create_clock_entry(
    request: Request,
    body: ClockEntryRequest,
    store: JsonStore = Depends(get_entry_store),
):
    """Create a time entry from a clock-in/clock-out pair."""
    entry = build_clock_entry(
        user_id=body.user_id,
        clock_in=body.start_time,
        clock_out=body.end_time,
        description=body.description,
        case_id=body.case_id,
        billable=body.billable,
    )
    await _save_entry(store, entry)
    annotate_request(request, user_id=body.user_id, entry_count=1,
                     total_hours=round_hours(entry["duration"]))

    return {
        "success": True,
        "timeEntry": entry,
        "summary": {
            "hoursLogged": round_hours(entry["duration"]),
            "billable": entry["billable"],
        },
    }


@router.get("/time-entries")
async def list_time_entries(
    request: Request,
    user_id: str = Query("all", alias="userId"),
    timeframe: str = Query(DEFAULT_TIMEFRAME, alias="timeFrame"),
    now: datetime = Depends(get_now),
    store: JsonStore = Depends(get_entry_store),
):
    """Entries accounted to the timeframe bucket containing ``asOf`` (default: now)."""
    bucket = bucket_bounds(now, timeframe)
    entries = await asyncio.to_thread(store.read)

    selected = entries_in_bucket(entries, bucket, user_id=user_id)
    summary = aggregate(entries, bucket, user_id=user_id)
    annotate_request(request, user_id=user_id, timeframe=bucket.unit.value,
                     entry_count=summary.entry_count, skipped_count=summary.skipped_count,
                     total_hours=summary.total_hours)

    return {
        "success": True,
        "bucket": bucket.to_dict(),
        "timeEntries": selected,
        "summary": summary.to_dict(),
    }


@router.delete("/time-entries/{entry_id}")
async def delete_time_entry(
    request: Request,
    entry_id: str,
    store: JsonStore = Depends(get_entry_store),
):
    """Hard-delete a time entry."""
    removed: list[dict] = []

    def mutate(snapshot: list[dict]) -> list[dict]:
        remaining, entry = remove_entry(snapshot, entry_id)
        if entry is not None:
            removed.append(entry)
        return remaining

    await asyncio.to_thread(store.update, mutate)

    if not removed:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={
                "error": "Time entry not found",
                "code": ErrorCodes.NOT_FOUND,
                "details": [f"Entry ID: {entry_id}"],
            },
        )

    annotate_request(request, user_id=removed[0].get("userId"), entry_count=1)
    return {"success": True, "message": "Time entry deleted successfully", "timeEntry": removed[0]}
