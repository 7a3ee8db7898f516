"""Office-session reconciliation endpoint."""

import asyncio

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status

from api.dependencies import get_entry_store, verify_api_key
from api.logging import annotate_request
from api.models.responses import ErrorCodes
from models.entries import OfficeSession
from services.store import JsonStore
from services.work_hours import reconcile_office_session

router = APIRouter(prefix="/v1", dependencies=[Depends(verify_api_key)])


@router.get("/work-hours")
async def get_work_hours(
    request: Request,
    user_id: str | None = Query(None, alias="userId"),
    office_start: str | None = Query(None, alias="officeStart"),
    office_end: str | None = Query(None, alias="officeEnd"),
    date: str | None = Query(None),
    store: JsonStore = Depends(get_entry_store),
):
    """
    Billable hours logged inside an office session.

    Only the part of each entry that overlaps the session counts.
    """
    session: OfficeSession = {
        "userId": user_id, "officeStart": office_start, "officeEnd": office_end, "date": date,
    }
    missing = [name for name, value in session.items() if not value]
    if missing:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={
                "error": "Missing required parameters",
                "code": ErrorCodes.INVALID_REQUEST,
                "details": [f"{name} is required" for name in missing],
            },
        )

    entries = await asyncio.to_thread(store.read)
    result = reconcile_office_session(
        entries, session["userId"], session["officeStart"], session["officeEnd"], session["date"]
    )
    annotate_request(request, user_id=user_id, entry_count=result["totalEntries"],
                     skipped_count=result["skippedCount"], total_hours=result["workHours"])

    return {"success": True, **result}
