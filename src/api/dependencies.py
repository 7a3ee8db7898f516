"""FastAPI dependencies for authentication and shared resources."""

import secrets
from datetime import datetime

from fastapi import Header, HTTPException, Query, status

from core.config import PERSONAL_GOALS_PATH, TIME_ENTRIES_PATH, TIMEKEEPING_API_KEY
from core.intervals import parse_timestamp
from services.store import JsonStore


async def verify_api_key(x_api_key: str = Header(..., alias="X-API-Key")) -> str:
    """
    Verify API key from X-API-Key header.

    Raises:
        HTTPException: 401 if key is missing or invalid
    """
    if not TIMEKEEPING_API_KEY:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={
                "error": "API key not configured on server",
                "code": "INTERNAL_ERROR",
                "details": [],
            },
        )

    # Use constant-time comparison to prevent timing attacks
    if not secrets.compare_digest(x_api_key, TIMEKEEPING_API_KEY):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={
                "error": "Invalid or missing API key",
                "code": "UNAUTHORIZED",
                "details": [],
            },
        )

    return x_api_key


def get_entry_store() -> JsonStore:
    return JsonStore(TIME_ENTRIES_PATH)


def get_goal_store() -> JsonStore:
    return JsonStore(PERSONAL_GOALS_PATH)


def get_now(
    as_of: str | None = Query(None, alias="asOf", description="Reference date or timestamp (ISO-8601)"),
) -> datetime:
    """
    The reference instant for bucketing: ``asOf`` when given, else the current local time.

    Raises:
        InvalidDate: if asOf is not ISO-8601
    """
    if as_of:
        return parse_timestamp(as_of)
    return datetime.now().astimezone()
