"""Pydantic response models for API endpoints."""

from pydantic import BaseModel


class HealthResponse(BaseModel):
    """Health check response."""

    status: str  # "healthy" or "unhealthy"
    version: str
    data_dir_available: bool
    entry_count: int | None = None  # time entries in the collection
    goal_count: int | None = None
    timestamp: str  # ISO 8601 UTC
    error: str | None = None


class ErrorResponse(BaseModel):
    """Standard error response."""

    error: str
    code: str
    details: list[str] = []


class ErrorCodes:
    """Error code constants; the engine codes match the ``code`` of core.errors classes."""

    INVALID_REQUEST = "INVALID_REQUEST"
    UNAUTHORIZED = "UNAUTHORIZED"
    NOT_FOUND = "NOT_FOUND"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_DATE = "INVALID_DATE"
    INVALID_TIME = "INVALID_TIME"
    NON_POSITIVE_DURATION = "NON_POSITIVE_DURATION"
    UNSUPPORTED_UNIT = "UNSUPPORTED_UNIT"
    MALFORMED_RECORD = "MALFORMED_RECORD"
    INTERNAL_ERROR = "INTERNAL_ERROR"
