"""API Pydantic models."""

from .requests import ClockEntryRequest, GoalRequest, ManualTimeRequest
from .responses import ErrorCodes, ErrorResponse, HealthResponse

__all__ = [
    "HealthResponse",
    "ErrorResponse",
    "ErrorCodes",
    "ManualTimeRequest",
    "ClockEntryRequest",
    "GoalRequest",
]
