"""Pydantic request bodies."""

from pydantic import BaseModel, ConfigDict, Field


class ApiModel(BaseModel):
    """Bodies use camelCase on the wire and snake_case in Python."""

    model_config = ConfigDict(populate_by_name=True)


class ManualTimeRequest(ApiModel):
    """Manual entry: a date plus either start/end times of day or a duration in seconds."""

    user_id: str = Field(alias="userId", min_length=1)
    case_id: str = Field(alias="caseId", min_length=1)
    date: str = Field(min_length=1)
    description: str = Field(min_length=1)
    start: str | None = None
    end: str | None = None
    duration: int | None = Field(default=None, gt=0)
    billable: bool = True


class ClockEntryRequest(ApiModel):
    """Entry recorded by a clock-in/clock-out action (ISO-8601 timestamps)."""

    user_id: str = Field(alias="userId", min_length=1)
    start_time: str = Field(alias="startTime", min_length=1)
    end_time: str = Field(alias="endTime", min_length=1)
    description: str = Field(min_length=1)
    case_id: str | None = Field(default=None, alias="caseId")
    billable: bool = True


class GoalRequest(ApiModel):
    title: str = Field(min_length=1)
    type: str = Field(min_length=1)
    frequency: str = Field(min_length=1)
    target: float = Field(gt=0)
    user_id: str | None = Field(default=None, alias="userId")
    current: float = 0
    scope: str = "PERSONAL"
