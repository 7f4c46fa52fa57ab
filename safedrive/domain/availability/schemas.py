"""Availability domain schemas - Pydantic models for validation"""

from datetime import date
from typing import Optional

from pydantic import BaseModel

from ..calendar.calendar_state import EditAction
from ..calendar.schemas import CalendarResponse, StagedEditSchema


class StageEditRequest(BaseModel):
    """Schema for toggling one day in the owner's staged edits"""

    date: date
    reason: str = "blocked"  # blocked, maintenance - only used when the toggle stages a block
    staged: list[StagedEditSchema] = []
    month: Optional[str] = None  # YYYY-MM for the preview, defaults to the toggled day's month


class StageEditResponse(BaseModel):
    vehicleId: int
    staged: list[StagedEditSchema]
    calendar: CalendarResponse


class CommitRequest(BaseModel):
    staged: list[StagedEditSchema]


class AppliedEditSchema(BaseModel):
    date: date
    action: EditAction


class RejectedEditSchema(BaseModel):
    date: date
    action: EditAction
    reason: str
    message: str


class CommitResponse(BaseModel):
    message: str
    applied: list[AppliedEditSchema]
    rejected: list[RejectedEditSchema]
    added: int
    removed: int
    blockedTotal: int
    staged: list[StagedEditSchema]
