"""Calendar domain schemas - Pydantic models for validation"""

from datetime import date

from pydantic import BaseModel

from .calendar_state import DayStatus, EditAction


class StagedEditSchema(BaseModel):
    """One staged block/unblock intent as carried by the client"""

    date: date
    action: EditAction
    reason: str = "blocked"


class CalendarDay(BaseModel):
    date: date
    status: DayStatus


class CalendarResponse(BaseModel):
    vehicleId: int
    month: str
    days: list[CalendarDay]
