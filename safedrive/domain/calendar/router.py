"""Calendar router - FastAPI endpoints for availability reads"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...database import get_db
from .calendar_state import CalendarWindow
from .schemas import CalendarDay, CalendarResponse
from .service import CalendarService

router = APIRouter(prefix="/vehicles", tags=["Calendar"])


def get_calendar_service(db: Session = Depends(get_db)) -> CalendarService:
    """Dependency injection for CalendarService"""
    return CalendarService(db)


def to_calendar_response(vehicle_id: int, window: CalendarWindow) -> CalendarResponse:
    return CalendarResponse(
        vehicleId=vehicle_id,
        month=window.window_start.strftime("%Y-%m"),
        days=[CalendarDay(date=day, status=status) for day, status in window],
    )


@router.get("/{vehicle_id}/calendar", response_model=CalendarResponse)
async def get_calendar(
    vehicle_id: int,
    month: Optional[str] = Query(None, description="Month to show, YYYY-MM (default: current)"),
    service: CalendarService = Depends(get_calendar_service),
):
    """Per-day availability for one vehicle over a calendar month (public)"""
    window = service.get_calendar(vehicle_id, month)
    return to_calendar_response(vehicle_id, window)
