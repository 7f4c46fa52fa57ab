"""Calendar service - Builds per-day availability for a vehicle"""

import logging
from datetime import date
from typing import Mapping, Optional

from sqlalchemy.orm import Session

from ...shared.errors import NotFoundError
from ...shared.validators import parse_year_month
from .calendar_state import CalendarWindow, EditAction, expand_bookings
from .repository import CalendarRepository

logger = logging.getLogger(__name__)


class CalendarService:
    """Service layer for availability reads"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = CalendarRepository()

    def build_window(
        self,
        vehicle_id: int,
        window_start: date,
        window_end: date,
        staged: Optional[Mapping[date, EditAction]] = None,
        today: Optional[date] = None,
    ) -> CalendarWindow:
        """Fetch blocks and live bookings for the window and wrap them in a CalendarWindow"""
        marks = self.repo.get_marks_in_window(self.db, vehicle_id, window_start, window_end)
        bookings = self.repo.get_live_bookings_in_window(
            self.db, vehicle_id, window_start, window_end
        )

        return CalendarWindow(
            window_start=window_start,
            window_end=window_end,
            today=today or date.today(),
            blocked={mark.unavailable_date for mark in marks},
            booked=expand_bookings(bookings, window_start, window_end),
            staged=staged,
        )

    def get_calendar(
        self,
        vehicle_id: int,
        year_month: Optional[str] = None,
        staged: Optional[Mapping[date, EditAction]] = None,
        today: Optional[date] = None,
    ) -> CalendarWindow:
        """Get the month calendar (YYYY-MM, default current month) for a vehicle"""
        if not self.repo.get_vehicle(self.db, vehicle_id):
            raise NotFoundError(f"Vehicle {vehicle_id} not found")

        window_start, window_end = parse_year_month(year_month, today)
        logger.debug(f"📅 Building calendar for vehicle {vehicle_id}: {window_start} → {window_end}")
        return self.build_window(vehicle_id, window_start, window_end, staged, today)

    def day_status(self, vehicle_id: int, day: date, today: Optional[date] = None):
        """Committed status of a single day (no staged overlay)"""
        return self.build_window(vehicle_id, day, day, today=today).status_of(day)
