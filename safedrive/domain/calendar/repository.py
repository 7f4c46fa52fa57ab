"""Calendar repository - Availability reads shared by the calendar, editor and admission"""

from datetime import date
from typing import Optional

from sqlalchemy.orm import Session

from ...models import LIVE_BOOKING_STATUSES, Booking, UnavailabilityMark, Vehicle


class CalendarRepository:
    """Repository for per-day availability queries"""

    @staticmethod
    def get_vehicle(db: Session, vehicle_id: int) -> Optional[Vehicle]:
        return db.query(Vehicle).filter(Vehicle.id == vehicle_id).first()

    @staticmethod
    def lock_vehicle(db: Session, vehicle_id: int) -> Optional[Vehicle]:
        """
        Load the vehicle row with FOR UPDATE so availability checks and the writes that
        follow them are serialized per vehicle until the transaction ends.
        """
        return db.query(Vehicle).filter(Vehicle.id == vehicle_id).with_for_update().first()

    @staticmethod
    def get_marks_in_window(
        db: Session, vehicle_id: int, window_start: date, window_end: date
    ) -> list[UnavailabilityMark]:
        return (
            db.query(UnavailabilityMark)
            .filter(
                UnavailabilityMark.vehicle_id == vehicle_id,
                UnavailabilityMark.unavailable_date >= window_start,
                UnavailabilityMark.unavailable_date <= window_end,
            )
            .order_by(UnavailabilityMark.unavailable_date.asc())
            .all()
        )

    @staticmethod
    def get_live_bookings_in_window(
        db: Session,
        vehicle_id: int,
        window_start: date,
        window_end: date,
        exclude_booking_id: Optional[int] = None,
    ) -> list[Booking]:
        """Bookings that still reserve days and whose inclusive range touches the window"""
        query = db.query(Booking).filter(
            Booking.vehicle_id == vehicle_id,
            Booking.status.in_(LIVE_BOOKING_STATUSES),
            Booking.start_date <= window_end,
            Booking.end_date >= window_start,
        )
        if exclude_booking_id is not None:
            query = query.filter(Booking.id != exclude_booking_id)
        return query.order_by(Booking.start_date.asc()).all()

    @staticmethod
    def count_marks(db: Session, vehicle_id: int, from_date: Optional[date] = None) -> int:
        query = db.query(UnavailabilityMark).filter(UnavailabilityMark.vehicle_id == vehicle_id)
        if from_date is not None:
            query = query.filter(UnavailabilityMark.unavailable_date >= from_date)
        return query.count()
