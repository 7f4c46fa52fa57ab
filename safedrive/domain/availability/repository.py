"""Availability repository - Database operations for owner-imposed date blocks"""

from datetime import date

from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.orm import Session

from ...models import BookingDay, UnavailabilityMark


class AvailabilityRepository:
    """Repository for UnavailabilityMark writes"""

    @staticmethod
    def upsert_mark(db: Session, vehicle_id: int, day: date, reason: str) -> None:
        """
        Insert a mark keyed by (vehicle_id, unavailable_date), updating the reason if a
        concurrent session or a stale client already wrote the same day.
        """
        insert = pg_insert if db.get_bind().dialect.name == "postgresql" else sqlite_insert
        stmt = insert(UnavailabilityMark).values(
            vehicle_id=vehicle_id, unavailable_date=day, reason=reason
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=["vehicle_id", "unavailable_date"],
            set_={"reason": reason},
        )
        db.execute(stmt)

    @staticmethod
    def delete_mark(db: Session, vehicle_id: int, day: date) -> int:
        """Delete the mark for a day; deleting a day that is not marked is a no-op"""
        return (
            db.query(UnavailabilityMark)
            .filter(
                UnavailabilityMark.vehicle_id == vehicle_id,
                UnavailabilityMark.unavailable_date == day,
            )
            .delete(synchronize_session=False)
        )

    @staticmethod
    def is_day_claimed(db: Session, vehicle_id: int, day: date) -> bool:
        """True when a live booking holds a claim on the day"""
        return (
            db.query(BookingDay.id)
            .filter(BookingDay.vehicle_id == vehicle_id, BookingDay.day == day)
            .first()
            is not None
        )
