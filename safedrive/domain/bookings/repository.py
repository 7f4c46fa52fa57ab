"""Booking repository - Database operations for bookings and their day claims"""

from datetime import date, datetime
from typing import Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from ...models import Booking, BookingDay, Profile
from ...shared.validators import iter_dates


class BookingRepository:
    """Repository for booking database operations"""

    @staticmethod
    def get_booking(db: Session, booking_id: int) -> Optional[Booking]:
        return db.query(Booking).filter(Booking.id == booking_id).first()

    @staticmethod
    def lock_booking(db: Session, booking_id: int) -> Optional[Booking]:
        return (
            db.query(Booking)
            .filter(Booking.id == booking_id)
            .populate_existing()
            .with_for_update()
            .first()
        )

    @staticmethod
    def get_profile(db: Session, user_id: str) -> Optional[Profile]:
        return db.query(Profile).filter(Profile.id == user_id).first()

    @staticmethod
    def list_bookings(
        db: Session,
        user_id: str,
        role: Optional[str] = None,
        status: Optional[str] = None,
        include_all: bool = False,
    ) -> list[Booking]:
        """
        Bookings visible to a user: as renter, as owner, or both when role is None.
        include_all (admins) lists every booking.
        """
        query = db.query(Booking)
        if not include_all:
            if role == "owner":
                query = query.filter(Booking.owner_id == user_id)
            elif role == "renter":
                query = query.filter(Booking.renter_id == user_id)
            else:
                query = query.filter(or_(Booking.owner_id == user_id, Booking.renter_id == user_id))
        if status:
            query = query.filter(Booking.status == status)
        return query.order_by(Booking.created_at.desc(), Booking.id.desc()).all()

    @staticmethod
    def create_booking(db: Session, **booking_data) -> Booking:
        """
        Add the booking and one claim row per covered day, then flush.
        The caller owns the transaction: an IntegrityError from the claims means
        another live booking already holds one of the days.
        """
        booking = Booking(**booking_data)
        db.add(booking)
        db.flush()

        for day in iter_dates(booking.start_date, booking.end_date):
            db.add(BookingDay(vehicle_id=booking.vehicle_id, booking_id=booking.id, day=day))
        db.flush()
        return booking

    @staticmethod
    def release_days(db: Session, booking: Booking) -> int:
        """Drop the booking's day claims once it no longer reserves the calendar"""
        return (
            db.query(BookingDay)
            .filter(BookingDay.booking_id == booking.id)
            .delete(synchronize_session=False)
        )

    @staticmethod
    def first_claimed_day(
        db: Session, vehicle_id: int, start_date: date, end_date: date
    ) -> Optional[date]:
        claim = (
            db.query(BookingDay)
            .filter(
                BookingDay.vehicle_id == vehicle_id,
                BookingDay.day >= start_date,
                BookingDay.day <= end_date,
            )
            .order_by(BookingDay.day.asc())
            .first()
        )
        return claim.day if claim else None

    @staticmethod
    def update_status(db: Session, booking: Booking, status: str) -> Booking:
        """Lifecycle changes touch only the status column"""
        booking.status = status
        return booking

    @staticmethod
    def get_stale_pending(db: Session, created_before: datetime, today: date) -> list[Booking]:
        """Pending requests older than the cutoff, or whose start date has already passed"""
        return (
            db.query(Booking)
            .filter(
                Booking.status == "pending",
                or_(Booking.created_at < created_before, Booking.start_date < today),
            )
            .order_by(Booking.id.asc())
            .all()
        )

    @staticmethod
    def cancel_if_pending(db: Session, booking_id: int) -> int:
        """
        Cancel the booking only if it is still pending. Returns 0 when another
        session already moved it on.
        """
        return (
            db.query(Booking)
            .filter(Booking.id == booking_id, Booking.status == "pending")
            .update({Booking.status: "cancelled"}, synchronize_session=False)
        )
