"""Booking service - Admission and lifecycle business logic"""

import logging
from datetime import date
from typing import Optional, Union

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ...models import BOOKING_STATUSES, Booking, Profile, Vehicle
from ...services.audit_logger import log_audit
from ...services.notification_service import (
    send_booking_request_notification,
    send_booking_status_notification,
)
from ...shared.actors import Actor, ActorRole, authorize_actor
from ...shared.errors import (
    AuthenticationRequired,
    DateConflict,
    DomainError,
    InvalidRange,
    NotAuthorized,
    NotFoundError,
    SelfBooking,
    ValidationError,
    VehicleNotListed,
    VerificationRequired,
)
from ...shared.validators import parse_iso_date
from ..calendar.calendar_state import expand_bookings
from ..calendar.repository import CalendarRepository
from .lifecycle import is_live, validate_system_activation, validate_transition
from .pricing import calculate_pricing
from .repository import BookingRepository

logger = logging.getLogger(__name__)

DateInput = Union[str, date]


class BookingService:
    """Service layer for booking admission and lifecycle"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = BookingRepository()
        self.calendar_repo = CalendarRepository()

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_booking(self, booking_id: int, user: Profile) -> Booking:
        """Get a booking visible to the user (either party or an admin)"""
        booking = self.repo.get_booking(self.db, booking_id)
        if not booking:
            raise NotFoundError(f"Booking {booking_id} not found")
        if user.id not in (booking.owner_id, booking.renter_id) and not user.is_admin:
            raise NotAuthorized("You are not a party to this booking")
        return booking

    def list_bookings(
        self, user: Profile, role: Optional[str] = None, status: Optional[str] = None
    ) -> list[Booking]:
        if role not in (None, "owner", "renter"):
            raise ValidationError(f"role must be 'owner' or 'renter', got '{role}'")
        if status and status not in BOOKING_STATUSES:
            raise ValidationError(f"Unknown booking status '{status}'")
        include_all = user.is_admin and role is None
        return self.repo.list_bookings(self.db, user.id, role, status, include_all)

    # ------------------------------------------------------------------
    # Admission
    # ------------------------------------------------------------------

    def _first_conflict(self, vehicle_id: int, start_date: date, end_date: date) -> Optional[date]:
        """Earliest day in the range that is blocked or held by a live booking"""
        marks = self.calendar_repo.get_marks_in_window(self.db, vehicle_id, start_date, end_date)
        bookings = self.calendar_repo.get_live_bookings_in_window(
            self.db, vehicle_id, start_date, end_date
        )
        conflicts = {mark.unavailable_date for mark in marks}
        conflicts |= expand_bookings(bookings, start_date, end_date)
        return min(conflicts) if conflicts else None

    def request_booking(
        self,
        vehicle_id: int,
        renter: Optional[Profile],
        start_date: DateInput,
        end_date: DateInput,
        today: Optional[date] = None,
    ) -> Booking:
        """
        Create a pending booking request.

        Preconditions are checked in order and the first failure wins: authenticated,
        verified, not the owner, vehicle listed, a valid future range, no blocked or
        booked day in the range. The conflict scan and the insert share one
        transaction that holds the vehicle row lock; the per-day claims make any
        overlapping insert that slips past the scan fail with an IntegrityError.
        """
        if renter is None:
            raise AuthenticationRequired("Please sign in to book a vehicle")
        if not renter.is_verified:
            raise VerificationRequired()

        vehicle: Optional[Vehicle] = self.calendar_repo.get_vehicle(self.db, vehicle_id)
        if not vehicle:
            raise NotFoundError(f"Vehicle {vehicle_id} not found")
        if vehicle.owner_id == renter.id:
            raise SelfBooking()
        if vehicle.status != "approved" or not vehicle.is_available:
            raise VehicleNotListed(f"The {vehicle.title} is not currently listed for rent")

        start = parse_iso_date(start_date, "start_date")
        end = parse_iso_date(end_date, "end_date")
        today = today or date.today()
        if start > end:
            raise InvalidRange(
                f"The start date {start.isoformat()} is after the end date {end.isoformat()}"
            )
        if start < today:
            raise InvalidRange(f"The start date {start.isoformat()} is in the past", day=start)

        logger.info(f"📝 Booking request: vehicle {vehicle_id}, renter {renter.id}, {start} → {end}")

        try:
            vehicle = self.calendar_repo.lock_vehicle(self.db, vehicle_id)
            conflict = self._first_conflict(vehicle.id, start, end)
            if conflict:
                self.db.rollback()
                raise DateConflict(conflict)

            pricing = calculate_pricing(start, end, vehicle.daily_rate, vehicle.security_deposit)
            booking = self.repo.create_booking(
                self.db,
                vehicle_id=vehicle.id,
                renter_id=renter.id,
                owner_id=vehicle.owner_id,
                start_date=start,
                end_date=end,
                daily_rate=pricing.daily_rate,
                total_days=pricing.days,
                subtotal=pricing.subtotal,
                service_fee=pricing.service_fee,
                security_deposit=pricing.security_deposit,
                total_amount=pricing.total,
                pickup_location=vehicle.pickup_location,
                status="pending",
            )
            self.db.commit()
        except IntegrityError as e:
            # A concurrent request claimed one of the days between our scan and insert
            self.db.rollback()
            conflict = self.repo.first_claimed_day(self.db, vehicle_id, start, end) or start
            logger.warning(f"⚠️ Booking claim collision on vehicle {vehicle_id} at {conflict}: {e}")
            raise DateConflict(conflict) from e

        self.db.refresh(booking)
        logger.info(f"✅ Booking {booking.id} created (total {booking.total_amount})")

        log_audit(
            self.db,
            action="BOOKING_REQUESTED",
            entity_type="booking",
            entity_id=booking.id,
            description=f"Booking requested for vehicle {vehicle_id} from {start} to {end}",
            new_value={"status": "pending", "total_amount": booking.total_amount},
            performed_by=renter.id,
        )
        send_booking_request_notification(self.db, booking, vehicle, renter.display_name)
        return booking

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def _is_admin(self, user_id: str) -> bool:
        profile = self.repo.get_profile(self.db, user_id)
        return bool(profile and profile.is_admin)

    def transition_booking(self, booking_id: int, actor: Actor, target_status: str) -> Booking:
        """
        Move a booking to target_status on behalf of actor.

        Raises:
            NotFoundError: Unknown booking
            NotAuthorized: Actor is not who it claims to be for this booking
            InvalidTransition: Edge not allowed from the current status for this role
        """
        if target_status not in BOOKING_STATUSES:
            raise ValidationError(f"Unknown booking status '{target_status}'")

        booking = self.repo.lock_booking(self.db, booking_id)
        if not booking:
            raise NotFoundError(f"Booking {booking_id} not found")

        try:
            is_admin = actor.role == ActorRole.ADMIN and self._is_admin(actor.user_id)
            authorize_actor(actor, booking.owner_id, booking.renter_id, is_admin)
            validate_transition(booking.status, target_status, actor.role)
        except DomainError:
            self.db.rollback()
            raise

        old_status = booking.status
        self.repo.update_status(self.db, booking, target_status)
        if not is_live(target_status):
            self.repo.release_days(self.db, booking)
        self.db.commit()
        self.db.refresh(booking)

        logger.info(
            f"✅ Booking {booking.id} transitioned: {old_status} → {target_status} by {actor.role.value}"
        )
        log_audit(
            self.db,
            action=f"BOOKING_{target_status.upper()}",
            entity_type="booking",
            entity_id=booking.id,
            description=f"{actor.role.value} moved booking {booking.id} from {old_status} to {target_status}",
            old_value={"status": old_status},
            new_value={"status": target_status},
            performed_by=actor.user_id,
        )
        send_booking_status_notification(self.db, booking, target_status, actor.user_id)
        return booking

    def activate_from_agreement(self, booking: Booking) -> Booking:
        """
        confirmed → active, fired only by the agreement protocol once both parties
        have signed. Runs inside the caller's transaction; the caller commits.
        """
        validate_system_activation(booking.status)
        return self.repo.update_status(self.db, booking, "active")
