"""
Tests for the booking status state machine and role rights
"""

from datetime import date

import pytest

from safedrive.domain.bookings.lifecycle import allowed_targets, validate_transition
from safedrive.domain.bookings.service import BookingService
from safedrive.models import AuditLog, Booking, BookingDay, Notification
from safedrive.shared.actors import Actor, ActorRole
from safedrive.shared.errors import (
    InvalidTransition,
    NotAuthorized,
    NotFoundError,
    ValidationError,
)

from .conftest import TODAY

OWNER, RENTER, ADMIN = ActorRole.OWNER, ActorRole.RENTER, ActorRole.ADMIN


class TestTransitionRights:
    @pytest.mark.parametrize(
        "current,target,role",
        [
            ("pending", "confirmed", OWNER),
            ("pending", "cancelled", OWNER),
            ("confirmed", "cancelled", OWNER),
            ("confirmed", "cancelled", RENTER),
            ("confirmed", "cancelled", ADMIN),
            ("active", "completed", OWNER),
            ("active", "completed", ADMIN),
            ("active", "cancelled", OWNER),
            ("active", "cancelled", ADMIN),
        ],
    )
    def test_allowed(self, current, target, role):
        validate_transition(current, target, role)

    @pytest.mark.parametrize(
        "current,target,role",
        [
            ("pending", "confirmed", RENTER),
            ("pending", "cancelled", RENTER),
            ("pending", "confirmed", ADMIN),
            ("pending", "cancelled", ADMIN),
            ("confirmed", "active", OWNER),
            ("confirmed", "active", ADMIN),
            ("active", "completed", RENTER),
            ("active", "cancelled", RENTER),
            ("pending", "completed", OWNER),
            ("completed", "cancelled", ADMIN),
            ("cancelled", "confirmed", OWNER),
        ],
    )
    def test_rejected(self, current, target, role):
        with pytest.raises(InvalidTransition):
            validate_transition(current, target, role)

    def test_activation_message_points_to_agreement(self):
        with pytest.raises(InvalidTransition) as exc:
            validate_transition("confirmed", "active", OWNER)
        assert "sign" in exc.value.message

    def test_allowed_targets(self):
        assert allowed_targets("pending", OWNER) == ["confirmed", "cancelled"]
        assert allowed_targets("pending", RENTER) == []
        assert allowed_targets("confirmed", RENTER) == ["cancelled"]
        assert allowed_targets("completed", ADMIN) == []


class TestTransitionBooking:
    @pytest.fixture
    def pending(self, vehicle, renter, make_booking):
        return make_booking(vehicle, renter, date(2025, 3, 1), date(2025, 3, 3))

    def test_failed_notification_does_not_undo_transition(
        self, db, pending, owner, failing_notifications
    ):
        BookingService(db).transition_booking(pending.id, Actor.owner(owner.id), "confirmed")

        db.expire_all()
        assert db.query(Booking).filter(Booking.id == pending.id).one().status == "confirmed"
        assert db.query(Notification).count() == 0

    def test_owner_confirms(self, db, pending, owner, renter):
        booking = BookingService(db).transition_booking(pending.id, Actor.owner(owner.id), "confirmed")

        assert booking.status == "confirmed"
        assert db.query(BookingDay).filter(BookingDay.booking_id == booking.id).count() == 3

        notification = db.query(Notification).filter(Notification.user_id == renter.id).one()
        assert notification.title == "Booking Confirmed"
        audit = db.query(AuditLog).filter(AuditLog.action == "BOOKING_CONFIRMED").one()
        assert audit.old_value == {"status": "pending"}
        assert audit.new_value == {"status": "confirmed"}

    def test_renter_cannot_confirm(self, db, pending, renter):
        with pytest.raises(InvalidTransition):
            BookingService(db).transition_booking(pending.id, Actor.renter(renter.id), "confirmed")
        db.refresh(pending)
        assert pending.status == "pending"

    def test_admin_cannot_act_on_pending(self, db, pending, admin):
        with pytest.raises(InvalidTransition):
            BookingService(db).transition_booking(pending.id, Actor.admin(admin.id), "cancelled")

    def test_impersonating_the_owner(self, db, pending, renter):
        with pytest.raises(NotAuthorized):
            BookingService(db).transition_booking(pending.id, Actor.owner(renter.id), "confirmed")

    def test_non_admin_claiming_admin(self, db, vehicle, renter, make_booking, make_profile):
        booking = make_booking(vehicle, renter, date(2025, 3, 1), date(2025, 3, 3), status="confirmed")
        stranger = make_profile()
        with pytest.raises(NotAuthorized):
            BookingService(db).transition_booking(booking.id, Actor.admin(stranger.id), "cancelled")

    def test_cancel_releases_days(self, db, vehicle, owner, renter, make_booking, make_profile):
        booking = make_booking(vehicle, renter, date(2025, 3, 1), date(2025, 3, 3), status="confirmed")
        service = BookingService(db)

        service.transition_booking(booking.id, Actor.renter(renter.id), "cancelled")

        assert db.query(BookingDay).count() == 0
        owner_note = db.query(Notification).filter(Notification.user_id == owner.id).one()
        assert owner_note.title == "Booking Cancelled"
        # Released days can be booked again
        rebooked = service.request_booking(
            vehicle.id, make_profile(), date(2025, 3, 1), date(2025, 3, 3), today=TODAY
        )
        assert rebooked.status == "pending"

    def test_admin_cancels_confirmed(self, db, vehicle, renter, admin, make_booking):
        booking = make_booking(vehicle, renter, date(2025, 3, 1), date(2025, 3, 3), status="confirmed")
        booking = BookingService(db).transition_booking(booking.id, Actor.admin(admin.id), "cancelled")
        assert booking.status == "cancelled"

    def test_complete_active_rental(self, db, vehicle, owner, renter, make_booking):
        booking = make_booking(vehicle, renter, date(2025, 3, 1), date(2025, 3, 3), status="active")
        booking = BookingService(db).transition_booking(booking.id, Actor.owner(owner.id), "completed")

        assert booking.status == "completed"
        assert db.query(BookingDay).count() == 0

    def test_terminal_status_is_final(self, db, vehicle, owner, renter, make_booking):
        booking = make_booking(vehicle, renter, date(2025, 3, 1), date(2025, 3, 3), status="completed")
        with pytest.raises(InvalidTransition):
            BookingService(db).transition_booking(booking.id, Actor.owner(owner.id), "cancelled")

    def test_nobody_requests_active(self, db, vehicle, owner, renter, make_booking):
        booking = make_booking(vehicle, renter, date(2025, 3, 1), date(2025, 3, 3), status="confirmed")
        with pytest.raises(InvalidTransition):
            BookingService(db).transition_booking(booking.id, Actor.owner(owner.id), "active")

    def test_unknown_booking_and_status(self, db, pending, owner):
        service = BookingService(db)
        with pytest.raises(NotFoundError):
            service.transition_booking(999, Actor.owner(owner.id), "confirmed")
        with pytest.raises(ValidationError):
            service.transition_booking(pending.id, Actor.owner(owner.id), "approved")
