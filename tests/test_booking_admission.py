"""
Tests for booking admission: preconditions, conflict detection and pricing
"""

from datetime import date

import pytest

from safedrive.domain.bookings.service import BookingService
from safedrive.models import AuditLog, Booking, BookingDay, Notification
from safedrive.shared.errors import (
    AuthenticationRequired,
    DateConflict,
    InvalidRange,
    NotFoundError,
    SelfBooking,
    VehicleNotListed,
    VerificationRequired,
)

from .conftest import TODAY


class TestPreconditions:
    """First failing precondition wins"""

    def test_anonymous_caller(self, db, vehicle):
        with pytest.raises(AuthenticationRequired):
            BookingService(db).request_booking(
                vehicle.id, None, date(2025, 3, 1), date(2025, 3, 3), today=TODAY
            )

    def test_unverified_renter_checked_before_self_booking(self, db, make_profile, make_vehicle):
        unverified = make_profile(verified=False)
        own_vehicle = make_vehicle(unverified)

        with pytest.raises(VerificationRequired):
            BookingService(db).request_booking(
                own_vehicle.id, unverified, date(2025, 3, 1), date(2025, 3, 3), today=TODAY
            )

    def test_unknown_vehicle(self, db, renter):
        with pytest.raises(NotFoundError):
            BookingService(db).request_booking(999, renter, date(2025, 3, 1), date(2025, 3, 3), today=TODAY)

    def test_owner_cannot_book_own_vehicle(self, db, vehicle, owner):
        with pytest.raises(SelfBooking):
            BookingService(db).request_booking(
                vehicle.id, owner, date(2025, 3, 1), date(2025, 3, 3), today=TODAY
            )

    @pytest.mark.parametrize(
        "overrides", [{"is_available": False}, {"status": "pending"}, {"status": "rejected"}]
    )
    def test_vehicle_must_be_listed(self, db, make_vehicle, owner, renter, overrides):
        unlisted = make_vehicle(owner, **overrides)
        with pytest.raises(VehicleNotListed):
            BookingService(db).request_booking(
                unlisted.id, renter, date(2025, 3, 1), date(2025, 3, 3), today=TODAY
            )

    def test_start_after_end(self, db, vehicle, renter):
        with pytest.raises(InvalidRange):
            BookingService(db).request_booking(
                vehicle.id, renter, date(2025, 3, 5), date(2025, 3, 3), today=TODAY
            )

    def test_start_in_the_past(self, db, vehicle, renter):
        with pytest.raises(InvalidRange):
            BookingService(db).request_booking(
                vehicle.id, renter, date(2025, 1, 30), date(2025, 2, 3), today=TODAY
            )

    def test_iso_strings_are_accepted(self, db, vehicle, renter):
        booking = BookingService(db).request_booking(
            vehicle.id, renter, "2025-03-01", "2025-03-01", today=TODAY
        )
        assert booking.start_date == date(2025, 3, 1)
        assert booking.total_days == 1


class TestConflicts:
    def test_blocked_day_inside_range(self, db, vehicle, renter, block_day):
        block_day(vehicle, date(2025, 4, 10))

        with pytest.raises(DateConflict) as exc:
            BookingService(db).request_booking(
                vehicle.id, renter, date(2025, 4, 9), date(2025, 4, 11), today=TODAY
            )

        assert exc.value.date == date(2025, 4, 10)
        assert exc.value.to_dict()["date"] == "2025-04-10"
        assert db.query(Booking).count() == 0

    def test_overlapping_live_booking_names_first_collision(
        self, db, vehicle, renter, make_profile, make_booking, block_day
    ):
        make_booking(vehicle, renter, date(2025, 4, 12), date(2025, 4, 15), status="confirmed")
        block_day(vehicle, date(2025, 4, 14))

        with pytest.raises(DateConflict) as exc:
            BookingService(db).request_booking(
                vehicle.id, make_profile(), date(2025, 4, 10), date(2025, 4, 20), today=TODAY
            )
        assert exc.value.date == date(2025, 4, 12)

    def test_cancelled_and_completed_bookings_do_not_block(
        self, db, vehicle, renter, make_booking
    ):
        make_booking(vehicle, renter, date(2025, 4, 10), date(2025, 4, 12), status="cancelled")
        make_booking(vehicle, renter, date(2025, 4, 12), date(2025, 4, 13), status="completed")

        booking = BookingService(db).request_booking(
            vehicle.id, renter, date(2025, 4, 10), date(2025, 4, 13), today=TODAY
        )
        assert booking.status == "pending"

    def test_adjacent_bookings_share_no_day(self, db, vehicle, renter, make_booking):
        make_booking(vehicle, renter, date(2025, 4, 10), date(2025, 4, 12))

        booking = BookingService(db).request_booking(
            vehicle.id, renter, date(2025, 4, 13), date(2025, 4, 14), today=TODAY
        )
        assert booking.id is not None

    def test_claim_constraint_rejects_overlap_missed_by_scan(
        self, db, vehicle, renter, make_booking, monkeypatch
    ):
        """A concurrent admission that slipped past the scan still hits the unique claim"""
        make_booking(vehicle, renter, date(2025, 4, 11), date(2025, 4, 12))
        service = BookingService(db)
        monkeypatch.setattr(service, "_first_conflict", lambda *args: None)

        with pytest.raises(DateConflict) as exc:
            service.request_booking(vehicle.id, renter, date(2025, 4, 10), date(2025, 4, 12), today=TODAY)

        assert exc.value.date == date(2025, 4, 11)
        assert db.query(Booking).count() == 1
        assert db.query(BookingDay).count() == 2


class TestAdmission:
    def test_pricing_is_frozen_onto_booking(self, db, vehicle, renter):
        booking = BookingService(db).request_booking(
            vehicle.id, renter, date(2025, 3, 1), date(2025, 3, 3), today=TODAY
        )

        assert booking.status == "pending"
        assert booking.owner_id == vehicle.owner_id
        assert booking.total_days == 2
        assert booking.subtotal == 5000
        assert booking.service_fee == 500
        assert booking.security_deposit == 5000
        assert booking.total_amount == 10500
        assert booking.pickup_location == "Makati City"

    def test_claims_cover_every_day(self, db, vehicle, renter):
        booking = BookingService(db).request_booking(
            vehicle.id, renter, date(2025, 3, 1), date(2025, 3, 3), today=TODAY
        )
        days = sorted(claim.day for claim in booking.days)
        assert days == [date(2025, 3, 1), date(2025, 3, 2), date(2025, 3, 3)]

    def test_owner_notified_and_request_audited(self, db, vehicle, owner, renter):
        booking = BookingService(db).request_booking(
            vehicle.id, renter, date(2025, 3, 1), date(2025, 3, 3), today=TODAY
        )

        notification = db.query(Notification).filter(Notification.user_id == owner.id).one()
        assert notification.title == "New Booking Request"
        assert "Rafael Renter" in notification.message
        assert notification.reference_id == str(booking.id)

        audit = db.query(AuditLog).filter(AuditLog.action == "BOOKING_REQUESTED").one()
        assert audit.performed_by == renter.id
        assert audit.entity_id == str(booking.id)

    def test_listing_filters(self, db, vehicle, owner, renter, make_profile, make_booking):
        other_renter = make_profile()
        make_booking(vehicle, renter, date(2025, 3, 1), date(2025, 3, 2), status="confirmed")
        make_booking(vehicle, other_renter, date(2025, 3, 5), date(2025, 3, 6))

        service = BookingService(db)
        assert len(service.list_bookings(owner, role="owner")) == 2
        assert len(service.list_bookings(renter)) == 1
        assert len(service.list_bookings(owner, status="confirmed")) == 1
        assert service.list_bookings(renter, role="owner") == []

    def test_total_survives_later_rate_change(self, db, vehicle, renter):
        booking = BookingService(db).request_booking(
            vehicle.id, renter, date(2025, 3, 1), date(2025, 3, 3), today=TODAY
        )

        vehicle.daily_rate = 4000
        vehicle.security_deposit = 8000
        db.commit()
        db.expire_all()

        stored = db.query(Booking).filter(Booking.id == booking.id).one()
        assert stored.daily_rate == 2500
        assert stored.total_amount == 10500

    def test_failed_notification_does_not_undo_request(self, db, vehicle, renter, failing_notifications):
        booking = BookingService(db).request_booking(
            vehicle.id, renter, date(2025, 3, 1), date(2025, 3, 3), today=TODAY
        )

        assert booking.status == "pending"
        assert db.query(Booking).count() == 1
        assert db.query(BookingDay).count() == 3
        assert db.query(Notification).count() == 0
        assert db.query(AuditLog).filter(AuditLog.action == "BOOKING_REQUESTED").count() == 1
