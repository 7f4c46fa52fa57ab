"""
Tests for the owner listing switch and admin vehicle review
"""

from datetime import date

import pytest

from safedrive.domain.bookings.service import BookingService
from safedrive.domain.vehicles.service import VehicleService
from safedrive.models import AuditLog, Notification
from safedrive.shared.errors import NotAuthorized, NotFoundError, VehicleNotListed

from .conftest import TODAY


class TestSetListed:
    def test_unlisting_stops_new_requests(self, db, vehicle, owner, renter):
        VehicleService(db).set_listed(vehicle.id, owner, False)

        with pytest.raises(VehicleNotListed):
            BookingService(db).request_booking(
                vehicle.id, renter, date(2025, 3, 1), date(2025, 3, 2), today=TODAY
            )

    def test_relisting(self, db, make_vehicle, owner):
        unlisted = make_vehicle(owner, is_available=False)
        listed = VehicleService(db).set_listed(unlisted.id, owner, True)

        assert listed.is_available is True
        assert db.query(AuditLog).filter(AuditLog.action == "VEHICLE_LISTED").count() == 1

    def test_only_owner(self, db, vehicle, renter):
        with pytest.raises(NotAuthorized):
            VehicleService(db).set_listed(vehicle.id, renter, False)

    def test_unknown_vehicle(self, db, owner):
        with pytest.raises(NotFoundError):
            VehicleService(db).set_listed(999, owner, False)


class TestReviewVehicle:
    def test_admin_approves_and_owner_is_notified(self, db, make_vehicle, owner, admin):
        submitted = make_vehicle(owner, status="pending")
        service = VehicleService(db)
        assert [v.id for v in service.pending_review()] == [submitted.id]

        reviewed = service.review_vehicle(submitted.id, admin, approve=True)

        assert reviewed.status == "approved"
        notification = db.query(Notification).filter(Notification.user_id == owner.id).one()
        assert notification.title == "Vehicle Approved"
        assert service.pending_review() == []

    def test_rejection(self, db, make_vehicle, owner, admin):
        submitted = make_vehicle(owner, status="pending")
        reviewed = VehicleService(db).review_vehicle(submitted.id, admin, approve=False)
        assert reviewed.status == "rejected"

    def test_non_admin(self, db, make_vehicle, owner):
        submitted = make_vehicle(owner, status="pending")
        with pytest.raises(NotAuthorized):
            VehicleService(db).review_vehicle(submitted.id, owner, approve=True)
