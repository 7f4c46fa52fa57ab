"""
Shared fixtures: an in-memory SQLite database per test and small factories for
profiles, vehicles and bookings.
"""

import os
import uuid
from datetime import date, datetime

os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from sqlalchemy import create_engine
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from safedrive.database import Base
from safedrive.domain.bookings.repository import BookingRepository
from safedrive.domain.bookings.lifecycle import is_live
from safedrive.domain.bookings.pricing import calculate_pricing
from safedrive.models import Booking, Notification, Profile, UnavailabilityMark, Vehicle

# Fixed "today" for service tests so date rules do not depend on the wall clock
TODAY = date(2025, 2, 1)


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db(engine):
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSession()
    yield session
    session.close()


@pytest.fixture
def make_profile(db):
    def _make(full_name="Test User", verified=True, role="user", **kwargs):
        profile = Profile(
            id=kwargs.pop("id", str(uuid.uuid4())),
            email=kwargs.pop("email", f"{uuid.uuid4().hex[:8]}@example.com"),
            full_name=full_name,
            role=role,
            verification_status="verified" if verified else "pending",
            **kwargs,
        )
        db.add(profile)
        db.commit()
        db.refresh(profile)
        return profile

    return _make


@pytest.fixture
def owner(make_profile):
    return make_profile(full_name="Olivia Owner")


@pytest.fixture
def renter(make_profile):
    return make_profile(full_name="Rafael Renter")


@pytest.fixture
def admin(make_profile):
    return make_profile(full_name="Ada Admin", role="admin")


@pytest.fixture
def make_vehicle(db):
    def _make(owner, **kwargs):
        values = {
            "make": "Toyota",
            "model": "Vios",
            "year": 2022,
            "plate_number": "ABC 1234",
            "color": "White",
            "pickup_location": "Makati City",
            "daily_rate": 2500.0,
            "security_deposit": 5000.0,
            "is_available": True,
            "status": "approved",
        }
        values.update(kwargs)
        vehicle = Vehicle(owner_id=owner.id, **values)
        db.add(vehicle)
        db.commit()
        db.refresh(vehicle)
        return vehicle

    return _make


@pytest.fixture
def vehicle(make_vehicle, owner):
    return make_vehicle(owner)


@pytest.fixture
def make_booking(db):
    """Insert a booking directly, with day claims when its status is live"""

    def _make(vehicle, renter, start, end, status="pending", created_at=None):
        pricing = calculate_pricing(start, end, vehicle.daily_rate, vehicle.security_deposit)
        data = dict(
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
            status=status,
            created_at=created_at or datetime(2025, 1, 31, 9, 0),
        )
        if is_live(status):
            booking = BookingRepository.create_booking(db, **data)
        else:
            booking = Booking(**data)
            db.add(booking)
        db.commit()
        db.refresh(booking)
        return booking

    return _make


@pytest.fixture
def block_day(db):
    def _block(vehicle, day, reason="blocked"):
        mark = UnavailabilityMark(vehicle_id=vehicle.id, unavailable_date=day, reason=reason)
        db.add(mark)
        db.commit()
        return mark

    return _block


@pytest.fixture
def failing_notifications(db, monkeypatch):
    """Any commit that carries a new notification fails as if the database went away"""
    real_commit = db.commit

    def commit():
        if any(isinstance(obj, Notification) for obj in db.new):
            raise OperationalError("INSERT INTO notifications", {}, Exception("connection lost"))
        real_commit()

    monkeypatch.setattr(db, "commit", commit)
