import uuid

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    Column,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .database import Base

# Statuses that still reserve calendar days
LIVE_BOOKING_STATUSES = ("pending", "confirmed", "active")
BOOKING_STATUSES = ("pending", "confirmed", "active", "completed", "cancelled")
MARK_REASONS = ("blocked", "maintenance")


def generate_public_id():
    """Generate a unique public ID for secure public access"""
    return str(uuid.uuid4())


class Profile(Base):
    """Mirror of an identity from the hosted auth provider"""

    __tablename__ = "profiles"

    id = Column(String(36), primary_key=True)  # Auth provider subject (UUID)
    email = Column(String(255), unique=True, index=True, nullable=True)
    full_name = Column(String(255), nullable=True)
    role = Column(String(20), default="user", nullable=False)  # user, admin
    # pending, submitted, verified, rejected - set by the identity review workflow
    verification_status = Column(String(20), default="pending", nullable=False)
    created_at = Column(DateTime, server_default=func.now())

    vehicles = relationship("Vehicle", back_populates="owner")

    @property
    def is_verified(self) -> bool:
        return self.verification_status == "verified"

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"

    @property
    def display_name(self) -> str:
        return self.full_name or self.email or "A SafeDrive user"


class Vehicle(Base):
    __tablename__ = "vehicles"

    id = Column(Integer, primary_key=True, index=True)
    owner_id = Column(String(36), ForeignKey("profiles.id"), nullable=False, index=True)
    make = Column(String(100), nullable=False)
    model = Column(String(100), nullable=False)
    year = Column(Integer, nullable=True)
    plate_number = Column(String(20), nullable=True)
    color = Column(String(50), nullable=True)
    pickup_location = Column(String(255), nullable=True)
    daily_rate = Column(Float, nullable=False)
    security_deposit = Column(Float, default=0, nullable=False)
    is_available = Column(Boolean, default=True, nullable=False)  # Owner-level listed/unlisted switch
    status = Column(String(20), default="pending", nullable=False)  # pending, approved, rejected
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    owner = relationship("Profile", back_populates="vehicles")
    unavailable_dates = relationship(
        "UnavailabilityMark", back_populates="vehicle", cascade="all, delete-orphan"
    )
    bookings = relationship("Booking", back_populates="vehicle")

    __table_args__ = (
        CheckConstraint("daily_rate >= 0", name="check_vehicle_daily_rate_non_negative"),
        CheckConstraint("security_deposit >= 0", name="check_vehicle_deposit_non_negative"),
    )

    @property
    def title(self) -> str:
        return " ".join(str(part) for part in (self.year, self.make, self.model) if part)


class UnavailabilityMark(Base):
    """Owner-imposed exclusion for one calendar day"""

    __tablename__ = "vehicle_availability"

    id = Column(Integer, primary_key=True, index=True)
    vehicle_id = Column(Integer, ForeignKey("vehicles.id", ondelete="CASCADE"), nullable=False)
    unavailable_date = Column(Date, nullable=False)
    reason = Column(String(20), default="blocked", nullable=False)  # blocked, maintenance
    created_at = Column(DateTime, server_default=func.now())

    vehicle = relationship("Vehicle", back_populates="unavailable_dates")

    __table_args__ = (
        UniqueConstraint("vehicle_id", "unavailable_date", name="uq_vehicle_unavailable_date"),
        CheckConstraint("reason IN ('blocked', 'maintenance')", name="check_mark_reason"),
    )


class Booking(Base):
    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True, index=True)
    public_id = Column(
        String(36), unique=True, nullable=False, index=True, default=generate_public_id
    )
    vehicle_id = Column(Integer, ForeignKey("vehicles.id"), nullable=False, index=True)
    renter_id = Column(String(36), ForeignKey("profiles.id"), nullable=False, index=True)
    owner_id = Column(String(36), ForeignKey("profiles.id"), nullable=False, index=True)

    # Rental window, inclusive on both ends
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)

    # Pricing frozen at request time
    daily_rate = Column(Float, nullable=False)
    total_days = Column(Integer, nullable=False)
    subtotal = Column(Float, nullable=False)
    service_fee = Column(Float, nullable=False)
    security_deposit = Column(Float, default=0, nullable=False)
    total_amount = Column(Float, nullable=False)
    pickup_location = Column(String(255), nullable=True)

    # pending → confirmed/cancelled → active → completed (see domain.bookings.lifecycle)
    status = Column(String(20), default="pending", nullable=False, index=True)

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    vehicle = relationship("Vehicle", back_populates="bookings")
    renter = relationship("Profile", foreign_keys=[renter_id])
    owner = relationship("Profile", foreign_keys=[owner_id])
    days = relationship("BookingDay", back_populates="booking", cascade="all, delete-orphan")
    agreement = relationship("Agreement", back_populates="booking", uselist=False)

    __table_args__ = (
        CheckConstraint("start_date <= end_date", name="check_booking_date_order"),
        CheckConstraint(
            "status IN ('pending', 'confirmed', 'active', 'completed', 'cancelled')",
            name="check_booking_status",
        ),
        Index("ix_bookings_vehicle_window", "vehicle_id", "start_date", "end_date"),
    )


class BookingDay(Base):
    """
    One reserved vehicle-day of a live booking.

    The unique (vehicle_id, day) constraint rejects overlapping live bookings at the
    database level, so two concurrent admissions can never both commit the same day.
    Rows are removed when the booking leaves the live statuses.
    """

    __tablename__ = "booking_days"

    id = Column(Integer, primary_key=True, index=True)
    vehicle_id = Column(Integer, ForeignKey("vehicles.id"), nullable=False)
    booking_id = Column(Integer, ForeignKey("bookings.id", ondelete="CASCADE"), nullable=False)
    day = Column(Date, nullable=False)

    booking = relationship("Booking", back_populates="days")

    __table_args__ = (UniqueConstraint("vehicle_id", "day", name="uq_booking_day_vehicle_day"),)


class Agreement(Base):
    __tablename__ = "rental_agreements"

    id = Column(Integer, primary_key=True, index=True)
    public_id = Column(
        String(36), unique=True, nullable=False, index=True, default=generate_public_id
    )
    booking_id = Column(Integer, ForeignKey("bookings.id"), unique=True, nullable=False)
    owner_id = Column(String(36), ForeignKey("profiles.id"), nullable=False)
    renter_id = Column(String(36), ForeignKey("profiles.id"), nullable=False)

    # Snapshot taken when the agreement is generated; never refreshed
    vehicle_info = Column(JSON, nullable=True)  # make, model, year, plate_number, color
    terms_and_conditions = Column(Text, nullable=False)
    rental_period_start = Column(Date, nullable=False)
    rental_period_end = Column(Date, nullable=False)
    daily_rate = Column(Float, nullable=False)
    total_amount = Column(Float, nullable=False)
    security_deposit = Column(Float, default=0, nullable=False)

    # Signatures
    owner_signed = Column(Boolean, default=False, nullable=False)
    owner_signed_at = Column(DateTime, nullable=True)
    renter_signed = Column(Boolean, default=False, nullable=False)
    renter_signed_at = Column(DateTime, nullable=True)

    # pending_signatures until both parties sign, then active
    status = Column(String(30), default="pending_signatures", nullable=False)

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    booking = relationship("Booking", back_populates="agreement")

    @property
    def fully_signed(self) -> bool:
        return bool(self.owner_signed and self.renter_signed)


class Notification(Base):
    __tablename__ = "notifications"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String(36), ForeignKey("profiles.id"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    message = Column(Text, nullable=False)
    type = Column(String(50), nullable=False)  # booking, agreement, vehicle
    reference_id = Column(String(64), nullable=True)
    reference_type = Column(String(50), nullable=True)
    is_read = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, server_default=func.now())


class AuditLog(Base):
    __tablename__ = "audit_logs"

    id = Column(Integer, primary_key=True, index=True)
    performed_by = Column(String(36), nullable=True)  # None for automated jobs
    action = Column(String(100), nullable=False)  # e.g. BOOKING_CONFIRMED, AGREEMENT_SIGNED
    entity_type = Column(String(50), nullable=False)  # booking, agreement, vehicle
    entity_id = Column(String(64), nullable=False)
    description = Column(Text, nullable=True)
    old_value = Column(JSON, nullable=True)
    new_value = Column(JSON, nullable=True)
    created_at = Column(DateTime, server_default=func.now())
