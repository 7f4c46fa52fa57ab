"""Booking domain schemas - Pydantic models for validation"""

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel

from ...shared.actors import ActorRole


class BookingCreate(BaseModel):
    """Schema for requesting a booking"""

    vehicleId: int
    startDate: date
    endDate: date


class BookingTransitionRequest(BaseModel):
    """Schema for moving a booking to a new status"""

    target_status: str  # confirmed, cancelled, completed
    actor_role: Optional[ActorRole] = None  # Capacity to act in, inferred when omitted


class BookingResponse(BaseModel):
    """Schema for booking response"""

    id: int
    public_id: str
    vehicleId: int
    vehicleTitle: Optional[str] = None
    renterId: str
    ownerId: str
    startDate: date
    endDate: date
    totalDays: int
    dailyRate: float
    subtotal: float
    serviceFee: float
    securityDeposit: float
    totalAmount: float
    pickupLocation: Optional[str]
    status: str
    allowedTransitions: list[str] = []
    createdAt: Optional[datetime]


class ExpireStaleResponse(BaseModel):
    cancelled: int
    bookingIds: list[int]
