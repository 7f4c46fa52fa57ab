"""Agreement domain schemas - Pydantic models for validation"""

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel

from ...shared.actors import ActorRole


class SignAgreementRequest(BaseModel):
    role: Optional[ActorRole] = None  # owner or renter, inferred when omitted


class AgreementResponse(BaseModel):
    """Schema for agreement response"""

    id: int
    public_id: str
    bookingId: int
    bookingStatus: str
    ownerId: str
    renterId: str
    vehicleInfo: Optional[dict]
    termsAndConditions: str
    rentalPeriodStart: date
    rentalPeriodEnd: date
    dailyRate: float
    totalAmount: float
    securityDeposit: float
    ownerSigned: bool
    ownerSignedAt: Optional[datetime]
    renterSigned: bool
    renterSignedAt: Optional[datetime]
    status: str
    createdAt: Optional[datetime]
