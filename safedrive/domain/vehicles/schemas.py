"""Vehicle domain schemas - Pydantic models for validation"""

from typing import Optional

from pydantic import BaseModel


class ListingUpdate(BaseModel):
    listed: bool


class ReviewRequest(BaseModel):
    approve: bool


class VehicleResponse(BaseModel):
    id: int
    ownerId: str
    title: str
    plateNumber: Optional[str]
    pickupLocation: Optional[str]
    dailyRate: float
    securityDeposit: float
    isAvailable: bool
    status: str
