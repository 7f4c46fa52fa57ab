"""Agreement router - FastAPI endpoints for viewing and signing rental agreements"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...database import get_db
from ...models import Agreement, Profile
from ...shared.actors import resolve_actor
from .schemas import AgreementResponse, SignAgreementRequest
from .service import AgreementService

router = APIRouter(tags=["Agreements"])


def get_agreement_service(db: Session = Depends(get_db)) -> AgreementService:
    """Dependency injection for AgreementService"""
    return AgreementService(db)


def to_agreement_response(agreement: Agreement) -> AgreementResponse:
    return AgreementResponse(
        id=agreement.id,
        public_id=agreement.public_id,
        bookingId=agreement.booking_id,
        bookingStatus=agreement.booking.status,
        ownerId=agreement.owner_id,
        renterId=agreement.renter_id,
        vehicleInfo=agreement.vehicle_info,
        termsAndConditions=agreement.terms_and_conditions,
        rentalPeriodStart=agreement.rental_period_start,
        rentalPeriodEnd=agreement.rental_period_end,
        dailyRate=agreement.daily_rate,
        totalAmount=agreement.total_amount,
        securityDeposit=agreement.security_deposit,
        ownerSigned=agreement.owner_signed,
        ownerSignedAt=agreement.owner_signed_at,
        renterSigned=agreement.renter_signed,
        renterSignedAt=agreement.renter_signed_at,
        status=agreement.status,
        createdAt=agreement.created_at,
    )


@router.get("/bookings/{booking_id}/agreement", response_model=AgreementResponse)
async def get_agreement(
    booking_id: int,
    current_user: Profile = Depends(get_current_user),
    service: AgreementService = Depends(get_agreement_service),
):
    """Get the booking's rental agreement, generating it once the booking is confirmed"""
    booking = service.get_booking(booking_id)
    actor = resolve_actor(current_user, booking.owner_id, booking.renter_id)
    agreement = service.get_or_create_agreement(booking_id, actor)
    return to_agreement_response(agreement)


@router.post("/agreements/{agreement_id}/sign", response_model=AgreementResponse)
async def sign_agreement(
    agreement_id: int,
    data: SignAgreementRequest,
    current_user: Profile = Depends(get_current_user),
    service: AgreementService = Depends(get_agreement_service),
):
    """Sign as owner or renter; the booking becomes active once both have signed"""
    agreement = service.get_agreement(agreement_id)
    actor = resolve_actor(current_user, agreement.owner_id, agreement.renter_id, data.role)
    agreement = service.sign_agreement(agreement_id, actor)
    return to_agreement_response(agreement)
