"""Booking router - FastAPI endpoints for booking requests and lifecycle"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_admin, get_current_user
from ...database import get_db
from ...models import Booking, Profile
from ...shared.actors import ActorRole, resolve_actor
from .lifecycle import allowed_targets
from .schemas import (
    BookingCreate,
    BookingResponse,
    BookingTransitionRequest,
    ExpireStaleResponse,
)
from .service import BookingService

router = APIRouter(prefix="/bookings", tags=["Bookings"])


def get_booking_service(db: Session = Depends(get_db)) -> BookingService:
    """Dependency injection for BookingService"""
    return BookingService(db)


def to_booking_response(booking: Booking, role: Optional[ActorRole] = None) -> BookingResponse:
    return BookingResponse(
        id=booking.id,
        public_id=booking.public_id,
        vehicleId=booking.vehicle_id,
        vehicleTitle=booking.vehicle.title if booking.vehicle else None,
        renterId=booking.renter_id,
        ownerId=booking.owner_id,
        startDate=booking.start_date,
        endDate=booking.end_date,
        totalDays=booking.total_days,
        dailyRate=booking.daily_rate,
        subtotal=booking.subtotal,
        serviceFee=booking.service_fee,
        securityDeposit=booking.security_deposit,
        totalAmount=booking.total_amount,
        pickupLocation=booking.pickup_location,
        status=booking.status,
        allowedTransitions=allowed_targets(booking.status, role) if role else [],
        createdAt=booking.created_at,
    )


def viewer_role(booking: Booking, user: Profile) -> ActorRole:
    return resolve_actor(user, booking.owner_id, booking.renter_id).role


@router.post("", response_model=BookingResponse, status_code=201)
async def request_booking(
    data: BookingCreate,
    current_user: Profile = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
):
    """Request a vehicle for an inclusive date range; the booking starts as pending"""
    booking = service.request_booking(data.vehicleId, current_user, data.startDate, data.endDate)
    return to_booking_response(booking, ActorRole.RENTER)


@router.get("", response_model=list[BookingResponse])
async def get_bookings(
    current_user: Profile = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
    role: Optional[str] = Query(None, description="owner or renter, both when omitted"),
    status: Optional[str] = Query(None, description="Filter by booking status"),
):
    """Get bookings the current user is a party to"""
    bookings = service.list_bookings(current_user, role, status)
    return [to_booking_response(booking, viewer_role(booking, current_user)) for booking in bookings]


@router.post("/expire-stale", response_model=ExpireStaleResponse)
async def expire_stale(
    current_admin: Profile = Depends(get_current_admin),
    db: Session = Depends(get_db),
):
    """Cancel pending requests that the owner never answered"""
    from ...services.status_automation import expire_stale_bookings

    summary = expire_stale_bookings(db)
    return ExpireStaleResponse(cancelled=summary["cancelled"], bookingIds=summary["booking_ids"])


@router.get("/{booking_id}", response_model=BookingResponse)
async def get_booking(
    booking_id: int,
    current_user: Profile = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
):
    booking = service.get_booking(booking_id, current_user)
    return to_booking_response(booking, viewer_role(booking, current_user))


@router.post("/{booking_id}/transition", response_model=BookingResponse)
async def transition_booking(
    booking_id: int,
    data: BookingTransitionRequest,
    current_user: Profile = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
):
    """Confirm, cancel or complete a booking as owner, renter or admin"""
    booking = service.get_booking(booking_id, current_user)
    actor = resolve_actor(current_user, booking.owner_id, booking.renter_id, data.actor_role)
    booking = service.transition_booking(booking_id, actor, data.target_status)
    return to_booking_response(booking, actor.role)
