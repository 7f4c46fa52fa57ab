"""Vehicle router - FastAPI endpoints for listing and review"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import get_current_admin, get_current_user
from ...database import get_db
from ...models import Profile, Vehicle
from .schemas import ListingUpdate, ReviewRequest, VehicleResponse
from .service import VehicleService

router = APIRouter(prefix="/vehicles", tags=["Vehicles"])


def get_vehicle_service(db: Session = Depends(get_db)) -> VehicleService:
    """Dependency injection for VehicleService"""
    return VehicleService(db)


def to_vehicle_response(vehicle: Vehicle) -> VehicleResponse:
    return VehicleResponse(
        id=vehicle.id,
        ownerId=vehicle.owner_id,
        title=vehicle.title,
        plateNumber=vehicle.plate_number,
        pickupLocation=vehicle.pickup_location,
        dailyRate=vehicle.daily_rate,
        securityDeposit=vehicle.security_deposit,
        isAvailable=vehicle.is_available,
        status=vehicle.status,
    )


@router.get("/pending-review", response_model=list[VehicleResponse])
async def get_pending_review(
    current_admin: Profile = Depends(get_current_admin),
    service: VehicleService = Depends(get_vehicle_service),
):
    """Vehicles waiting for admin approval"""
    return [to_vehicle_response(vehicle) for vehicle in service.pending_review()]


@router.patch("/{vehicle_id}/listing", response_model=VehicleResponse)
async def set_listing(
    vehicle_id: int,
    data: ListingUpdate,
    current_user: Profile = Depends(get_current_user),
    service: VehicleService = Depends(get_vehicle_service),
):
    """Owner's listed/unlisted switch"""
    return to_vehicle_response(service.set_listed(vehicle_id, current_user, data.listed))


@router.patch("/{vehicle_id}/review", response_model=VehicleResponse)
async def review_vehicle(
    vehicle_id: int,
    data: ReviewRequest,
    current_admin: Profile = Depends(get_current_admin),
    service: VehicleService = Depends(get_vehicle_service),
):
    return to_vehicle_response(service.review_vehicle(vehicle_id, current_admin, data.approve))
