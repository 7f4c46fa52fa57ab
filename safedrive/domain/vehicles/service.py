"""Vehicle service - Listing switch and admin review"""

import logging

from sqlalchemy.orm import Session

from ...models import Profile, Vehicle
from ...services.audit_logger import log_audit
from ...services.notification_service import send_vehicle_review_notification
from ...shared.errors import NotAuthorized, NotFoundError
from .repository import VehicleRepository

logger = logging.getLogger(__name__)


class VehicleService:
    """Service layer for vehicle listing state"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = VehicleRepository()

    def _lock(self, vehicle_id: int) -> Vehicle:
        vehicle = self.repo.lock_vehicle(self.db, vehicle_id)
        if not vehicle:
            raise NotFoundError(f"Vehicle {vehicle_id} not found")
        return vehicle

    def set_listed(self, vehicle_id: int, owner: Profile, listed: bool) -> Vehicle:
        """
        Turn the owner's listed/unlisted switch. Existing bookings are unaffected;
        an unlisted vehicle only stops accepting new requests.
        """
        vehicle = self._lock(vehicle_id)
        if vehicle.owner_id != owner.id:
            self.db.rollback()
            raise NotAuthorized("Only the vehicle owner can change its listing")

        previous = vehicle.is_available
        vehicle.is_available = listed
        self.db.commit()
        self.db.refresh(vehicle)

        logger.info(f"🚙 Vehicle {vehicle_id} {'listed' if listed else 'unlisted'} by owner {owner.id}")
        if previous != listed:
            log_audit(
                self.db,
                action="VEHICLE_LISTED" if listed else "VEHICLE_UNLISTED",
                entity_type="vehicle",
                entity_id=vehicle.id,
                description=f"Owner {'listed' if listed else 'unlisted'} {vehicle.title}",
                old_value={"is_available": previous},
                new_value={"is_available": listed},
                performed_by=owner.id,
            )
        return vehicle

    def review_vehicle(self, vehicle_id: int, admin: Profile, approve: bool) -> Vehicle:
        """Approve or reject a listing; only approved vehicles accept bookings"""
        if not admin.is_admin:
            raise NotAuthorized("Only administrators can review vehicles")

        vehicle = self._lock(vehicle_id)
        previous = vehicle.status
        vehicle.status = "approved" if approve else "rejected"
        self.db.commit()
        self.db.refresh(vehicle)

        logger.info(f"✅ Vehicle {vehicle_id} {vehicle.status} by admin {admin.id}")
        log_audit(
            self.db,
            action=f"VEHICLE_{vehicle.status.upper()}",
            entity_type="vehicle",
            entity_id=vehicle.id,
            description=f"Admin {vehicle.status} {vehicle.title}",
            old_value={"status": previous},
            new_value={"status": vehicle.status},
            performed_by=admin.id,
        )
        send_vehicle_review_notification(self.db, vehicle, approve)
        return vehicle

    def pending_review(self) -> list[Vehicle]:
        return self.repo.list_by_status(self.db, "pending")
