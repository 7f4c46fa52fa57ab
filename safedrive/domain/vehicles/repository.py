"""Vehicle repository - Database operations for vehicle listings"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import Profile, Vehicle


class VehicleRepository:
    """Repository for vehicle database operations"""

    @staticmethod
    def get_vehicle(db: Session, vehicle_id: int) -> Optional[Vehicle]:
        return db.query(Vehicle).filter(Vehicle.id == vehicle_id).first()

    @staticmethod
    def lock_vehicle(db: Session, vehicle_id: int) -> Optional[Vehicle]:
        return db.query(Vehicle).filter(Vehicle.id == vehicle_id).with_for_update().first()

    @staticmethod
    def list_by_status(db: Session, status: str) -> list[Vehicle]:
        return (
            db.query(Vehicle)
            .filter(Vehicle.status == status)
            .order_by(Vehicle.created_at.asc(), Vehicle.id.asc())
            .all()
        )

    @staticmethod
    def get_profile(db: Session, user_id: str) -> Optional[Profile]:
        return db.query(Profile).filter(Profile.id == user_id).first()
