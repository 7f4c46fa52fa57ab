"""Agreement repository - Database operations for rental agreements"""

from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from ...models import Agreement


class AgreementRepository:
    """Repository for agreement database operations"""

    @staticmethod
    def get_agreement(db: Session, agreement_id: int) -> Optional[Agreement]:
        return db.query(Agreement).filter(Agreement.id == agreement_id).first()

    @staticmethod
    def get_by_booking(db: Session, booking_id: int) -> Optional[Agreement]:
        return db.query(Agreement).filter(Agreement.booking_id == booking_id).first()

    @staticmethod
    def lock_agreement(db: Session, agreement_id: int) -> Optional[Agreement]:
        return (
            db.query(Agreement)
            .filter(Agreement.id == agreement_id)
            .populate_existing()
            .with_for_update()
            .first()
        )

    @staticmethod
    def create_agreement(db: Session, **agreement_data) -> Agreement:
        agreement = Agreement(**agreement_data)
        db.add(agreement)
        db.flush()
        return agreement

    @staticmethod
    def apply_signature(agreement: Agreement, role: str, signed_at: datetime) -> bool:
        """
        Set one party's signature flag and timestamp on a locked agreement, leaving
        the other party's columns untouched. Returns False when that role had
        already signed.
        """
        if getattr(agreement, f"{role}_signed"):
            return False
        setattr(agreement, f"{role}_signed", True)
        setattr(agreement, f"{role}_signed_at", signed_at)
        return True
