"""Agreement service - Rental agreement generation and two-party signing"""

import logging
from datetime import datetime
from typing import Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ...models import Agreement, Booking
from ...services.audit_logger import log_audit
from ...services.notification_service import (
    send_agreement_signed_notification,
    send_booking_status_notification,
)
from ...shared.actors import Actor, ActorRole, authorize_actor
from ...shared.errors import AgreementUnavailable, DomainError, NotAuthorized, NotFoundError
from ..bookings.repository import BookingRepository
from ..bookings.service import BookingService
from .repository import AgreementRepository
from .terms import generate_rental_terms, vehicle_snapshot

logger = logging.getLogger(__name__)

SIGNABLE_BOOKING_STATUSES = ("confirmed", "active")


class AgreementService:
    """Service layer for rental agreements"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = AgreementRepository()
        self.booking_repo = BookingRepository()

    def get_booking(self, booking_id: int) -> Booking:
        booking = self.booking_repo.get_booking(self.db, booking_id)
        if not booking:
            raise NotFoundError(f"Booking {booking_id} not found")
        return booking

    def get_agreement(self, agreement_id: int) -> Agreement:
        agreement = self.repo.get_agreement(self.db, agreement_id)
        if not agreement:
            raise NotFoundError(f"Agreement {agreement_id} not found")
        return agreement

    def _authorize(self, actor: Actor, owner_id: str, renter_id: str) -> None:
        is_admin = False
        if actor.role == ActorRole.ADMIN:
            profile = self.booking_repo.get_profile(self.db, actor.user_id)
            is_admin = bool(profile and profile.is_admin)
        authorize_actor(actor, owner_id, renter_id, is_admin)

    def get_or_create_agreement(self, booking_id: int, actor: Actor) -> Agreement:
        """
        Return the booking's agreement, generating it on first access.

        Raises:
            NotFoundError: Unknown booking
            NotAuthorized: Actor is neither a party nor an admin
            AgreementUnavailable: No agreement yet and the booking is not confirmed
        """
        booking = self.get_booking(booking_id)
        self._authorize(actor, booking.owner_id, booking.renter_id)

        agreement = self.repo.get_by_booking(self.db, booking_id)
        if agreement:
            return agreement

        if booking.status != "confirmed":
            raise AgreementUnavailable(
                f"The rental agreement is available once the owner confirms the booking "
                f"(booking is {booking.status})"
            )

        try:
            agreement = self.repo.create_agreement(
                self.db,
                booking_id=booking.id,
                owner_id=booking.owner_id,
                renter_id=booking.renter_id,
                vehicle_info=vehicle_snapshot(booking.vehicle),
                terms_and_conditions=generate_rental_terms(booking),
                rental_period_start=booking.start_date,
                rental_period_end=booking.end_date,
                daily_rate=booking.daily_rate,
                total_amount=booking.total_amount,
                security_deposit=booking.security_deposit,
                status="pending_signatures",
            )
            self.db.commit()
        except IntegrityError:
            # Another request generated it first
            self.db.rollback()
            agreement = self.repo.get_by_booking(self.db, booking_id)
            if not agreement:
                raise
            logger.info(f"ℹ️ Agreement for booking {booking_id} already created, using existing")
            return agreement

        self.db.refresh(agreement)
        logger.info(f"📄 Agreement {agreement.id} generated for booking {booking_id}")
        log_audit(
            self.db,
            action="AGREEMENT_CREATED",
            entity_type="agreement",
            entity_id=agreement.id,
            description=f"Rental agreement generated for booking {booking_id}",
            performed_by=actor.user_id,
        )
        return agreement

    def sign_agreement(
        self, agreement_id: int, actor: Actor, now: Optional[datetime] = None
    ) -> Agreement:
        """
        Record the actor's signature.

        The agreement and its booking are locked, the booking status is re-checked,
        and the signature is written together with any activation in one commit.
        Whichever signature lands second activates the agreement and the booking,
        whatever the order. Signing twice as the same role changes nothing.

        Raises:
            NotFoundError: Unknown agreement
            NotAuthorized: Actor is not the owner or renter of this agreement
            AgreementUnavailable: The booking is no longer confirmed or active
        """
        agreement = self.get_agreement(agreement_id)
        if actor.role == ActorRole.ADMIN:
            raise NotAuthorized("Only the owner or the renter can sign the rental agreement")
        authorize_actor(actor, agreement.owner_id, agreement.renter_id)

        role = actor.role.value
        try:
            agreement = self.repo.lock_agreement(self.db, agreement_id)
            booking = self.booking_repo.lock_booking(self.db, agreement.booking_id)
            if booking.status not in SIGNABLE_BOOKING_STATUSES:
                raise AgreementUnavailable(
                    f"This agreement can no longer be signed (booking is {booking.status})"
                )

            signed = self.repo.apply_signature(agreement, role, now or datetime.utcnow())
            activated = False
            if agreement.fully_signed:
                agreement.status = "active"
                if booking.status == "confirmed":
                    BookingService(self.db).activate_from_agreement(booking)
                    activated = True
            self.db.commit()
        except DomainError:
            self.db.rollback()
            raise
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"❌ Failed to sign agreement {agreement_id} as {role}: {e}")
            raise

        if signed:
            logger.info(f"✍️ Agreement {agreement_id} signed by {role} {actor.user_id}")
        else:
            logger.info(f"ℹ️ Agreement {agreement_id} already signed by {role}")
        if activated:
            logger.info(f"🚗 Booking {booking.id} is now active (agreement {agreement_id} fully signed)")

        agreement = self.get_agreement(agreement_id)
        if signed:
            log_audit(
                self.db,
                action="AGREEMENT_SIGNED",
                entity_type="agreement",
                entity_id=agreement.id,
                description=f"The {role} signed the rental agreement",
                new_value={f"{role}_signed": True},
                performed_by=actor.user_id,
            )
        if activated:
            booking = agreement.booking
            log_audit(
                self.db,
                action="BOOKING_ACTIVE",
                entity_type="booking",
                entity_id=booking.id,
                description="Both parties signed the rental agreement; booking is now active",
                old_value={"status": "confirmed"},
                new_value={"status": "active"},
                performed_by=actor.user_id,
            )
            send_booking_status_notification(self.db, booking, "active", actor.user_id)
        elif signed:
            recipient = agreement.renter_id if actor.role == ActorRole.OWNER else agreement.owner_id
            send_agreement_signed_notification(self.db, agreement, role, recipient)
        return agreement
