"""
Automated status transitions for bookings
Cancels pending requests the owner never answered:
- pending longer than PENDING_BOOKING_TTL_HOURS
- pending while the start date has already passed
"""

import logging
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy.orm import Session

from ..config import PENDING_BOOKING_TTL_HOURS
from ..domain.bookings.repository import BookingRepository
from .audit_logger import log_audit
from .notification_service import send_notification

logger = logging.getLogger(__name__)


def expire_stale_bookings(db: Session, now: Optional[datetime] = None) -> dict:
    """
    Cancel stale pending bookings and release their calendar days.
    Should be run as a scheduled job (see worker.py)

    Returns:
        dict: {"cancelled": count, "booking_ids": [...]}
    """
    repo = BookingRepository()
    summary = {"cancelled": 0, "booking_ids": []}

    try:
        now = now or datetime.utcnow()
        cutoff = now - timedelta(hours=PENDING_BOOKING_TTL_HOURS)
        candidates = repo.get_stale_pending(db, created_before=cutoff, today=now.date())

        stale = []
        for booking in candidates:
            # The owner may have answered since the candidates were read
            if not repo.cancel_if_pending(db, booking.id):
                logger.info(f"ℹ️ Booking {booking.id} is no longer pending, skipping expiry")
                continue
            repo.release_days(db, booking)
            stale.append(booking)
            summary["booking_ids"].append(booking.id)
            logger.info(f"⌛ Booking {booking.id} transitioned: pending → cancelled (expired)")

        db.commit()
        if not stale:
            logger.debug("ℹ️ No stale pending bookings")
            return summary

        summary["cancelled"] = len(stale)
        logger.info(f"📊 Pending expiry summary: {summary}")
    except Exception as e:
        logger.error(f"❌ Error expiring stale bookings: {str(e)}")
        db.rollback()
        raise

    for booking in stale:
        log_audit(
            db,
            action="BOOKING_EXPIRED",
            entity_type="booking",
            entity_id=booking.id,
            description="Pending request expired without owner response",
            old_value={"status": "pending"},
            new_value={"status": "cancelled"},
        )
        send_notification(
            db=db,
            user_id=booking.renter_id,
            title="Booking Request Expired",
            message=(
                f"Your request for {booking.start_date.isoformat()} to "
                f"{booking.end_date.isoformat()} expired before the owner responded."
            ),
            notification_type="booking",
            reference_id=str(booking.id),
            reference_type="booking",
        )
    return summary
