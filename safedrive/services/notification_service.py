"""
Booking Notification Service
Writes in-app notifications for booking and agreement workflow events.
Notifications are fire-and-forget: a failure is logged and never aborts the
operation that triggered it, which has already been committed.
"""

import logging
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..models import Booking, Notification, Vehicle

logger = logging.getLogger(__name__)


def send_notification(
    db: Session,
    user_id: str,
    title: str,
    message: str,
    notification_type: str,
    reference_id: Optional[str] = None,
    reference_type: Optional[str] = None,
) -> bool:
    """
    Unified notification sender

    Args:
        db: Database session (the triggering change must already be committed)
        user_id: Recipient profile ID
        title: Short headline
        message: Body text
        notification_type: booking, agreement, vehicle (also used for logging)
        reference_id: ID of the related record
        reference_type: Type of the related record

    Returns:
        True if the notification was stored
    """
    try:
        db.add(
            Notification(
                user_id=user_id,
                title=title,
                message=message,
                type=notification_type,
                reference_id=reference_id,
                reference_type=reference_type,
            )
        )
        db.commit()
        logger.info(f"🔔 {notification_type} notification sent to {user_id}: {title}")
        return True
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"❌ Failed to send {notification_type} notification to {user_id}: {e}")
        return False


def send_booking_request_notification(db: Session, booking: Booking, vehicle: Vehicle, renter_name: str) -> bool:
    """Tell the owner a renter wants their vehicle"""
    return send_notification(
        db=db,
        user_id=booking.owner_id,
        title="New Booking Request",
        message=f"{renter_name} wants to rent your {vehicle.title}",
        notification_type="booking",
        reference_id=str(booking.id),
        reference_type="booking",
    )


# Target status -> (recipient side, title, message template)
_STATUS_MESSAGES = {
    "confirmed": (
        "renter",
        "Booking Confirmed",
        "Your booking from {start} to {end} was accepted. Review and sign the rental agreement.",
    ),
    "cancelled": (
        "other",
        "Booking Cancelled",
        "The booking from {start} to {end} was cancelled.",
    ),
    "active": (
        "both",
        "Rental Active",
        "Both parties signed the agreement. The rental from {start} to {end} is now active.",
    ),
    "completed": (
        "renter",
        "Rental Completed",
        "Your rental from {start} to {end} is complete. Thank you for driving with us.",
    ),
}


def send_booking_status_notification(
    db: Session, booking: Booking, new_status: str, actor_id: Optional[str] = None
) -> int:
    """
    Notify the counterparty of a status change.
    Returns the number of notifications stored.
    """
    entry = _STATUS_MESSAGES.get(new_status)
    if not entry:
        return 0

    side, title, template = entry
    if side == "renter":
        recipients = [booking.renter_id]
    elif side == "both":
        recipients = [booking.owner_id, booking.renter_id]
    else:
        # Whoever did not trigger the change; automated changes go to both parties
        recipients = [
            user_id for user_id in (booking.owner_id, booking.renter_id) if user_id != actor_id
        ]

    message = template.format(start=booking.start_date.isoformat(), end=booking.end_date.isoformat())
    sent = 0
    for user_id in recipients:
        if send_notification(
            db=db,
            user_id=user_id,
            title=title,
            message=message,
            notification_type="booking",
            reference_id=str(booking.id),
            reference_type="booking",
        ):
            sent += 1
    return sent


def send_agreement_signed_notification(
    db: Session, agreement, signer_role: str, recipient_id: str
) -> bool:
    """Tell the other party their counterparty has signed"""
    return send_notification(
        db=db,
        user_id=recipient_id,
        title="Agreement Signed",
        message=f"The {signer_role} signed the rental agreement. Your signature is still required.",
        notification_type="agreement",
        reference_id=str(agreement.booking_id),
        reference_type="booking",
    )


def send_vehicle_review_notification(db: Session, vehicle: Vehicle, approved: bool) -> bool:
    status = "approved" if approved else "rejected"
    return send_notification(
        db=db,
        user_id=vehicle.owner_id,
        title=f"Vehicle {status.title()}",
        message=f"Your {vehicle.title} listing was {status}.",
        notification_type="vehicle",
        reference_id=str(vehicle.id),
        reference_type="vehicle",
    )
