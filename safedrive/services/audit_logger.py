"""
Audit Logger - records booking, agreement and listing changes to the audit_logs table.
Audit logging must never raise: a failed audit write is logged and dropped.
"""

import logging
from typing import Any, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..models import AuditLog

logger = logging.getLogger(__name__)


def log_audit(
    db: Session,
    action: str,
    entity_type: str,
    entity_id: Any,
    description: str,
    old_value: Optional[dict] = None,
    new_value: Optional[dict] = None,
    performed_by: Optional[str] = None,
) -> bool:
    """
    Args:
        action: e.g. 'BOOKING_CONFIRMED', 'AGREEMENT_SIGNED', 'VEHICLE_APPROVED'
        entity_type: 'booking' | 'agreement' | 'vehicle'
        entity_id: ID of the affected record
        description: Human-readable description
        old_value / new_value: Previous and new state (optional)
        performed_by: Profile ID of the actor, None for automated jobs
    """
    try:
        entry = AuditLog(
            performed_by=performed_by,
            action=action,
            entity_type=entity_type,
            entity_id=str(entity_id or ""),
            description=description,
            old_value=old_value,
            new_value=new_value,
        )
        db.add(entry)
        db.commit()
        return True
    except SQLAlchemyError as e:
        db.rollback()
        logger.warning(f"[Audit] Failed to log audit event {action} for {entity_type} {entity_id}: {e}")
        return False
