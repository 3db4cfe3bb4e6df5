import uuid
import logging
from typing import Optional
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session
from models.audit_log import AuditLog, AuditAction

logger = logging.getLogger(__name__)


# Helper: Audit log
def log_action(session: Session, performed_by: uuid.UUID, action: AuditAction, details: Optional[str] = None) -> bool:
    """
    Persist an audit entry for a change that has already been committed.

    A failed audit write is rolled back and logged; the caller's change stays saved
    and the request still succeeds. Returns whether the entry was stored.
    """
    logger.info("audit user=%s action=%s details=%s", performed_by, action.value, details)
    audit = AuditLog(
        action=action.value,
        details=details,
        user_id=performed_by,
    )
    try:
        session.add(audit)
        session.commit()
    except SQLAlchemyError:
        session.rollback()
        logger.exception("Failed to write audit entry user=%s action=%s", performed_by, action.value)
        return False
    return True
