import uuid
from datetime import datetime
from typing import Optional
from sqlalchemy import DateTime
from sqlmodel import SQLModel, Field
from core.clock import utcnow
import enum

class AuditAction(str, enum.Enum):
    # Student actions
    SUBMITTED_COMPLAINT = "submitted_complaint"
    EDITED_COMPLAINT = "edited_complaint"
    DELETED_COMPLAINT = "deleted_complaint"

    # Admin actions
    UPDATED_COMPLAINT_STATUS = "updated_complaint_status"

    # Account actions
    REGISTERED_USER = "registered_user"

class AuditLog(SQLModel, table=True):
    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True, index=True)
    action: str  # one of AuditAction
    details: Optional[str] = None

    user_id: uuid.UUID = Field(foreign_key="user.id")  # who did the action
    created_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True), nullable=False)
