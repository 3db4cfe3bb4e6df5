import uuid
from datetime import datetime
from typing import Optional
from sqlalchemy import DateTime
from sqlmodel import SQLModel, Field
from core.clock import utcnow
import enum


class ComplaintCategory(str, enum.Enum):
    hostel = "Hostel"
    mess = "Mess"
    wifi = "Wi-Fi"
    washroom = "Washroom"
    electricity = "Electricity"
    water = "Water"
    other = "Other"


class ComplaintStatus(str, enum.Enum):
    pending = "Pending"          # Submitted, student can still edit or delete
    in_progress = "In Progress"  # Admin is working on it
    resolved = "Resolved"        # Closed by admin


class Complaint(SQLModel, table=True):
    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True, index=True)
    user_id: uuid.UUID = Field(foreign_key="user.id", index=True, nullable=False)
    user_email: str = Field(nullable=False)
    category: ComplaintCategory = Field(index=True)
    description: str
    status: ComplaintStatus = Field(default=ComplaintStatus.pending, index=True)
    image_url: Optional[str] = None  # public URL under /uploads
    admin_comment: Optional[str] = None
    created_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True), nullable=False, index=True)
    updated_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True), nullable=False)
