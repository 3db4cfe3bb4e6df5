import uuid
from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field
from core.clock import as_utc
from core.config import DISPLAY_DATETIME_FORMAT
from core.listing import ListingPage
from models.complaints import Complaint, ComplaintCategory, ComplaintStatus
from utils.badges import status_badge_class, status_badge_color

SUMMARY_LENGTH = 50


def short_id(complaint_id: uuid.UUID) -> str:
    return f"{str(complaint_id)[:6]}..."


def summarize(description: str) -> str:
    if len(description) > SUMMARY_LENGTH:
        return description[:SUMMARY_LENGTH] + "..."
    return description


def display_time(value: datetime) -> str:
    # Timestamps are stored and shown in UTC
    return as_utc(value).strftime(DISPLAY_DATETIME_FORMAT)


# Row in the "My complaints" / admin tables
class ComplaintRow(BaseModel):
    id: uuid.UUID
    short_id: str
    user_email: Optional[str] = None  # admin table only
    category: ComplaintCategory
    summary: str
    created_at: str
    status: ComplaintStatus
    badge_class: str
    can_edit: bool

    @classmethod
    def from_complaint(cls, complaint: Complaint, include_email: bool = False) -> "ComplaintRow":
        return cls(
            id=complaint.id,
            short_id=short_id(complaint.id),
            user_email=complaint.user_email if include_email else None,
            category=complaint.category,
            summary=summarize(complaint.description),
            created_at=display_time(complaint.created_at),
            status=complaint.status,
            badge_class=status_badge_class(complaint.status),
            can_edit=complaint.status == ComplaintStatus.pending,
        )


class PageControlRead(BaseModel):
    kind: str
    label: str
    page: int
    active: bool
    disabled: bool
    href: Optional[str] = None

    class Config:
        from_attributes = True


class ComplaintListing(BaseModel):
    rows: List[ComplaintRow]
    page: int
    page_size: int
    total_pages: int
    pagination: List[PageControlRead]
    empty_message: Optional[str] = None
    generation: int

    @classmethod
    def from_page(cls, listing: ListingPage) -> "ComplaintListing":
        return cls(
            rows=listing.rows,
            page=listing.view.page,
            page_size=listing.view.page_size,
            total_pages=listing.total_pages,
            pagination=[PageControlRead.model_validate(control) for control in listing.controls],
            empty_message=listing.empty_message,
            generation=listing.view.generation,
        )


# Detail view (modal)
class ComplaintRead(BaseModel):
    id: uuid.UUID
    title: str
    user_email: Optional[str] = None
    category: ComplaintCategory
    status: ComplaintStatus
    badge_class: str
    description: str
    image_url: Optional[str]
    admin_comment: Optional[str]
    created_at: datetime
    updated_at: datetime
    submitted: str
    last_updated: str

    @classmethod
    def for_student(cls, complaint: Complaint) -> "ComplaintRead":
        # Admin response is only shown once the complaint has been picked up
        comment = complaint.admin_comment if complaint.status != ComplaintStatus.pending else None
        return cls._build(complaint, user_email=None, admin_comment=comment or None)

    @classmethod
    def for_admin(cls, complaint: Complaint) -> "ComplaintRead":
        return cls._build(complaint, user_email=complaint.user_email, admin_comment=complaint.admin_comment)

    @classmethod
    def _build(cls, complaint: Complaint, user_email: Optional[str], admin_comment: Optional[str]) -> "ComplaintRead":
        return cls(
            id=complaint.id,
            title=f"Complaint #{short_id(complaint.id)}",
            user_email=user_email,
            category=complaint.category,
            status=complaint.status,
            badge_class=status_badge_class(complaint.status),
            description=complaint.description,
            image_url=complaint.image_url,
            admin_comment=admin_comment,
            created_at=as_utc(complaint.created_at),
            updated_at=as_utc(complaint.updated_at),
            submitted=display_time(complaint.created_at),
            last_updated=display_time(complaint.updated_at),
        )


# Request schema for the admin "manage complaint" modal
class ComplaintStatusUpdate(BaseModel):
    status: ComplaintStatus
    admin_comment: Optional[str] = Field(default=None, max_length=2000)


class QuickStats(BaseModel):
    total: int
    pending: int
    in_progress: int
    resolved: int


class RecentActivityItem(BaseModel):
    id: uuid.UUID
    category: ComplaintCategory
    status: ComplaintStatus
    badge_color: str
    created_at: str

    @classmethod
    def from_complaint(cls, complaint: Complaint) -> "RecentActivityItem":
        return cls(
            id=complaint.id,
            category=complaint.category,
            status=complaint.status,
            badge_color=status_badge_color(complaint.status),
            created_at=display_time(complaint.created_at),
        )


class RecentActivity(BaseModel):
    items: List[RecentActivityItem]
    empty_message: Optional[str] = None


class ChartSeries(BaseModel):
    label: str
    labels: List[str]
    data: List[int]


class AdminStats(QuickStats):
    category_chart: ChartSeries
    status_chart: ChartSeries
