import logging
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select
from core.config import COMPLAINTS_PER_PAGE
from core.database import get_session
from core.listing import ListingView, render_listing
from models.audit_log import AuditLog, AuditAction
from models.complaints import ComplaintCategory, ComplaintStatus
from models.user import User
from repositories.complaints import ComplaintRepository
from routes.complaints import load_complaint
from schemas.complaints import (
    AdminStats,
    ChartSeries,
    ComplaintListing,
    ComplaintRead,
    ComplaintRow,
    ComplaintStatusUpdate,
)
from utils.audit import log_action
from utils.pagination import page_link
from utils.security import admin_required

router = APIRouter(tags=["Admin"])
logger = logging.getLogger(__name__)

ALL = "all"


def parse_filter(value: str, enum_type, label: str):
    """'all' (or blank) means no filter; anything else must be a member of enum_type."""
    value = value.strip()
    if not value or value == ALL:
        return None
    try:
        return enum_type(value)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Invalid {label} filter: {value}")


def admin_row(complaint) -> ComplaintRow:
    return ComplaintRow.from_complaint(complaint, include_email=True)


# List complaints, optionally filtered by status and category
@router.get("/complaints/", response_model=ComplaintListing)
def list_complaints(
    request: Request,
    status: str = Query(ALL),
    category: str = Query(ALL),
    page: int = Query(1, ge=1),
    generation: int = Query(0, ge=0),
    session: Session = Depends(get_session),
    admin: User = Depends(admin_required),
):
    status_filter: Optional[ComplaintStatus] = parse_filter(status, ComplaintStatus, "status")
    category_filter: Optional[ComplaintCategory] = parse_filter(category, ComplaintCategory, "category")

    view = ListingView(page=page, page_size=COMPLAINTS_PER_PAGE, generation=generation)
    try:
        complaints = ComplaintRepository(session).list_all(status=status_filter, category=category_filter)
    except SQLAlchemyError:
        logger.exception("Error loading admin complaints")
        raise HTTPException(status_code=500, detail="Failed to load complaints")

    listing = render_listing(complaints, view, admin_row, link_for=page_link(request, view))
    return ComplaintListing.from_page(listing)


@router.get("/complaints/{complaint_id}", response_model=ComplaintRead)
def view_complaint(
    complaint_id: str,
    session: Session = Depends(get_session),
    admin: User = Depends(admin_required),
):
    complaint = load_complaint(ComplaintRepository(session), complaint_id)
    return ComplaintRead.for_admin(complaint)


# Update complaint status
@router.patch("/complaints/{complaint_id}/status", response_model=ComplaintRead)
def update_complaint_status(
    complaint_id: str,
    payload: ComplaintStatusUpdate,
    session: Session = Depends(get_session),
    admin: User = Depends(admin_required),
):
    repo = ComplaintRepository(session)
    complaint = load_complaint(repo, complaint_id)
    previous_status = complaint.status

    # Any status may follow any other; see DESIGN.md
    try:
        repo.update_status(complaint, payload.status, admin_comment=payload.admin_comment)
    except SQLAlchemyError:
        session.rollback()
        logger.exception("Error updating complaint %s", complaint_id)
        raise HTTPException(status_code=500, detail="Failed to update complaint")

    log_action(
        session,
        performed_by=admin.id,
        action=AuditAction.UPDATED_COMPLAINT_STATUS,
        details=f"Complaint {complaint_id} set from {previous_status.value} to {payload.status.value}",
    )
    return ComplaintRead.for_admin(complaint)


# Dashboard cards and charts
@router.get("/stats", response_model=AdminStats)
def dashboard_stats(
    session: Session = Depends(get_session),
    admin: User = Depends(admin_required),
):
    repo = ComplaintRepository(session)
    try:
        by_status = repo.count_by_status()
        by_category = repo.count_by_category()
    except SQLAlchemyError:
        logger.exception("Error loading dashboard statistics")
        raise HTTPException(status_code=500, detail="Failed to load dashboard statistics")

    return AdminStats(
        total=sum(by_status.values()),
        pending=by_status[ComplaintStatus.pending],
        in_progress=by_status[ComplaintStatus.in_progress],
        resolved=by_status[ComplaintStatus.resolved],
        category_chart=ChartSeries(
            label="Complaints by Category",
            labels=[category.value for category in ComplaintCategory],
            data=[by_category[category] for category in ComplaintCategory],
        ),
        status_chart=ChartSeries(
            label="Complaints by Status",
            labels=[status.value for status in ComplaintStatus],
            data=[by_status[status] for status in ComplaintStatus],
        ),
    )


@router.get("/audit-logs/", response_model=List[AuditLog])
def view_audit_logs(
    limit: int = Query(100, ge=1, le=1000),
    session: Session = Depends(get_session),
    admin: User = Depends(admin_required),
):
    logs = session.exec(select(AuditLog).order_by(AuditLog.created_at.desc()).limit(limit)).all()
    return logs
