import uuid
import logging
from fastapi import APIRouter, Depends, HTTPException, Query, Request, UploadFile, File, Form, status
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session
from core.config import COMPLAINTS_PER_PAGE, RECENT_ACTIVITY_LIMIT
from core.database import get_session
from core.listing import ListingView, render_listing
from models.complaints import Complaint, ComplaintCategory, ComplaintStatus
from models.audit_log import AuditAction
from models.user import User, UserRole
from repositories.complaints import ComplaintRepository
from schemas.complaints import (
    ComplaintListing,
    ComplaintRead,
    ComplaintRow,
    QuickStats,
    RecentActivity,
    RecentActivityItem,
)
from utils.audit import log_action
from utils.pagination import page_link
from utils.security import get_current_user
from utils.storage import read_image, store_image, delete_image

router = APIRouter(tags=["Complaints"])
logger = logging.getLogger(__name__)


def parse_complaint_id(complaint_id: str) -> uuid.UUID:
    try:
        return uuid.UUID(complaint_id)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid complaint ID")


def validate_fields(category: str, description: str) -> tuple[ComplaintCategory, str]:
    if not category.strip() or not description.strip():
        raise HTTPException(status_code=400, detail="Please fill all required fields")
    try:
        return ComplaintCategory(category.strip()), description.strip()
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Invalid category: {category}")


def load_complaint(repo: ComplaintRepository, complaint_id: str) -> Complaint:
    complaint_uuid = parse_complaint_id(complaint_id)
    try:
        complaint = repo.get(complaint_uuid)
    except SQLAlchemyError:
        logger.exception("Error loading complaint %s", complaint_id)
        raise HTTPException(status_code=500, detail="Failed to load complaint details")
    if not complaint:
        raise HTTPException(status_code=404, detail="Complaint not found")
    return complaint


def load_editable_complaint(repo: ComplaintRepository, complaint_id: str, user: User) -> Complaint:
    complaint = load_complaint(repo, complaint_id)
    if complaint.user_id != user.id:
        raise HTTPException(status_code=403, detail="Not authorized")
    if complaint.status != ComplaintStatus.pending:
        raise HTTPException(status_code=409, detail="Only pending complaints can be changed")
    return complaint


@router.post("/", response_model=ComplaintRead, status_code=status.HTTP_201_CREATED)
async def create_complaint(
    category: str = Form(""),
    description: str = Form(""),
    image: UploadFile | None = File(None),
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    category_value, description = validate_fields(category, description)

    # Size and type are checked before anything is written
    content = await read_image(image) if image and image.filename else None

    image_url: str | None = None
    if content is not None:
        try:
            image_url = await store_image(current_user.id, image.filename, content)
        except OSError:
            logger.exception("Error storing image for %s", current_user.email)
            raise HTTPException(status_code=500, detail="Failed to save image")

    complaint = Complaint(
        user_id=current_user.id,
        user_email=current_user.email,
        category=category_value,
        description=description,
        image_url=image_url,
        status=ComplaintStatus.pending,
    )

    repo = ComplaintRepository(session)
    try:
        repo.create(complaint)
    except SQLAlchemyError:
        session.rollback()
        delete_image(image_url)
        logger.exception("Error submitting complaint for %s", current_user.email)
        raise HTTPException(status_code=500, detail="Failed to submit complaint")

    log_action(
        session,
        performed_by=current_user.id,
        action=AuditAction.SUBMITTED_COMPLAINT,
        details=f"Complaint {complaint.id} ({complaint.category.value})",
    )
    return ComplaintRead.for_student(complaint)


@router.get("/", response_model=ComplaintListing)
def list_my_complaints(
    request: Request,
    page: int = Query(1, ge=1),
    generation: int = Query(0, ge=0),
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    """
    The caller's complaints, newest first, one page at a time.
    """
    view = ListingView(page=page, page_size=COMPLAINTS_PER_PAGE, generation=generation)
    try:
        complaints = ComplaintRepository(session).list_by_owner(current_user.id)
    except SQLAlchemyError:
        logger.exception("Error loading complaints for %s", current_user.email)
        raise HTTPException(status_code=500, detail="Failed to load complaints")

    listing = render_listing(complaints, view, ComplaintRow.from_complaint, link_for=page_link(request, view))
    return ComplaintListing.from_page(listing)


@router.get("/stats", response_model=QuickStats)
def quick_stats(
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    try:
        counts = ComplaintRepository(session).count_by_status(user_id=current_user.id)
    except SQLAlchemyError:
        logger.exception("Error loading quick stats for %s", current_user.email)
        raise HTTPException(status_code=500, detail="Failed to load statistics")

    return QuickStats(
        total=sum(counts.values()),
        pending=counts[ComplaintStatus.pending],
        in_progress=counts[ComplaintStatus.in_progress],
        resolved=counts[ComplaintStatus.resolved],
    )


@router.get("/recent", response_model=RecentActivity)
def recent_activity(
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    try:
        complaints = ComplaintRepository(session).list_by_owner(current_user.id, limit=RECENT_ACTIVITY_LIMIT)
    except SQLAlchemyError:
        logger.exception("Error loading recent activity for %s", current_user.email)
        raise HTTPException(status_code=500, detail="Failed to load recent activity")

    if not complaints:
        return RecentActivity(items=[], empty_message="No recent activity")
    return RecentActivity(items=[RecentActivityItem.from_complaint(c) for c in complaints])


@router.get("/{complaint_id}", response_model=ComplaintRead)
def get_complaint_by_id(
    complaint_id: str,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    complaint = load_complaint(ComplaintRepository(session), complaint_id)

    if current_user.role == UserRole.admin:
        return ComplaintRead.for_admin(complaint)
    if complaint.user_id != current_user.id:
        raise HTTPException(status_code=403, detail="Not authorized")
    return ComplaintRead.for_student(complaint)


@router.put("/{complaint_id}", response_model=ComplaintRead)
async def edit_complaint(
    complaint_id: str,
    category: str = Form(""),
    description: str = Form(""),
    image: UploadFile | None = File(None),
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    repo = ComplaintRepository(session)
    complaint = load_editable_complaint(repo, complaint_id, current_user)
    category_value, description = validate_fields(category, description)
    content = await read_image(image) if image and image.filename else None

    old_image_url = complaint.image_url
    new_image_url: str | None = None
    if content is not None:
        try:
            new_image_url = await store_image(current_user.id, image.filename, content)
        except OSError:
            logger.exception("Error storing image for %s", current_user.email)
            raise HTTPException(status_code=500, detail="Failed to save image")

    try:
        repo.update(complaint, category_value, description, image_url=new_image_url)
    except SQLAlchemyError:
        session.rollback()
        delete_image(new_image_url)
        logger.exception("Error updating complaint %s", complaint_id)
        raise HTTPException(status_code=500, detail="Failed to update complaint")

    if new_image_url:
        delete_image(old_image_url)

    log_action(
        session,
        performed_by=current_user.id,
        action=AuditAction.EDITED_COMPLAINT,
        details=f"Complaint {complaint.id} edited",
    )
    return ComplaintRead.for_student(complaint)


@router.delete("/{complaint_id}")
def delete_complaint(
    complaint_id: str,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    repo = ComplaintRepository(session)
    complaint = load_editable_complaint(repo, complaint_id, current_user)
    image_url = complaint.image_url

    try:
        repo.delete(complaint)
    except SQLAlchemyError:
        session.rollback()
        logger.exception("Error deleting complaint %s", complaint_id)
        raise HTTPException(status_code=500, detail="Failed to delete complaint")

    delete_image(image_url)
    log_action(
        session,
        performed_by=current_user.id,
        action=AuditAction.DELETED_COMPLAINT,
        details=f"Complaint {complaint_id} deleted",
    )
    return {"detail": "Complaint deleted successfully"}
