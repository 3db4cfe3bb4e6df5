import uuid
from typing import Dict, List, Optional

from sqlalchemy import func
from sqlmodel import Session, select

from core.clock import utcnow
from models.complaints import Complaint, ComplaintCategory, ComplaintStatus


class ComplaintRepository:
    """Every complaint query the routes need, so listings can be tested without HTTP."""

    def __init__(self, session: Session):
        self.session = session

    def get(self, complaint_id: uuid.UUID) -> Optional[Complaint]:
        return self.session.get(Complaint, complaint_id)

    def list_by_owner(self, user_id: uuid.UUID, limit: Optional[int] = None) -> List[Complaint]:
        """Complaints submitted by one user, newest first."""
        statement = (
            select(Complaint)
            .where(Complaint.user_id == user_id)
            .order_by(Complaint.created_at.desc())
        )
        if limit is not None:
            statement = statement.limit(limit)
        return list(self.session.exec(statement).all())

    def list_all(
        self,
        status: Optional[ComplaintStatus] = None,
        category: Optional[ComplaintCategory] = None,
    ) -> List[Complaint]:
        """All complaints, newest first, narrowed by whichever equality filters are given."""
        statement = select(Complaint).order_by(Complaint.created_at.desc())
        if status is not None:
            statement = statement.where(Complaint.status == status)
        if category is not None:
            statement = statement.where(Complaint.category == category)
        return list(self.session.exec(statement).all())

    def create(self, complaint: Complaint) -> Complaint:
        now = utcnow()
        complaint.created_at = now
        complaint.updated_at = now
        self.session.add(complaint)
        self.session.commit()
        self.session.refresh(complaint)
        return complaint

    def update(
        self,
        complaint: Complaint,
        category: ComplaintCategory,
        description: str,
        image_url: Optional[str] = None,
    ) -> Complaint:
        complaint.category = category
        complaint.description = description
        if image_url is not None:
            complaint.image_url = image_url
        complaint.updated_at = utcnow()
        self.session.add(complaint)
        self.session.commit()
        self.session.refresh(complaint)
        return complaint

    def update_status(
        self,
        complaint: Complaint,
        status: ComplaintStatus,
        admin_comment: Optional[str] = None,
    ) -> Complaint:
        # created_at is left alone so listing order does not move
        complaint.status = status
        complaint.admin_comment = admin_comment
        complaint.updated_at = utcnow()
        self.session.add(complaint)
        self.session.commit()
        self.session.refresh(complaint)
        return complaint

    def delete(self, complaint: Complaint) -> None:
        self.session.delete(complaint)
        self.session.commit()

    def count_by_status(self, user_id: Optional[uuid.UUID] = None) -> Dict[ComplaintStatus, int]:
        statement = select(Complaint.status, func.count()).group_by(Complaint.status)
        if user_id is not None:
            statement = statement.where(Complaint.user_id == user_id)
        counts = {status: 0 for status in ComplaintStatus}
        for status, total in self.session.exec(statement).all():
            counts[ComplaintStatus(status)] = total
        return counts

    def count_by_category(self) -> Dict[ComplaintCategory, int]:
        statement = select(Complaint.category, func.count()).group_by(Complaint.category)
        counts = {category: 0 for category in ComplaintCategory}
        for category, total in self.session.exec(statement).all():
            counts[ComplaintCategory(category)] = total
        return counts
