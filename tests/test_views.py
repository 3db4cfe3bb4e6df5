import uuid
from datetime import datetime, timezone

from models.complaints import Complaint, ComplaintCategory, ComplaintStatus
from schemas.complaints import ComplaintRead, ComplaintRow, short_id, summarize
from utils.badges import status_badge_class, status_badge_color


def make_complaint(**overrides):
    values = dict(
        id=uuid.UUID("abcdef12-0000-0000-0000-000000000000"),
        user_id=uuid.uuid4(),
        user_email="student@example.com",
        category=ComplaintCategory.wifi,
        description="Router on the second floor keeps dropping",
        status=ComplaintStatus.pending,
        created_at=datetime(2024, 3, 1, 9, 30, tzinfo=timezone.utc),
        updated_at=datetime(2024, 3, 2, 10, 0, tzinfo=timezone.utc),
    )
    values.update(overrides)
    return Complaint(**values)


def test_badge_classes():
    assert status_badge_class(ComplaintStatus.pending) == "status-pending"
    assert status_badge_class(ComplaintStatus.in_progress) == "status-inprogress"
    assert status_badge_class("Resolved") == "status-resolved"


def test_badge_colors():
    assert status_badge_color(ComplaintStatus.pending) == "warning"
    assert status_badge_color("In Progress") == "info"
    assert status_badge_color(ComplaintStatus.resolved) == "success"
    assert status_badge_color("Archived") == "secondary"


def test_summary_truncates_after_fifty_characters():
    assert summarize("x" * 50) == "x" * 50
    assert summarize("x" * 51) == "x" * 50 + "..."


def test_short_id():
    assert short_id(uuid.UUID("abcdef12-0000-0000-0000-000000000000")) == "abcdef..."


def test_student_row_hides_email_and_allows_edit_while_pending():
    row = ComplaintRow.from_complaint(make_complaint())

    assert row.user_email is None
    assert row.can_edit
    assert row.short_id == "abcdef..."
    assert row.badge_class == "status-pending"
    assert row.created_at == "01/03/2024, 09:30:00"


def test_admin_row_includes_email():
    row = ComplaintRow.from_complaint(make_complaint(status=ComplaintStatus.resolved), include_email=True)
    assert row.user_email == "student@example.com"
    assert not row.can_edit


def test_student_detail_hides_comment_while_pending():
    complaint = make_complaint(admin_comment="Looking into it")
    assert ComplaintRead.for_student(complaint).admin_comment is None
    assert ComplaintRead.for_admin(complaint).admin_comment == "Looking into it"


def test_student_detail_shows_comment_once_picked_up():
    complaint = make_complaint(status=ComplaintStatus.in_progress, admin_comment="Technician booked")
    detail = ComplaintRead.for_student(complaint)

    assert detail.admin_comment == "Technician booked"
    assert detail.title == "Complaint #abcdef..."
    assert detail.user_email is None


def test_naive_timestamps_from_sqlite_are_read_as_utc():
    complaint = make_complaint(created_at=datetime(2024, 3, 1, 9, 30), updated_at=datetime(2024, 3, 2, 10, 0))
    detail = ComplaintRead.for_student(complaint)

    assert detail.created_at == datetime(2024, 3, 1, 9, 30, tzinfo=timezone.utc)
    assert detail.submitted == "01/03/2024, 09:30:00"
