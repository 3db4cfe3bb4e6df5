from sqlmodel import select

from conftest import add_complaints, auth_headers
from core.clock import as_utc
from models.audit_log import AuditLog, AuditAction
from models.complaints import ComplaintCategory, ComplaintStatus


def test_admin_lists_everyone_with_email(client, session, admin, student, other_student):
    add_complaints(session, student, 2)
    add_complaints(session, other_student, 1)

    body = client.get("/admin/complaints/", headers=auth_headers(admin)).json()
    assert len(body["rows"]) == 3
    assert {row["user_email"] for row in body["rows"]} == {student.email, other_student.email}


def test_admin_filters_compose(client, session, admin, student):
    complaints = add_complaints(session, student, 4)
    complaints[0].category = ComplaintCategory.wifi
    complaints[0].status = ComplaintStatus.resolved
    complaints[1].category = ComplaintCategory.wifi
    session.add_all(complaints[:2])
    session.commit()

    headers = auth_headers(admin)
    wifi = client.get("/admin/complaints/?category=Wi-Fi", headers=headers).json()
    assert [row["id"] for row in wifi["rows"]] == [str(complaints[0].id), str(complaints[1].id)]

    both = client.get("/admin/complaints/", params={"category": "Wi-Fi", "status": "Pending"}, headers=headers).json()
    assert [row["id"] for row in both["rows"]] == [str(complaints[1].id)]

    none = client.get("/admin/complaints/", params={"status": "In Progress"}, headers=headers).json()
    assert none["rows"] == []
    assert none["empty_message"] == "No complaints found"


def test_admin_filter_rejects_unknown_value(client, admin):
    resp = client.get("/admin/complaints/?status=Closed", headers=auth_headers(admin))
    assert resp.status_code == 400


def test_admin_pagination_links_keep_filters(client, session, admin, student):
    add_complaints(session, student, 7)
    body = client.get("/admin/complaints/?status=Pending&page=1", headers=auth_headers(admin)).json()

    assert body["total_pages"] == 2
    assert body["pagination"][0]["disabled"]
    assert body["pagination"][-1]["href"] == "/admin/complaints/?status=Pending&page=2&generation=1"


def test_status_update_keeps_creation_order(client, session, admin, student):
    complaints = add_complaints(session, student, 3)
    target = complaints[1]
    created_before = target.created_at

    resp = client.patch(
        f"/admin/complaints/{target.id}/status",
        json={"status": "In Progress", "admin_comment": "Plumber booked for Monday"},
        headers=auth_headers(admin),
    )
    assert resp.status_code == 200
    assert resp.json()["status"] == "In Progress"
    assert resp.json()["admin_comment"] == "Plumber booked for Monday"

    listing = client.get("/admin/complaints/", headers=auth_headers(admin)).json()
    assert [row["id"] for row in listing["rows"]] == [str(c.id) for c in complaints]
    assert listing["rows"][1]["status"] == "In Progress"

    session.refresh(target)
    assert target.created_at == created_before
    assert as_utc(target.updated_at) > as_utc(created_before)

    log = session.exec(select(AuditLog).where(AuditLog.action == AuditAction.UPDATED_COMPLAINT_STATUS.value)).one()
    assert log.user_id == admin.id

    # Student sees the response now that the complaint is in progress
    student_view = client.get(f"/complaints/{target.id}", headers=auth_headers(student)).json()
    assert student_view["admin_comment"] == "Plumber booked for Monday"


def test_status_update_validation(client, session, admin, student):
    complaint = add_complaints(session, student, 1)[0]
    headers = auth_headers(admin)

    bad_status = client.patch(f"/admin/complaints/{complaint.id}/status", json={"status": "Done"}, headers=headers)
    assert bad_status.status_code == 422

    missing = client.patch(
        "/admin/complaints/00000000-0000-0000-0000-000000000000/status",
        json={"status": "Resolved"},
        headers=headers,
    )
    assert missing.status_code == 404


def test_status_update_requires_admin(client, session, student):
    complaint = add_complaints(session, student, 1)[0]
    resp = client.patch(
        f"/admin/complaints/{complaint.id}/status",
        json={"status": "Resolved"},
        headers=auth_headers(student),
    )
    assert resp.status_code == 403


def test_dashboard_stats(client, session, admin, student):
    complaints = add_complaints(session, student, 3)
    complaints[0].status = ComplaintStatus.resolved
    complaints[1].category = ComplaintCategory.hostel
    session.add_all(complaints[:2])
    session.commit()

    stats = client.get("/admin/stats", headers=auth_headers(admin)).json()
    assert (stats["total"], stats["pending"], stats["in_progress"], stats["resolved"]) == (3, 2, 0, 1)

    assert stats["category_chart"]["labels"] == ["Hostel", "Mess", "Wi-Fi", "Washroom", "Electricity", "Water", "Other"]
    assert stats["category_chart"]["data"] == [1, 2, 0, 0, 0, 0, 0]
    assert stats["status_chart"]["labels"] == ["Pending", "In Progress", "Resolved"]
    assert stats["status_chart"]["data"] == [2, 0, 1]


def test_audit_logs_newest_first(client, session, admin, student):
    complaint = add_complaints(session, student, 1)[0]
    headers = auth_headers(admin)
    for status in ("In Progress", "Resolved"):
        client.patch(f"/admin/complaints/{complaint.id}/status", json={"status": status}, headers=headers)

    logs = client.get("/admin/audit-logs/", headers=headers).json()
    assert [entry["action"] for entry in logs] == ["updated_complaint_status"] * 2
    assert "to Resolved" in logs[0]["details"]
