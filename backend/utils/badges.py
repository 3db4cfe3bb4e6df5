from models.complaints import ComplaintStatus

STATUS_BADGE_COLORS = {
    ComplaintStatus.pending: "warning",
    ComplaintStatus.in_progress: "info",
    ComplaintStatus.resolved: "success",
}


def _status_text(status) -> str:
    return status.value if isinstance(status, ComplaintStatus) else str(status)


def status_badge_class(status) -> str:
    # "In Progress" -> "status-inprogress"
    return "status-" + _status_text(status).lower().replace(" ", "", 1)


def status_badge_color(status) -> str:
    try:
        return STATUS_BADGE_COLORS[ComplaintStatus(_status_text(status))]
    except ValueError:
        return "secondary"
