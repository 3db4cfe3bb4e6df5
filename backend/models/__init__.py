from models.user import User, UserRole
from models.complaints import Complaint, ComplaintCategory, ComplaintStatus
from models.audit_log import AuditLog, AuditAction
from models.refresh_token import RefreshToken
