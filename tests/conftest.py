import os
import tempfile
from datetime import datetime, timedelta, timezone

# Configure before the app modules read their settings
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("UPLOAD_DIR", tempfile.mkdtemp(prefix="complaint-uploads-"))

import pytest
from fastapi.testclient import TestClient
from sqlmodel import SQLModel, Session, create_engine
from sqlalchemy.pool import StaticPool

from main import app
from core.database import get_session
from models.complaints import Complaint, ComplaintCategory
from models.user import User, UserRole
from utils import storage
from utils.security import hash_password, create_access_token

PASSWORD = "secret123"


@pytest.fixture(name="session")
def session_fixture():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    with Session(engine) as session:
        yield session


@pytest.fixture(name="upload_dir")
def upload_dir_fixture(tmp_path, monkeypatch):
    monkeypatch.setattr(storage, "UPLOAD_DIR", str(tmp_path))
    return tmp_path


@pytest.fixture(name="client")
def client_fixture(session, upload_dir):
    app.dependency_overrides[get_session] = lambda: session
    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()


def make_user(session, email, role=UserRole.student, name="Test User"):
    user = User(name=name, email=email, password_hash=hash_password(PASSWORD), role=role)
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


def auth_headers(user):
    return {"Authorization": f"Bearer {create_access_token(user)}"}


@pytest.fixture
def student(session):
    return make_user(session, "student@example.com", name="Student One")


@pytest.fixture
def other_student(session):
    return make_user(session, "other@example.com", name="Student Two")


@pytest.fixture
def admin(session):
    return make_user(session, "admin@example.com", role=UserRole.admin, name="Admin")


def add_complaints(session, user, count, start=datetime(2024, 1, 1, 8, 0, tzinfo=timezone.utc)):
    """Insert `count` complaints one minute apart; returns them newest first."""
    complaints = []
    for n in range(count):
        created = start + timedelta(minutes=n)
        complaint = Complaint(
            user_id=user.id,
            user_email=user.email,
            category=ComplaintCategory.mess,
            description=f"Complaint number {n}",
            created_at=created,
            updated_at=created,
        )
        session.add(complaint)
        complaints.append(complaint)
    session.commit()
    for complaint in complaints:
        session.refresh(complaint)
    return list(reversed(complaints))
