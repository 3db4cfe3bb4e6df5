import logging
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select
from core.config import ALLOW_ADMIN_SIGNUP
from core.database import get_session
from models.user import User, UserRole
from models.audit_log import AuditAction
from schemas.auth import UserRegister, UserLogin, UserRead, TokenPair, RefreshRequest, AccessToken
from utils.audit import log_action
from utils.security import (
    hash_password,
    verify_password,
    create_access_token,
    create_refresh_token,
    get_live_refresh_token,
    get_current_user,
)

router = APIRouter(tags=["Auth"])
logger = logging.getLogger(__name__)


@router.post("/register", response_model=UserRead, status_code=status.HTTP_201_CREATED)
def register(payload: UserRegister, session: Session = Depends(get_session)):
    if payload.role == UserRole.admin and not ALLOW_ADMIN_SIGNUP:
        raise HTTPException(status_code=403, detail="Admin accounts cannot be self-registered")

    email = payload.email.lower()
    existing_user = session.exec(select(User).where(User.email == email)).first()
    if existing_user:
        raise HTTPException(status_code=400, detail="Email already registered")

    user = User(
        name=payload.name.strip(),
        email=email,
        password_hash=hash_password(payload.password),
        role=payload.role,
    )
    try:
        session.add(user)
        session.commit()
        session.refresh(user)
    except SQLAlchemyError:
        session.rollback()
        logger.exception("Error creating account for %s", email)
        raise HTTPException(status_code=500, detail="Failed to create account")

    log_action(session, performed_by=user.id, action=AuditAction.REGISTERED_USER, details=f"Account {email} created")
    return user


@router.post("/login", response_model=TokenPair)
def login(payload: UserLogin, session: Session = Depends(get_session)):
    user = session.exec(select(User).where(User.email == payload.email.lower())).first()
    if not user or not verify_password(payload.password, user.password_hash):
        logger.info("Failed login for %s", payload.email)
        raise HTTPException(status_code=401, detail="Invalid email or password")

    refresh = create_refresh_token(session, user)
    return TokenPair(
        access_token=create_access_token(user),
        refresh_token=refresh.token,
        user=UserRead.model_validate(user),
    )


@router.post("/refresh", response_model=AccessToken)
def refresh_access_token(payload: RefreshRequest, session: Session = Depends(get_session)):
    refresh = get_live_refresh_token(session, payload.refresh_token)
    user = session.get(User, refresh.user_id)
    if not user:
        raise HTTPException(status_code=401, detail="Invalid or expired refresh token")
    return AccessToken(access_token=create_access_token(user))


@router.post("/logout")
def logout(payload: RefreshRequest, session: Session = Depends(get_session)):
    refresh = get_live_refresh_token(session, payload.refresh_token)
    refresh.revoked = True
    session.add(refresh)
    session.commit()
    return {"detail": "Logged out successfully"}


@router.get("/me", response_model=UserRead)
def me(current_user: User = Depends(get_current_user)):
    return current_user
