from __future__ import annotations

import logging

from fastapi import HTTPException
from sqlalchemy import select
from sqlalchemy.orm import Session

from dmp_booking.core.config import get_settings
from dmp_booking.core.security import check_password, hash_password
from dmp_booking.core.session import SessionUser
from dmp_booking.models.enums import Role, UserStatus
from dmp_booking.models.user import User

logger = logging.getLogger(__name__)

NOT_APPROVED_MESSAGE = "Your account is pending approval or has been rejected"


def normalize_email(email: str) -> str:
    return email.strip().lower()


def initial_status_for(role: Role) -> UserStatus:
    """Accounts that need a DMP manager's approval start out PENDING."""
    if role == Role.CATEGORY_MANAGER:
        return UserStatus.PENDING
    if role == Role.SUPPLIER and get_settings().supplier_requires_approval:
        return UserStatus.PENDING
    return UserStatus.APPROVED


def session_for(user: User) -> SessionUser:
    return SessionUser(id=user.id, role=Role(user.role), status=UserStatus(user.status), category=user.category, inn=user.inn)


def register_user(
    db: Session,
    *,
    email: str,
    name: str,
    password: str,
    role: Role,
    category: str | None = None,
    inn: str | None = None,
) -> User:
    email_norm = normalize_email(email)
    existing = db.execute(select(User.id).where(User.email == email_norm)).first()
    if existing:
        raise HTTPException(status_code=409, detail="Email already exists")

    inn = (inn or "").strip() or None
    if inn is not None:
        dup = db.execute(select(User.id).where(User.inn == inn)).first()
        if dup:
            raise HTTPException(status_code=409, detail="INN already registered")

    user = User(
        email=email_norm,
        name=name,
        hashed_password=hash_password(password),
        role=role,
        status=initial_status_for(role),
        category=category if role == Role.CATEGORY_MANAGER else None,
        inn=inn if role == Role.SUPPLIER else None,
    )
    db.add(user)
    db.commit()
    db.refresh(user)

    logger.info("Registered user %s with role %s and status %s", user.id, user.role.value, user.status.value)
    return user


def authenticate(db: Session, *, email: str, password: str) -> User:
    user = db.execute(select(User).where(User.email == normalize_email(email))).scalar_one_or_none()

    ok, new_hash = check_password(password, user.hashed_password) if user else (False, None)
    if not ok:
        logger.warning("Failed login attempt")
        raise HTTPException(status_code=401, detail="Invalid credentials")

    if new_hash:
        user.hashed_password = new_hash
        db.commit()
        logger.info("Rehashed password for user %s", user.id)

    if user.status != UserStatus.APPROVED:
        logger.warning("Login refused for user %s with status %s", user.id, user.status.value)
        raise HTTPException(status_code=403, detail=NOT_APPROVED_MESSAGE)

    logger.info("Authentication successful for user %s (%s)", user.id, user.role.value)
    return user
