from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy import select
from sqlalchemy.orm import Session

from dmp_booking.core.deps import get_current_session, get_db
from dmp_booking.core.session import SessionUser
from dmp_booking.models.enums import Role
from dmp_booking.models.user import User
from dmp_booking.schemas.user import ProfileOut, ProfileUpdate
from dmp_booking.services.audit_service import record_audit
from dmp_booking.services.auth_service import normalize_email

router = APIRouter()


@router.put("/update", response_model=ProfileOut)
def update_profile(payload: ProfileUpdate, request: Request, db: Session = Depends(get_db), session: SessionUser = Depends(get_current_session)):
    u = db.get(User, session.id)
    if not u:
        raise HTTPException(status_code=404, detail="Not found")

    updated: list[str] = []
    if payload.email is not None:
        email = normalize_email(str(payload.email))
        dup = db.execute(select(User.id).where(User.email == email, User.id != u.id)).first()
        if dup:
            raise HTTPException(status_code=409, detail="Email already exists")
        u.email = email
        updated.append("email")
    if payload.name is not None:
        u.name = payload.name
        updated.append("name")
    # Role-specific fields; status is never writable here
    if payload.category is not None and u.role == Role.CATEGORY_MANAGER:
        u.category = payload.category
        updated.append("category")
    if payload.inn is not None and u.role == Role.SUPPLIER:
        u.inn = payload.inn.strip() or None
        updated.append("inn")

    db.commit()
    db.refresh(u)

    record_audit(db, actor=session, action_type="USER_PROFILE_UPDATE", target_type="user", target_id=u.id, summary="Updated profile", changes={"fields": sorted(updated)}, request=request)
    return u
