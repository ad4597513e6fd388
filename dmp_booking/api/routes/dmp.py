from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy import select
from sqlalchemy.orm import Session

from dmp_booking.core.deps import get_db, get_optional_session, require_roles
from dmp_booking.core.session import SessionUser
from dmp_booking.models.enums import Role, UserStatus
from dmp_booking.models.user import User
from dmp_booking.schemas.audit import AuditEntryDetailOut
from dmp_booking.schemas.user import PendingUserOut
from dmp_booking.services.audit_service import MAX_AUDIT_ROWS, query_audit_log
from dmp_booking.services.transition_service import TRANSITIONS, perform_transition

router = APIRouter()


@router.get("/pending-kms", response_model=list[PendingUserOut])
def list_pending_users(db: Session = Depends(get_db), session: SessionUser = Depends(require_roles(Role.DMP_MANAGER))):
    # Every PENDING account, whatever its role
    q = select(User).where(User.status == UserStatus.PENDING).order_by(User.created_at.asc())
    return db.execute(q).scalars().all()


@router.post("/approve-km/{user_id}")
def approve_km(user_id: str, request: Request, db: Session = Depends(get_db), session: SessionUser | None = Depends(get_optional_session)):
    return perform_transition(db, TRANSITIONS["approve-km"], user_id, session=session, request=request)


@router.post("/reject-km/{user_id}")
def reject_km(user_id: str, request: Request, db: Session = Depends(get_db), session: SessionUser | None = Depends(get_optional_session)):
    return perform_transition(db, TRANSITIONS["reject-km"], user_id, session=session, request=request)


@router.post("/approve-supplier/{user_id}")
def approve_supplier(user_id: str, request: Request, db: Session = Depends(get_db), session: SessionUser | None = Depends(get_optional_session)):
    return perform_transition(db, TRANSITIONS["approve-supplier"], user_id, session=session, request=request)


@router.post("/reject-supplier/{user_id}")
def reject_supplier(user_id: str, request: Request, db: Session = Depends(get_db), session: SessionUser | None = Depends(get_optional_session)):
    return perform_transition(db, TRANSITIONS["reject-supplier"], user_id, session=session, request=request)


@router.get("/audit-logs", response_model=list[AuditEntryDetailOut])
def list_audit_logs(
    from_: datetime | None = Query(default=None, alias="from"),
    to: datetime | None = None,
    actor_user_id: str | None = None,
    action_type: str | None = None,
    target_type: str | None = None,
    target_id: str | None = None,
    limit: int = Query(default=MAX_AUDIT_ROWS, ge=1, le=MAX_AUDIT_ROWS),
    db: Session = Depends(get_db),
    session: SessionUser = Depends(require_roles(Role.DMP_MANAGER)),
):
    return query_audit_log(
        db,
        since=from_,
        until=to,
        actor_user_id=actor_user_id,
        action_type=action_type,
        target_type=target_type,
        target_id=target_id,
        limit=limit,
    )
