from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from dmp_booking.core.deps import get_current_session, get_db
from dmp_booking.core.session import SessionUser, issue_token
from dmp_booking.schemas.auth import LoginRequest, MeResponse, RegisteredUser, RegisterRequest, RegisterResponse, TokenResponse
from dmp_booking.services.audit_service import record_audit
from dmp_booking.services.auth_service import authenticate, register_user, session_for

router = APIRouter()


@router.post("/register", response_model=RegisterResponse)
def register(payload: RegisterRequest, request: Request, db: Session = Depends(get_db)):
    user = register_user(
        db,
        email=str(payload.email),
        name=payload.name,
        password=payload.password,
        role=payload.role,
        category=payload.category,
        inn=payload.inn,
    )
    record_audit(db, actor=session_for(user), action_type="USER_REGISTER", target_type="user", target_id=user.id, summary="Registered user", changes={"role": user.role.value, "status": user.status.value}, request=request)
    return RegisterResponse(user=RegisteredUser.model_validate(user))


@router.post("/login", response_model=TokenResponse)
def login(payload: LoginRequest, db: Session = Depends(get_db)):
    user = authenticate(db, email=str(payload.email), password=payload.password)
    return TokenResponse(access_token=issue_token(session_for(user)))


@router.get("/me", response_model=MeResponse)
def me(session: SessionUser = Depends(get_current_session)):
    return MeResponse(id=session.id, role=session.role, status=session.status, category=session.category, inn=session.inn)
