from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from dmp_booking.core.deps import get_db, get_optional_session
from dmp_booking.core.session import SessionUser
from dmp_booking.schemas.transition import StatusChange
from dmp_booking.services.transition_service import perform_status_change

router = APIRouter()


@router.patch("/{request_id}")
def update_request_status(request_id: str, payload: StatusChange, request: Request, db: Session = Depends(get_db), session: SessionUser | None = Depends(get_optional_session)):
    return perform_status_change(db, "request", request_id, payload.status, session=session, request=request)
