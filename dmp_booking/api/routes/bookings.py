from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from dmp_booking.core.deps import get_current_session, get_db, get_optional_session, require_roles
from dmp_booking.core.session import SessionUser
from dmp_booking.models.enums import Role
from dmp_booking.schemas.booking import BookingCreate, BookingFilterOptions, BookingRequestOut
from dmp_booking.schemas.transition import StatusChange
from dmp_booking.services.audit_service import record_audit
from dmp_booking.services.booking_service import (
    booking_filter_options,
    create_booking_request,
    list_all_booking_requests,
    list_own_booking_requests,
    parse_status_filter,
)
from dmp_booking.services.transition_service import TRANSITIONS, perform_status_change, perform_transition

router = APIRouter()


@router.post("", response_model=BookingRequestOut)
def create_booking(payload: BookingCreate, request: Request, db: Session = Depends(get_db), session: SessionUser = Depends(get_current_session)):
    br = create_booking_request(db, session=session, zone_ids=payload.zone_ids, supplier_inn=payload.supplier_inn)
    record_audit(
        db,
        actor=session,
        action_type="BOOKING_REQUEST_CREATE",
        target_type="request",
        target_id=br.id,
        summary="Created booking request",
        changes={"booking_count": len(br.bookings)},
        request=request,
    )
    return br


@router.get("", response_model=list[BookingRequestOut])
def list_my_bookings(db: Session = Depends(get_db), session: SessionUser = Depends(get_current_session)):
    return list_own_booking_requests(db, user_id=session.id)


@router.get("/all", response_model=list[BookingRequestOut])
def list_bookings(
    status: str | None = None,
    db: Session = Depends(get_db),
    session: SessionUser = Depends(require_roles(Role.CATEGORY_MANAGER, Role.DMP_MANAGER)),
):
    return list_all_booking_requests(db, statuses=parse_status_filter(status))


@router.get("/filter-options", response_model=BookingFilterOptions)
def get_booking_filter_options(context: str = "manage", db: Session = Depends(get_db), session: SessionUser = Depends(get_current_session)):
    return booking_filter_options(db, context=context)


@router.patch("/{booking_id}")
def update_booking_status(booking_id: str, payload: StatusChange, request: Request, db: Session = Depends(get_db), session: SessionUser | None = Depends(get_optional_session)):
    return perform_status_change(db, "booking", booking_id, payload.status, session=session, request=request)


@router.post("/{booking_id}/km/approve")
def km_approve(booking_id: str, request: Request, db: Session = Depends(get_db), session: SessionUser | None = Depends(get_optional_session)):
    return perform_transition(db, TRANSITIONS["km-approve-booking"], booking_id, session=session, request=request)


@router.post("/{booking_id}/km/reject")
def km_reject(booking_id: str, request: Request, db: Session = Depends(get_db), session: SessionUser | None = Depends(get_optional_session)):
    return perform_transition(db, TRANSITIONS["km-reject-booking"], booking_id, session=session, request=request)


@router.post("/{booking_id}/dmp/approve")
def dmp_approve(booking_id: str, request: Request, db: Session = Depends(get_db), session: SessionUser | None = Depends(get_optional_session)):
    return perform_transition(db, TRANSITIONS["dmp-approve-booking"], booking_id, session=session, request=request)


@router.post("/{booking_id}/dmp/reject")
def dmp_reject(booking_id: str, request: Request, db: Session = Depends(get_db), session: SessionUser | None = Depends(get_optional_session)):
    return perform_transition(db, TRANSITIONS["dmp-reject-booking"], booking_id, session=session, request=request)
