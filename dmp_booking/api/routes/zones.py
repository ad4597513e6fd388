from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Request, Response
from sqlalchemy import select
from sqlalchemy.orm import Session

from dmp_booking.core.deps import get_current_session, get_db, get_optional_session, require_roles
from dmp_booking.core.result import Err
from dmp_booking.core.session import SessionUser
from dmp_booking.models.enums import Role, ZoneStatus
from dmp_booking.models.zone import Zone
from dmp_booking.schemas.transition import StatusChange
from dmp_booking.schemas.zone import CountOut, ZoneBulkStatus, ZoneFilterOptions, ZoneIds, ZoneOut, ZoneUpdate
from dmp_booking.services.audit_service import record_audit
from dmp_booking.services.transition_service import (
    BULK_RECORD_ID,
    TRANSITIONS,
    authorize,
    perform_bulk_status_change,
    perform_status_change,
    perform_transition,
    to_response,
)
from dmp_booking.services.zone_service import delete_zone, delete_zones, get_zone_or_404, zone_filter_options

router = APIRouter()


@router.get("", response_model=list[ZoneOut])
def list_available_zones(
    category: str | None = None,
    macrozone: str | None = None,
    city: str | None = None,
    db: Session = Depends(get_db),
    session: SessionUser = Depends(get_current_session),
):
    q = select(Zone).where(Zone.status == ZoneStatus.AVAILABLE)
    if category:
        q = q.where(Zone.main_macrozone == category)
    if macrozone:
        q = q.where(Zone.adjacent_macrozone.contains(macrozone))
    if city:
        q = q.where(Zone.city == city)

    q = q.order_by(Zone.city, Zone.unique_identifier)
    return db.execute(q).scalars().all()


@router.get("/filters", response_model=ZoneFilterOptions)
def get_zone_filters(db: Session = Depends(get_db), session: SessionUser = Depends(get_current_session)):
    return zone_filter_options(db)


@router.post("/bulk-update")
def bulk_update_zone_status(payload: ZoneBulkStatus, request: Request, db: Session = Depends(get_db), session: SessionUser | None = Depends(get_optional_session)):
    return perform_bulk_status_change(db, "zone", payload.zone_ids, payload.status, session=session, request=request)


@router.post("/bulk-delete", response_model=CountOut)
def bulk_delete_zones(payload: ZoneIds, request: Request, db: Session = Depends(get_db), session: SessionUser = Depends(require_roles(Role.DMP_MANAGER))):
    count = delete_zones(db, payload.zone_ids)
    record_audit(
        db,
        actor=session,
        action_type="ZONE_BULK_DELETE",
        target_type="zone",
        target_id=BULK_RECORD_ID,
        summary=f"Deleted {count} zones",
        changes={"record_ids": payload.zone_ids, "count": count},
        request=request,
    )
    return CountOut(count=count)


@router.get("/{zone_id}", response_model=ZoneOut)
def get_zone(zone_id: str, db: Session = Depends(get_db), session: SessionUser = Depends(get_current_session)):
    return get_zone_or_404(db, zone_id)


@router.patch("/{zone_id}")
def update_zone(zone_id: str, payload: ZoneUpdate, request: Request, db: Session = Depends(get_db), session: SessionUser | None = Depends(get_optional_session)):
    fields = payload.model_fields_set
    if payload.status is not None:
        return perform_status_change(db, "zone", zone_id, payload.status, session=session, request=request)

    rule = TRANSITIONS["zone-assign"]
    assigned = {name: getattr(payload, name) or None for name in rule.assignable_fields if name in fields}
    if not assigned:
        gate = authorize(session, rule)
        if isinstance(gate, Err):
            return to_response(gate)
        raise HTTPException(status_code=400, detail="No valid fields (status, supplier, or brand) provided for update")
    return perform_transition(db, rule, zone_id, session=session, request=request, assigned=assigned)


@router.delete("/{zone_id}", status_code=204)
def remove_zone(zone_id: str, request: Request, db: Session = Depends(get_db), session: SessionUser = Depends(require_roles(Role.DMP_MANAGER))):
    delete_zone(db, zone_id)
    record_audit(db, actor=session, action_type="ZONE_DELETE", target_type="zone", target_id=zone_id, summary="Deleted zone", request=request)
    return Response(status_code=204)


@router.patch("/{zone_id}/status")
def change_zone_status(zone_id: str, payload: StatusChange, request: Request, db: Session = Depends(get_db), session: SessionUser | None = Depends(get_optional_session)):
    return perform_status_change(db, "zone", zone_id, payload.status, session=session, request=request)
