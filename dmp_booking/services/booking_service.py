from __future__ import annotations

import logging

from fastapi import HTTPException
from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from dmp_booking.core.session import SessionUser
from dmp_booking.models.booking import Booking, BookingRequest
from dmp_booking.models.enums import BookingStatus, RequestStatus, Role, ZoneStatus
from dmp_booking.models.user import User
from dmp_booking.models.zone import Zone
from dmp_booking.services.zone_service import distinct_values

logger = logging.getLogger(__name__)


def _resolve_supplier_id(db: Session, session: SessionUser, supplier_inn: str | None) -> str:
    # Category managers book on behalf of a supplier, everyone else for themselves
    if session.role != Role.CATEGORY_MANAGER:
        return session.id

    if not supplier_inn:
        raise HTTPException(status_code=400, detail="A supplier must be selected for the booking")

    supplier = db.execute(select(User).where(User.inn == supplier_inn, User.role == Role.SUPPLIER)).scalar_one_or_none()
    if not supplier:
        raise HTTPException(status_code=404, detail=f"Supplier with INN {supplier_inn} not found")
    return supplier.id


def create_booking_request(db: Session, *, session: SessionUser, zone_ids: list[str], supplier_inn: str | None = None) -> BookingRequest:
    """Create a booking request with one PENDING_KM booking per zone.

    Unknown zone identifiers are skipped. Any zone that is not AVAILABLE
    aborts the whole request before anything is written.
    """
    supplier_id = _resolve_supplier_id(db, session, supplier_inn)

    zones: list[Zone] = []
    for unique_identifier in dict.fromkeys(zone_ids):
        zone = db.execute(select(Zone).where(Zone.unique_identifier == unique_identifier)).scalar_one_or_none()
        if zone is None:
            logger.warning("Zone with unique identifier %s not found, skipping", unique_identifier)
            continue
        if zone.status != ZoneStatus.AVAILABLE:
            raise HTTPException(
                status_code=409,
                detail=f"Zone {zone.unique_identifier} is not available for booking (current status: {zone.status.value})",
            )
        zones.append(zone)

    if not zones:
        raise HTTPException(status_code=400, detail="No zones specified for booking")

    booking_request = BookingRequest(
        user_id=session.id,
        supplier_id=supplier_id if session.role == Role.CATEGORY_MANAGER else None,
        status=RequestStatus.NEW,
        category=session.category if session.role == Role.CATEGORY_MANAGER else None,
    )
    db.add(booking_request)

    for zone in zones:
        booking_request.bookings.append(Booking(zone_id=zone.id, status=BookingStatus.PENDING_KM))
        zone.status = ZoneStatus.BOOKED
        zone.supplier = supplier_id

    db.commit()
    db.refresh(booking_request)

    logger.info("Created booking request %s with %d bookings", booking_request.id, len(zones))
    return booking_request


def list_own_booking_requests(db: Session, *, user_id: str) -> list[BookingRequest]:
    q = (
        select(BookingRequest)
        .where(BookingRequest.user_id == user_id)
        .options(selectinload(BookingRequest.bookings).selectinload(Booking.zone))
        .order_by(BookingRequest.created_at.desc())
    )
    return list(db.execute(q).scalars().all())


def parse_status_filter(raw: str | None) -> list[BookingStatus]:
    if not raw:
        return []
    statuses: list[BookingStatus] = []
    for part in raw.split(","):
        part = part.strip()
        if not part:
            continue
        try:
            statuses.append(BookingStatus(part))
        except ValueError:
            raise HTTPException(status_code=400, detail=f"Unknown booking status: {part}") from None
    return statuses


def list_all_booking_requests(db: Session, *, statuses: list[BookingStatus] | None = None) -> list[BookingRequest]:
    q = select(BookingRequest).options(selectinload(BookingRequest.bookings).selectinload(Booking.zone))
    if statuses:
        q = q.where(BookingRequest.bookings.any(Booking.status.in_(statuses)))
    q = q.order_by(BookingRequest.created_at.desc())
    return list(db.execute(q).scalars().all())


def booking_filter_options(db: Session, *, context: str = "manage") -> dict[str, list]:
    """Filter values for the booking screens.

    ``create`` describes AVAILABLE zones and lists every supplier.
    Anything else describes zones that already have bookings and the
    suppliers holding them.
    """
    if context == "create":
        zone_filter = Zone.status == ZoneStatus.AVAILABLE
    else:
        zone_filter = Zone.id.in_(select(Booking.zone_id))

    suppliers = select(User.inn, User.name).where(User.role == Role.SUPPLIER, User.inn.is_not(None), User.inn != "")
    if context != "create":
        suppliers = suppliers.where(User.id.in_(select(Zone.supplier).where(zone_filter)))

    return {
        "cities": distinct_values(db, Zone.city, zone_filter),
        "markets": distinct_values(db, Zone.market, zone_filter),
        "macrozones": distinct_values(db, Zone.main_macrozone, zone_filter),
        "equipments": distinct_values(db, Zone.equipment, zone_filter),
        "suppliers": [{"inn": inn, "name": name} for inn, name in db.execute(suppliers.order_by(User.name)).all()],
    }
