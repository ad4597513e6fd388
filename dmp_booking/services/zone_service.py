from __future__ import annotations

import logging

from fastapi import HTTPException
from sqlalchemy import delete, select
from sqlalchemy.orm import InstrumentedAttribute, Session

from dmp_booking.models.booking import Booking
from dmp_booking.models.enums import ZoneStatus
from dmp_booking.models.zone import Zone

logger = logging.getLogger(__name__)


def get_zone_or_404(db: Session, zone_id: str) -> Zone:
    zone = db.get(Zone, zone_id)
    if zone is None:
        raise HTTPException(status_code=404, detail=f"Zone with ID {zone_id} not found")
    return zone


def _has_bookings(db: Session, zone_ids: list[str]) -> bool:
    return db.execute(select(Booking.id).where(Booking.zone_id.in_(zone_ids)).limit(1)).first() is not None


def delete_zone(db: Session, zone_id: str) -> None:
    zone = get_zone_or_404(db, zone_id)
    if _has_bookings(db, [zone.id]):
        raise HTTPException(
            status_code=409,
            detail=f"Cannot delete zone {zone_id} because it is associated with existing bookings. Please delete the bookings first.",
        )
    db.delete(zone)
    db.commit()
    logger.info("Deleted zone %s", zone_id)


def delete_zones(db: Session, zone_ids: list[str]) -> int:
    """Delete zones by id; nothing is deleted if any of them has bookings."""
    zone_ids = list(dict.fromkeys(zone_ids))
    if _has_bookings(db, zone_ids):
        raise HTTPException(status_code=409, detail="Cannot delete some zones because they are associated with existing bookings.")

    result = db.execute(delete(Zone).where(Zone.id.in_(zone_ids)))
    db.commit()
    logger.info("Bulk deleted %d zones", result.rowcount)
    return result.rowcount


def distinct_values(db: Session, column: InstrumentedAttribute, *where) -> list[str]:
    """Sorted distinct non-empty values of a zone column."""
    q = select(column).where(column.is_not(None), column != "", *where).distinct().order_by(column)
    return [value for value in db.execute(q).scalars().all() if str(value).strip()]


def zone_filter_options(db: Session) -> dict[str, list]:
    return {
        "cities": distinct_values(db, Zone.city),
        "markets": distinct_values(db, Zone.market),
        "macrozones": distinct_values(db, Zone.main_macrozone),
        "equipments": distinct_values(db, Zone.equipment),
        "suppliers": distinct_values(db, Zone.supplier),
        "statuses": list(ZoneStatus),
    }
