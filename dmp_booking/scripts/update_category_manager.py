from __future__ import annotations

import logging
from collections import Counter

from sqlalchemy import select
from sqlalchemy.orm import Session

from dmp_booking.core.config import get_settings
from dmp_booking.core.logging import configure_logging
from dmp_booking.db.session import SessionLocal
from dmp_booking.models.enums import Role
from dmp_booking.models.user import User
from dmp_booking.models.zone import Zone

logger = logging.getLogger(__name__)


def most_common_category(db: Session) -> str | None:
    categories = db.execute(select(Zone.category).where(Zone.category.is_not(None), Zone.category != "")).scalars().all()
    counts = Counter(categories)
    for category, n in counts.most_common(5):
        logger.info("- %s: %d zones", category, n)
    if not counts:
        return None
    return counts.most_common(1)[0][0]


def assign_category_to_managers(db: Session) -> int:
    """Give every category manager the zone category with the most zones."""
    category = most_common_category(db)
    if category is None:
        logger.warning("No zone categories found, nothing to update")
        return 0

    managers = db.execute(select(User).where(User.role == Role.CATEGORY_MANAGER)).scalars().all()
    for manager in managers:
        logger.info("%s: %s -> %s", manager.name or manager.email, manager.category or "-", category)
        manager.category = category
    db.commit()
    return len(managers)


def main() -> int:
    configure_logging(get_settings())
    db = SessionLocal()
    try:
        updated = assign_category_to_managers(db)
        logger.info("Updated %d category managers", updated)
        return 0
    finally:
        db.close()


if __name__ == "__main__":
    raise SystemExit(main())
