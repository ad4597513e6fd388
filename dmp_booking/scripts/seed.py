from __future__ import annotations

import logging

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from dmp_booking.core.config import get_settings
from dmp_booking.core.logging import configure_logging
from dmp_booking.core.security import hash_password
from dmp_booking.db.session import SessionLocal
from dmp_booking.models.enums import Role, UserStatus
from dmp_booking.models.user import User
from dmp_booking.scripts.init_db import create_tables

logger = logging.getLogger(__name__)

DEFAULT_PASSWORD = "password123"

SEED_USERS = [
    {"name": "DMP Manager", "email": "dmp@example.com", "role": Role.DMP_MANAGER},
    {"name": "Category Manager", "email": "category@example.com", "role": Role.CATEGORY_MANAGER, "category": "Test category"},
    {"name": "Supplier", "email": "supplier@example.com", "role": Role.SUPPLIER, "inn": "1234567890"},
]


def seed_users(db: Session, password: str = DEFAULT_PASSWORD) -> int:
    """Create one approved user per role when the user table is empty."""
    count = db.execute(select(func.count()).select_from(User)).scalar_one()
    if count:
        logger.info("Users already exist (%d), skipping seed", count)
        return 0

    for spec in SEED_USERS:
        db.add(
            User(
                name=spec["name"],
                email=spec["email"],
                hashed_password=hash_password(password),
                role=spec["role"],
                status=UserStatus.APPROVED,
                category=spec.get("category"),
                inn=spec.get("inn"),
            )
        )
    db.commit()
    logger.info("Created %d seed users", len(SEED_USERS))
    return len(SEED_USERS)


def main() -> int:
    configure_logging(get_settings())
    create_tables()
    db = SessionLocal()
    try:
        seed_users(db)
        return 0
    finally:
        db.close()


if __name__ == "__main__":
    raise SystemExit(main())
