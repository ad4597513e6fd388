from __future__ import annotations

import argparse
import logging

from sqlalchemy import select

from dmp_booking.core.config import get_settings
from dmp_booking.core.logging import configure_logging
from dmp_booking.core.security import hash_password
from dmp_booking.db.session import SessionLocal
from dmp_booking.models.enums import Role, UserStatus
from dmp_booking.models.user import User
from dmp_booking.services.auth_service import normalize_email

logger = logging.getLogger(__name__)


def main() -> int:
    parser = argparse.ArgumentParser(description="Create an approved DMP manager account, or reset its password")
    parser.add_argument("--email", required=True)
    parser.add_argument("--name", required=True)
    parser.add_argument("--password", required=True)

    args = parser.parse_args()
    configure_logging(get_settings())

    email = normalize_email(args.email)

    db = SessionLocal()
    try:
        u = db.execute(select(User).where(User.email == email)).scalar_one_or_none()
        if u is None:
            u = User(email=email, name=args.name, hashed_password=hash_password(args.password), role=Role.DMP_MANAGER, status=UserStatus.APPROVED)
            db.add(u)
            db.commit()
            logger.info("Created DMP manager: %s", u.email)
            return 0

        u.name = args.name
        u.hashed_password = hash_password(args.password)
        u.role = Role.DMP_MANAGER
        db.commit()
        logger.info("Updated DMP manager: %s", u.email)
        # Existing accounts keep their status; only a gated transition changes it
        if u.status != UserStatus.APPROVED:
            logger.warning("Account %s is %s and cannot log in until approved", u.email, u.status.value)
        return 0
    finally:
        db.close()


if __name__ == "__main__":
    raise SystemExit(main())
