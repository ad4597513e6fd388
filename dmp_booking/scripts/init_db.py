from __future__ import annotations

import logging

from dmp_booking.core.config import get_settings
from dmp_booking.core.logging import configure_logging
from dmp_booking.db.base import Base
from dmp_booking.db.session import engine

# Import models to register with SQLAlchemy
import dmp_booking.models  # noqa: F401

logger = logging.getLogger(__name__)


def create_tables() -> None:
    Base.metadata.create_all(bind=engine)


def main() -> int:
    configure_logging(get_settings())
    create_tables()
    logger.info("DB initialized")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
