from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from dmp_booking.api.router import api_router
from dmp_booking.core.config import get_settings
from dmp_booking.core.errors import register_exception_handlers
from dmp_booking.core.logging import configure_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    # Schema migrations are out of scope; dev databases are created on the fly
    if settings.environment == "dev":
        from dmp_booking.scripts.init_db import create_tables

        create_tables()
    logger.info("%s started (%s)", settings.app_name, settings.environment)
    yield
    logger.info("%s stopped", settings.app_name)


def create_app() -> FastAPI:
    """Application factory: logging, error handlers and the API router."""
    settings = get_settings()
    configure_logging(settings)

    app = FastAPI(title=settings.app_name, lifespan=lifespan)
    register_exception_handlers(app)
    app.include_router(api_router, prefix=settings.api_prefix)
    return app


app = create_app()
