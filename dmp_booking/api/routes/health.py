from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from dmp_booking.core.deps import get_db

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/db-status")
def db_status(db: Session = Depends(get_db)):
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.error("Database connection check failed: %s", e)
        return JSONResponse(status_code=500, content={"status": "error", "message": "Database connection failed", "error": str(e)})
    return {"status": "ok", "message": "Database connection successful"}
