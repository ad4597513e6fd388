from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.orm import Session

from dmp_booking.core.deps import get_db
from dmp_booking.models.enums import Role
from dmp_booking.models.user import User
from dmp_booking.schemas.user import SupplierOut

router = APIRouter()


@router.get("", response_model=list[SupplierOut])
def list_suppliers(db: Session = Depends(get_db)):
    q = (
        select(User.inn, User.name)
        .where(User.role == Role.SUPPLIER)
        .where(User.inn.is_not(None), User.inn != "", User.name != "")
        .order_by(User.name)
    )
    return [SupplierOut(inn=inn, name=name) for inn, name in db.execute(q).all()]
