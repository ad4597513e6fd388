from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from dmp_booking.models.enums import BookingStatus, RequestStatus
from dmp_booking.schemas.user import SupplierOut
from dmp_booking.schemas.zone import ZoneOut


class BookingCreate(BaseModel):
    zone_ids: list[str] = Field(min_length=1)  # zone unique identifiers
    supplier_inn: str | None = None


class BookingOut(BaseModel):
    id: str
    booking_request_id: str
    zone_id: str
    status: BookingStatus
    created_at: datetime
    updated_at: datetime
    zone: ZoneOut | None = None

    class Config:
        from_attributes = True


class BookingRequestOut(BaseModel):
    id: str
    user_id: str
    supplier_id: str | None
    status: RequestStatus
    category: str | None
    created_at: datetime
    updated_at: datetime
    bookings: list[BookingOut] = Field(default_factory=list)

    class Config:
        from_attributes = True


class BookingFilterOptions(BaseModel):
    cities: list[str]
    markets: list[str]
    macrozones: list[str]
    equipments: list[str]
    suppliers: list[SupplierOut]
