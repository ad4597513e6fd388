from __future__ import annotations

from pydantic import BaseModel, Field

from dmp_booking.models.enums import ZoneStatus


class ZoneOut(BaseModel):
    id: str
    unique_identifier: str
    region: str | None
    city: str
    number: str
    market: str
    new_format: str
    equipment: str
    dimensions: str
    main_macrozone: str
    adjacent_macrozone: str
    price: float | None
    category: str | None
    status: ZoneStatus
    supplier: str | None
    brand: str | None

    class Config:
        from_attributes = True


class ZoneUpdate(BaseModel):
    # Unset and explicit null differ: only fields present in the body apply
    status: str | None = None
    supplier: str | None = None
    brand: str | None = None


class ZoneIds(BaseModel):
    zone_ids: list[str] = Field(min_length=1)


class ZoneBulkStatus(ZoneIds):
    status: str


class ZoneFilterOptions(BaseModel):
    cities: list[str]
    markets: list[str]
    macrozones: list[str]
    equipments: list[str]
    suppliers: list[str]
    statuses: list[ZoneStatus]


class CountOut(BaseModel):
    count: int
