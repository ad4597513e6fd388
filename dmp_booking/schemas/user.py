from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, EmailStr, Field

from dmp_booking.models.enums import Role


class ProfileUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    email: EmailStr | None = None
    category: str | None = Field(default=None, max_length=255)
    inn: str | None = Field(default=None, max_length=32)


class ProfileOut(BaseModel):
    id: str
    name: str
    email: EmailStr
    role: Role
    category: str | None
    inn: str | None

    class Config:
        from_attributes = True


class PendingUserOut(BaseModel):
    id: str
    name: str
    email: EmailStr
    category: str | None
    role: Role
    created_at: datetime

    class Config:
        from_attributes = True


class SupplierOut(BaseModel):
    inn: str
    name: str
