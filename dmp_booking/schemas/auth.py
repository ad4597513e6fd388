from __future__ import annotations

from pydantic import BaseModel, EmailStr, Field, field_validator

from dmp_booking.models.enums import Role, UserStatus


class RegisterRequest(BaseModel):
    email: EmailStr
    name: str = Field(min_length=1, max_length=255)
    password: str = Field(min_length=8, max_length=128)
    role: Role
    category: str | None = Field(default=None, max_length=255)
    inn: str | None = Field(default=None, max_length=32)

    @field_validator("role")
    @classmethod
    def _no_self_registered_dmp(cls, v: Role) -> Role:
        # DMP managers are created with scripts/create_dmp_manager.py
        if v == Role.DMP_MANAGER:
            raise ValueError("DMP manager accounts cannot be self-registered")
        return v


class RegisteredUser(BaseModel):
    id: str
    name: str
    email: EmailStr
    role: Role
    status: UserStatus

    class Config:
        from_attributes = True


class RegisterResponse(BaseModel):
    user: RegisteredUser


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"


class MeResponse(BaseModel):
    id: str
    role: Role
    status: UserStatus
    category: str | None
    inn: str | None
