from __future__ import annotations

import uuid

from sqlalchemy import Enum, String
from sqlalchemy.orm import Mapped, mapped_column

from dmp_booking.db.base import Base
from dmp_booking.models._mixins import TimestampMixin
from dmp_booking.models.enums import Role, UserStatus


class User(Base, TimestampMixin):
    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    hashed_password: Mapped[str] = mapped_column(String(255), nullable=False)

    role: Mapped[Role] = mapped_column(Enum(Role, native_enum=False, length=32), nullable=False, index=True)
    # Changed only through the gated transition executor
    status: Mapped[UserStatus] = mapped_column(Enum(UserStatus, native_enum=False, length=32), nullable=False, default=UserStatus.PENDING, index=True)

    category: Mapped[str | None] = mapped_column(String(255), nullable=True)
    inn: Mapped[str | None] = mapped_column(String(32), nullable=True, unique=True)
