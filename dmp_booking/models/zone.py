from __future__ import annotations

import uuid

from sqlalchemy import Enum, Float, String
from sqlalchemy.orm import Mapped, mapped_column

from dmp_booking.db.base import Base
from dmp_booking.models._mixins import TimestampMixin
from dmp_booking.models.enums import ZoneStatus


class Zone(Base, TimestampMixin):
    __tablename__ = "zones"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    unique_identifier: Mapped[str] = mapped_column(String(64), nullable=False, unique=True, index=True)

    region: Mapped[str | None] = mapped_column(String(255), nullable=True)
    city: Mapped[str] = mapped_column(String(255), nullable=False, default="", index=True)
    number: Mapped[str] = mapped_column(String(64), nullable=False, default="")
    market: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    new_format: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    equipment: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    dimensions: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    main_macrozone: Mapped[str] = mapped_column(String(255), nullable=False, default="", index=True)
    adjacent_macrozone: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    price: Mapped[float | None] = mapped_column(Float, nullable=True)
    category: Mapped[str | None] = mapped_column(String(255), nullable=True)

    status: Mapped[ZoneStatus] = mapped_column(Enum(ZoneStatus, native_enum=False, length=32), nullable=False, default=ZoneStatus.AVAILABLE, index=True)
    supplier: Mapped[str | None] = mapped_column(String(255), nullable=True)  # supplier user id
    brand: Mapped[str | None] = mapped_column(String(255), nullable=True)
