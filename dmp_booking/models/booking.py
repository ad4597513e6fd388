from __future__ import annotations

import uuid

from sqlalchemy import Enum, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from dmp_booking.db.base import Base
from dmp_booking.models._mixins import TimestampMixin
from dmp_booking.models.enums import BookingStatus, RequestStatus
from dmp_booking.models.user import User
from dmp_booking.models.zone import Zone


class BookingRequest(Base, TimestampMixin):
    __tablename__ = "booking_requests"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id: Mapped[str] = mapped_column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    supplier_id: Mapped[str | None] = mapped_column(String(36), ForeignKey("users.id"), nullable=True, index=True)

    status: Mapped[RequestStatus] = mapped_column(Enum(RequestStatus, native_enum=False, length=32), nullable=False, default=RequestStatus.NEW)
    category: Mapped[str | None] = mapped_column(String(255), nullable=True)

    user: Mapped[User] = relationship("User", foreign_keys=[user_id])
    supplier: Mapped[User | None] = relationship("User", foreign_keys=[supplier_id])
    bookings: Mapped[list["Booking"]] = relationship("Booking", back_populates="booking_request", cascade="all, delete-orphan")


class Booking(Base, TimestampMixin):
    __tablename__ = "bookings"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    booking_request_id: Mapped[str] = mapped_column(String(36), ForeignKey("booking_requests.id"), nullable=False, index=True)
    zone_id: Mapped[str] = mapped_column(String(36), ForeignKey("zones.id"), nullable=False, index=True)

    status: Mapped[BookingStatus] = mapped_column(Enum(BookingStatus, native_enum=False, length=32), nullable=False, default=BookingStatus.PENDING_KM, index=True)

    booking_request: Mapped[BookingRequest] = relationship("BookingRequest", back_populates="bookings")
    zone: Mapped[Zone] = relationship("Zone")
