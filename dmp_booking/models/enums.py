from __future__ import annotations

import enum


class Role(str, enum.Enum):
    SUPPLIER = "SUPPLIER"
    CATEGORY_MANAGER = "CATEGORY_MANAGER"
    DMP_MANAGER = "DMP_MANAGER"


class UserStatus(str, enum.Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class ZoneStatus(str, enum.Enum):
    AVAILABLE = "AVAILABLE"
    BOOKED = "BOOKED"
    UNAVAILABLE = "UNAVAILABLE"


class RequestStatus(str, enum.Enum):
    NEW = "NEW"
    PENDING = "PENDING"
    CLOSED = "CLOSED"


class BookingStatus(str, enum.Enum):
    PENDING_KM = "PENDING_KM"
    KM_APPROVED = "KM_APPROVED"
    KM_REJECTED = "KM_REJECTED"
    DMP_APPROVED = "DMP_APPROVED"
    DMP_REJECTED = "DMP_REJECTED"
