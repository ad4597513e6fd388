# Import all models so that SQLAlchemy registers them for metadata.create_all
from dmp_booking.models.user import User
from dmp_booking.models.zone import Zone
from dmp_booking.models.booking import Booking, BookingRequest
from dmp_booking.models.audit_log import AuditLog

__all__ = [
    "User",
    "Zone",
    "BookingRequest",
    "Booking",
    "AuditLog",
]
