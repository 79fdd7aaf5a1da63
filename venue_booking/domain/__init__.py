from venue_booking.domain.enums import BookingStatus, PaymentStatus, Role, TicketStatus, VenueStatus
from venue_booking.domain.errors import (
    ConflictError,
    DomainError,
    ErrorCode,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)

__all__ = [
    "BookingStatus",
    "PaymentStatus",
    "Role",
    "TicketStatus",
    "VenueStatus",
    "DomainError",
    "ErrorCode",
    "NotFoundError",
    "ConflictError",
    "ValidationError",
    "PermissionDeniedError",
]
