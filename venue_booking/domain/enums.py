"""Closed status and role enumerations.

Stored as their string values so the schema stays readable.
"""

from enum import Enum


class Role(str, Enum):
    ADMIN = "ADMIN"
    EVENT_MANAGER = "EVENT_MANAGER"
    CUSTOMER = "CUSTOMER"

    @property
    def is_staff(self) -> bool:
        return self in (Role.ADMIN, Role.EVENT_MANAGER)


class VenueStatus(str, Enum):
    AVAILABLE = "AVAILABLE"
    BOOKED = "BOOKED"
    MAINTENANCE = "MAINTENANCE"


class BookingStatus(str, Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    CANCELLED = "CANCELLED"
    COMPLETED = "COMPLETED"

    @property
    def is_terminal(self) -> bool:
        return self in (BookingStatus.CANCELLED, BookingStatus.COMPLETED)

    def can_transition_to(self, target: "BookingStatus") -> bool:
        """Return True if ``target`` is a legal next state from this one."""
        return target in _BOOKING_TRANSITIONS[self]


_BOOKING_TRANSITIONS = {
    BookingStatus.PENDING: frozenset(
        {BookingStatus.CONFIRMED, BookingStatus.CANCELLED, BookingStatus.COMPLETED}
    ),
    BookingStatus.CONFIRMED: frozenset({BookingStatus.CANCELLED, BookingStatus.COMPLETED}),
    BookingStatus.CANCELLED: frozenset(),
    BookingStatus.COMPLETED: frozenset(),
}


class PaymentStatus(str, Enum):
    PENDING = "PENDING"
    SUCCESS = "SUCCESS"
    REFUNDED = "REFUNDED"


class TicketStatus(str, Enum):
    OPEN = "OPEN"
    RESOLVED = "RESOLVED"
