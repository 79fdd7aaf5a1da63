"""Store interfaces (repository pattern).

Stores must be swappable. Services receive them by construction and never
touch the database session directly.
"""

from abc import ABC, abstractmethod
from datetime import date

from venue_booking.domain.enums import BookingStatus, PaymentStatus, Role, TicketStatus, VenueStatus
from venue_booking.models import Booking, Payment, SupportTicket, User, Venue
from venue_booking.pagination import Page, PageRequest


class VenueStore(ABC):
    """Interface for venue persistence operations."""

    @abstractmethod
    def get(self, venue_id: int) -> Venue | None:
        """Return a venue by ID, or None if not found."""
        ...

    @abstractmethod
    def page(self, request: PageRequest, search: str | None = None) -> Page[Venue]:
        """Return a page of venues whose name, location or status contains ``search``."""
        ...

    @abstractmethod
    def list_by_status(self, status: VenueStatus) -> list[Venue]:
        ...

    @abstractmethod
    def save(self, venue: Venue) -> Venue:
        """Insert or update a venue and return it refreshed."""
        ...

    @abstractmethod
    def delete(self, venue: Venue) -> None:
        """Remove the venue together with its bookings and their payments."""
        ...

    @abstractmethod
    def count(self) -> int:
        ...


class BookingStore(ABC):
    """Interface for booking persistence operations."""

    @abstractmethod
    def get(self, booking_id: int) -> Booking | None:
        """Return a booking by ID, or None if not found."""
        ...

    @abstractmethod
    def page(
        self,
        request: PageRequest,
        status: BookingStatus | None = None,
        search: str | None = None,
        owner_id: int | None = None,
    ) -> Page[Booking]:
        """Return a page of bookings.

        ``search`` matches venue name, username or status; ``owner_id``
        restricts the page to one user's bookings.
        """
        ...

    @abstractmethod
    def add_if_available(self, booking: Booking) -> Booking | None:
        """Insert ``booking`` unless it overlaps a non-cancelled booking of its venue.

        The overlap scan and the insert happen in one transaction holding a
        lock on the venue row. Returns None, writing nothing, on overlap.
        """
        ...

    @abstractmethod
    def list_elapsed(self, today: date) -> list[Booking]:
        """Return unfinished (PENDING or CONFIRMED) bookings that ended before ``today``."""
        ...

    @abstractmethod
    def save(self, booking: Booking) -> Booking:
        ...

    @abstractmethod
    def save_all(self, bookings: list[Booking]) -> None:
        ...

    @abstractmethod
    def count(self) -> int:
        ...


class PaymentStore(ABC):
    """Interface for payment persistence operations."""

    @abstractmethod
    def get(self, payment_id: int) -> Payment | None:
        ...

    @abstractmethod
    def get_for_booking(self, booking_id: int) -> Payment | None:
        ...

    @abstractmethod
    def page(
        self,
        request: PageRequest,
        status: PaymentStatus | None = None,
        search: str | None = None,
        owner_id: int | None = None,
    ) -> Page[Payment]:
        """Return a page of payments; ``search`` matches venue name, username or status."""
        ...

    @abstractmethod
    def save(self, payment: Payment) -> Payment:
        ...

    @abstractmethod
    def save_with_booking(self, payment: Payment, booking: Booking) -> Payment:
        """Persist a payment and its booking's new state in one commit."""
        ...

    @abstractmethod
    def total_amount(self, status: PaymentStatus) -> float:
        ...

    @abstractmethod
    def count_by_status(self, status: PaymentStatus) -> int:
        ...


class TicketStore(ABC):
    """Interface for support ticket persistence operations."""

    @abstractmethod
    def get(self, ticket_id: int) -> SupportTicket | None:
        ...

    @abstractmethod
    def page(
        self,
        request: PageRequest,
        status: TicketStatus | None = None,
        search: str | None = None,
        owner_id: int | None = None,
    ) -> Page[SupportTicket]:
        """Return a page of tickets; ``search`` matches username, issue type, status or description."""
        ...

    @abstractmethod
    def save(self, ticket: SupportTicket) -> SupportTicket:
        ...

    @abstractmethod
    def count_by_status(self, status: TicketStatus) -> int:
        ...


class UserStore(ABC):
    """Interface for user account persistence operations."""

    @abstractmethod
    def get(self, user_id: int) -> User | None:
        ...

    @abstractmethod
    def get_by_username(self, username: str) -> User | None:
        ...

    @abstractmethod
    def get_by_email(self, email: str) -> User | None:
        ...

    @abstractmethod
    def list_by_role(self, role: Role, enabled: bool | None = None) -> list[User]:
        ...

    @abstractmethod
    def exists_with_role(self, role: Role) -> bool:
        ...

    @abstractmethod
    def save(self, user: User) -> User:
        ...

    @abstractmethod
    def delete(self, user: User) -> None:
        ...
