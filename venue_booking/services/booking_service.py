"""Booking engine - conflict detection and the booking status lifecycle."""

import logging
from datetime import date, datetime
from typing import Callable

from venue_booking.domain.enums import BookingStatus
from venue_booking.domain.errors import (
    ConflictError,
    ErrorCode,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from venue_booking.domain.rules import normalize_range
from venue_booking.models import Booking, User
from venue_booking.pagination import Page, PageRequest
from venue_booking.services.base import parse_status
from venue_booking.services.payment_service import PaymentService
from venue_booking.stores.interfaces import BookingStore, VenueStore

logger = logging.getLogger(__name__)


class BookingService:
    def __init__(
        self,
        bookings: BookingStore,
        venues: VenueStore,
        payments: PaymentService,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._bookings = bookings
        self._venues = venues
        self._payments = payments
        self._clock = clock

    def today(self) -> date:
        return self._clock().date()

    def create_booking(
        self, venue_id: int, user: User, start_date: date | None, end_date: date | None
    ) -> Booking:
        """Reserve a venue for an inclusive date range.

        Raises:
            NotFoundError: If the venue does not exist.
            ConflictError: If a non-cancelled booking of the venue overlaps the range.
        """
        venue = self._venues.get(venue_id)
        if venue is None:
            raise NotFoundError("Venue", venue_id)
        start_date, end_date = normalize_range(start_date, end_date, self.today())
        logger.info(
            "Creating booking for venue %s by %s from %s to %s",
            venue.name, user.username, start_date, end_date,
        )

        booking = Booking(
            venue_id=venue.id,
            user_id=user.id,
            start_date=start_date,
            end_date=end_date,
            status=BookingStatus.PENDING,
        )
        saved = self._bookings.add_if_available(booking)
        if saved is None:
            logger.warning(
                "Booking conflict for venue %s on %s to %s", venue_id, start_date, end_date
            )
            raise ConflictError("Venue is already booked for the selected date range.")
        logger.info("Booking created with ID: %s", saved.id)
        return saved

    def get_booking(self, booking_id: int) -> Booking:
        booking = self._bookings.get(booking_id)
        if booking is None:
            logger.error("Booking not found with ID: %s", booking_id)
            raise NotFoundError("Booking", booking_id)
        return booking

    def update_status(self, booking_id: int, new_status: BookingStatus | str) -> Booking:
        """Move a booking to ``new_status``.

        Re-applying the current status is a no-op. Cancelling refunds a
        successful payment on a best-effort basis: a refund failure is logged
        and the cancellation stands.

        Raises:
            NotFoundError: If the booking does not exist.
            ValidationError: If the transition is not allowed.
        """
        target = parse_status(BookingStatus, new_status)
        if target is None:
            raise ValidationError("A target status is required")
        booking = self.get_booking(booking_id)
        if booking.status == target:
            logger.debug("Booking %s already %s", booking_id, target.value)
            return booking
        if not booking.status.can_transition_to(target):
            logger.warning(
                "Illegal transition for booking %s: %s -> %s",
                booking_id, booking.status.value, target.value,
            )
            raise ValidationError(
                f"Cannot change a {booking.status.value.lower()} booking to {target.value.lower()}",
                code=ErrorCode.INVALID_TRANSITION,
            )

        logger.info("Updating booking %s status to %s", booking_id, target.value)
        booking.status = target
        booking = self._bookings.save(booking)

        if target == BookingStatus.CANCELLED:
            try:
                self._payments.refund_payment(booking_id)
            except Exception:
                logger.exception("Error refunding payment for booking %s", booking_id)
        return booking

    def get_booking_for(self, booking_id: int, actor: User) -> Booking:
        """Return a booking that ``actor`` may act on: staff see all, customers their own."""
        booking = self.get_booking(booking_id)
        if not actor.role.is_staff and booking.user_id != actor.id:
            logger.warning("User %s denied access to booking %s", actor.username, booking_id)
            raise PermissionDeniedError("You can only manage your own bookings")
        return booking

    def cancel_booking(self, booking_id: int, actor: User) -> Booking:
        self.get_booking_for(booking_id, actor)
        return self.update_status(booking_id, BookingStatus.CANCELLED)

    def complete_elapsed(self) -> int:
        """Mark unfinished bookings whose end date has passed as COMPLETED."""
        stale = self._bookings.list_elapsed(self.today())
        for booking in stale:
            logger.debug("Auto-marking booking %s as COMPLETED", booking.id)
            booking.status = BookingStatus.COMPLETED
        if stale:
            self._bookings.save_all(stale)
            logger.info("Auto-completed %d elapsed bookings", len(stale))
        return len(stale)

    def list_bookings(
        self,
        request: PageRequest,
        status: str | None = None,
        search: str | None = None,
        owner: User | None = None,
    ) -> Page[Booking]:
        """Return a page of bookings, completing elapsed ones first.

        ``owner`` restricts the page to that user's bookings.
        """
        status_filter = parse_status(BookingStatus, status)
        self.complete_elapsed()
        page = self._bookings.page(
            request,
            status=status_filter,
            search=search,
            owner_id=owner.id if owner else None,
        )
        logger.info("Found %d bookings (status=%r, search=%r)", page.total, status, search)
        return page

    def count_bookings(self) -> int:
        return self._bookings.count()
