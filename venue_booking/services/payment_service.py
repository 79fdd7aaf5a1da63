"""Payment processor.

Payments are simulated: processing always succeeds and confirms the booking.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable

from venue_booking.domain.enums import BookingStatus, PaymentStatus
from venue_booking.domain.errors import ErrorCode, NotFoundError, ValidationError
from venue_booking.domain.rules import booking_amount, inclusive_days
from venue_booking.models import Booking, Payment, User
from venue_booking.pagination import Page, PageRequest
from venue_booking.services.base import parse_status
from venue_booking.stores.interfaces import BookingStore, PaymentStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PaymentSummary:
    total_earnings: float
    total_refunded: float
    successful: int
    pending: int
    refunded: int


class PaymentService:
    def __init__(
        self,
        payments: PaymentStore,
        bookings: BookingStore,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._payments = payments
        self._bookings = bookings
        self._clock = clock

    def _get_booking(self, booking_id: int) -> Booking:
        booking = self._bookings.get(booking_id)
        if booking is None:
            logger.error("Booking not found with ID: %s", booking_id)
            raise NotFoundError("Booking", booking_id)
        return booking

    def quote(self, booking_id: int) -> float:
        """Amount due for a booking: price per day times inclusive day count."""
        booking = self._get_booking(booking_id)
        return booking_amount(booking.venue.price_per_day, booking.start_date, booking.end_date)

    def process_payment(self, booking_id: int) -> Payment:
        """Charge a PENDING booking and confirm it in the same commit."""
        booking = self._get_booking(booking_id)
        if not booking.status.can_transition_to(BookingStatus.CONFIRMED):
            logger.warning("Refusing payment for booking %s in status %s", booking_id, booking.status.value)
            raise ValidationError(
                f"Booking is {booking.status.value.lower()} and cannot be paid",
                code=ErrorCode.INVALID_TRANSITION,
            )

        days = inclusive_days(booking.start_date, booking.end_date)
        amount = booking_amount(booking.venue.price_per_day, booking.start_date, booking.end_date)
        logger.debug(
            "Calculated payment amount %.2f for %d days at %.2f per day",
            amount, days, booking.venue.price_per_day,
        )

        payment = self._payments.get_for_booking(booking_id) or Payment(booking_id=booking_id)
        payment.amount = amount
        payment.status = PaymentStatus.SUCCESS
        payment.paid_at = self._clock()
        booking.status = BookingStatus.CONFIRMED

        payment = self._payments.save_with_booking(payment, booking)
        logger.info("Payment %s processed for booking %s", payment.id, booking_id)
        return payment

    def refund_payment(self, booking_id: int) -> Payment | None:
        """Mark a successful payment REFUNDED; anything else is left alone."""
        logger.info("Processing refund for booking ID: %s", booking_id)
        self._get_booking(booking_id)
        payment = self._payments.get_for_booking(booking_id)
        if payment is None or payment.status != PaymentStatus.SUCCESS:
            logger.warning("No successful payment to refund for booking ID: %s", booking_id)
            return None
        payment.status = PaymentStatus.REFUNDED
        payment = self._payments.save(payment)
        logger.info("Payment refunded for booking ID: %s", booking_id)
        return payment

    def get_payment(self, payment_id: int) -> Payment:
        payment = self._payments.get(payment_id)
        if payment is None:
            logger.error("Payment not found with ID: %s", payment_id)
            raise NotFoundError("Payment", payment_id)
        return payment

    def list_payments(
        self,
        request: PageRequest,
        status: str | None = None,
        search: str | None = None,
        owner: User | None = None,
    ) -> Page[Payment]:
        page = self._payments.page(
            request,
            status=parse_status(PaymentStatus, status),
            search=search,
            owner_id=owner.id if owner else None,
        )
        logger.info("Found %d payments (status=%r, search=%r)", page.total, status, search)
        return page

    def summary(self) -> PaymentSummary:
        return PaymentSummary(
            total_earnings=self._payments.total_amount(PaymentStatus.SUCCESS),
            total_refunded=self._payments.total_amount(PaymentStatus.REFUNDED),
            successful=self._payments.count_by_status(PaymentStatus.SUCCESS),
            pending=self._payments.count_by_status(PaymentStatus.PENDING),
            refunded=self._payments.count_by_status(PaymentStatus.REFUNDED),
        )
