from venue_booking.services.booking_service import BookingService
from venue_booking.services.payment_service import PaymentService, PaymentSummary
from venue_booking.services.ticket_service import TicketService
from venue_booking.services.user_service import UserService
from venue_booking.services.venue_service import VenueService

__all__ = [
    "BookingService",
    "PaymentService",
    "PaymentSummary",
    "TicketService",
    "UserService",
    "VenueService",
]
