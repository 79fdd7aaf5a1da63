from venue_booking.stores.interfaces import (
    BookingStore,
    PaymentStore,
    TicketStore,
    UserStore,
    VenueStore,
)
from venue_booking.stores.sql import (
    SqlBookingStore,
    SqlPaymentStore,
    SqlTicketStore,
    SqlUserStore,
    SqlVenueStore,
)

__all__ = [
    "BookingStore",
    "PaymentStore",
    "TicketStore",
    "UserStore",
    "VenueStore",
    "SqlBookingStore",
    "SqlPaymentStore",
    "SqlTicketStore",
    "SqlUserStore",
    "SqlVenueStore",
]
