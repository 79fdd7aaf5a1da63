from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse

from venue_booking.dependencies import (
    current_user,
    get_booking_service,
    get_payment_service,
    get_ticket_service,
    get_user_service,
    get_venue_service,
)
from venue_booking.domain.enums import Role
from venue_booking.models import User
from venue_booking.pagination import PageRequest
from venue_booking.services import (
    BookingService,
    PaymentService,
    TicketService,
    UserService,
    VenueService,
)
from venue_booking.web import render

router = APIRouter(tags=["dashboard"])


@router.get("/dashboard", response_class=HTMLResponse)
def dashboard(
    request: Request,
    user: User = Depends(current_user),
    venues: VenueService = Depends(get_venue_service),
    bookings: BookingService = Depends(get_booking_service),
    payments: PaymentService = Depends(get_payment_service),
    tickets: TicketService = Depends(get_ticket_service),
    users: UserService = Depends(get_user_service),
):
    context = {"user": user}
    if user.role.is_staff:
        context.update(
            venue_count=venues.count_venues(),
            booking_count=bookings.count_bookings(),
            open_ticket_count=tickets.count_open(),
            payments=payments.summary(),
        )
    if user.role == Role.ADMIN:
        context["pending_approvals"] = users.pending_managers()
    if user.role == Role.CUSTOMER:
        context["recent_bookings"] = bookings.list_bookings(PageRequest.of(size=5), owner=user).items
        context["available_venues"] = venues.list_available()
    return render(request, "dashboard.html", context)
