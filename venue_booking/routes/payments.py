from typing import Optional

from fastapi import APIRouter, Depends, Form, Query, Request
from fastapi.responses import HTMLResponse
from starlette.responses import RedirectResponse

from venue_booking.dependencies import (
    current_user,
    get_booking_service,
    get_payment_service,
    page_request,
)
from venue_booking.domain.enums import PaymentStatus
from venue_booking.models import User
from venue_booking.pagination import PageRequest
from venue_booking.services import BookingService, PaymentService
from venue_booking.web import flash, render

router = APIRouter(prefix="/payments", tags=["payments"])

PAYMENT_STATUSES = [status.value for status in PaymentStatus]


@router.get("", response_class=HTMLResponse)
def list_payments(
    request: Request,
    paging: PageRequest = Depends(page_request),
    status: Optional[str] = Query(None),
    search: Optional[str] = Query(None),
    user: User = Depends(current_user),
    payments: PaymentService = Depends(get_payment_service),
):
    owner = None if user.role.is_staff else user
    page = payments.list_payments(paging, status=status, search=search, owner=owner)
    return render(request, "payment/list.html", {
        "page": page,
        "payments": page.items,
        "status": status,
        "search": search,
        "statuses": PAYMENT_STATUSES,
    })


@router.get("/pay/{booking_id}", response_class=HTMLResponse)
def payment_page(
    booking_id: int,
    request: Request,
    user: User = Depends(current_user),
    bookings: BookingService = Depends(get_booking_service),
    payments: PaymentService = Depends(get_payment_service),
):
    booking = bookings.get_booking_for(booking_id, user)
    return render(request, "payment/process.html", {
        "booking": booking,
        "amount": payments.quote(booking_id),
    })


@router.post("/process")
def process_payment(
    request: Request,
    booking_id: int = Form(...),
    user: User = Depends(current_user),
    bookings: BookingService = Depends(get_booking_service),
    payments: PaymentService = Depends(get_payment_service),
):
    bookings.get_booking_for(booking_id, user)
    payment = payments.process_payment(booking_id)
    flash(request, "success", f"Payment of {payment.amount:,.2f} received. Booking confirmed.")
    return RedirectResponse(url="/bookings", status_code=303)
