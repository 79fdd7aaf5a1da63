from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Form, Query, Request
from fastapi.responses import HTMLResponse
from starlette.responses import RedirectResponse

from venue_booking.dependencies import (
    current_user,
    get_booking_service,
    get_venue_service,
    page_request,
    require_staff,
)
from venue_booking.domain.enums import BookingStatus
from venue_booking.domain.errors import ConflictError
from venue_booking.models import User
from venue_booking.pagination import PageRequest
from venue_booking.schemas import BookingForm
from venue_booking.services import BookingService, VenueService
from venue_booking.web import flash, render

router = APIRouter(prefix="/bookings", tags=["bookings"])

BOOKING_STATUSES = [status.value for status in BookingStatus]


@router.get("", response_class=HTMLResponse)
def list_bookings(
    request: Request,
    paging: PageRequest = Depends(page_request),
    status: Optional[str] = Query(None),
    search: Optional[str] = Query(None),
    user: User = Depends(current_user),
    bookings: BookingService = Depends(get_booking_service),
):
    owner = None if user.role.is_staff else user
    page = bookings.list_bookings(paging, status=status, search=search, owner=owner)
    return render(request, "booking/list.html", {
        "page": page,
        "bookings": page.items,
        "status": status,
        "search": search,
        "statuses": BOOKING_STATUSES,
    })


@router.get("/create/{venue_id}", response_class=HTMLResponse)
def create_booking_form(
    venue_id: int,
    request: Request,
    user: User = Depends(current_user),
    venues: VenueService = Depends(get_venue_service),
):
    venue = venues.get_venue(venue_id)
    return render(request, "booking/create.html", {"venue": venue, "form": None})


@router.post("/create", response_class=HTMLResponse)
def create_booking(
    request: Request,
    venue_id: int = Form(...),
    start_date: Optional[date] = Form(None),
    end_date: Optional[date] = Form(None),
    user: User = Depends(current_user),
    bookings: BookingService = Depends(get_booking_service),
    venues: VenueService = Depends(get_venue_service),
):
    form = BookingForm(venue_id=venue_id, start_date=start_date, end_date=end_date)
    try:
        booking = bookings.create_booking(form.venue_id, user, form.start_date, form.end_date)
    except ConflictError as exc:
        return render(
            request,
            "booking/create.html",
            {"venue": venues.get_venue(venue_id), "form": form, "error": exc.message},
            status_code=409,
        )
    flash(request, "success", f"Booking #{booking.id} created. Complete the payment to confirm it.")
    return RedirectResponse(url="/bookings", status_code=303)


@router.post("/cancel/{booking_id}")
def cancel_booking(
    booking_id: int,
    request: Request,
    user: User = Depends(current_user),
    bookings: BookingService = Depends(get_booking_service),
):
    bookings.cancel_booking(booking_id, user)
    flash(request, "success", f"Booking #{booking_id} cancelled.")
    return RedirectResponse(url="/bookings", status_code=303)


@router.post("/complete/{booking_id}")
def complete_booking(
    booking_id: int,
    request: Request,
    user: User = Depends(require_staff),
    bookings: BookingService = Depends(get_booking_service),
):
    bookings.update_status(booking_id, BookingStatus.COMPLETED)
    flash(request, "success", f"Booking #{booking_id} completed.")
    return RedirectResponse(url="/bookings", status_code=303)
