from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Query, Request, UploadFile
from fastapi.responses import HTMLResponse
from starlette.responses import RedirectResponse

from venue_booking.dependencies import (
    current_user,
    get_venue_service,
    page_request,
    require_admin,
    require_staff,
)
from venue_booking.domain.enums import VenueStatus
from venue_booking.models import User
from venue_booking.pagination import PageRequest
from venue_booking.schemas import VENUE_STATUSES, VenueForm
from venue_booking.services import VenueService
from venue_booking.web import flash, render

router = APIRouter(prefix="/venues", tags=["venues"])


@router.get("", response_class=HTMLResponse)
def list_venues(
    request: Request,
    paging: PageRequest = Depends(page_request),
    search: Optional[str] = Query(None),
    user: User = Depends(current_user),
    venues: VenueService = Depends(get_venue_service),
):
    page = venues.list_venues(paging, search)
    return render(request, "venue/list.html", {
        "page": page,
        "venues": page.items,
        "search": search,
    })


@router.get("/add", response_class=HTMLResponse)
def add_venue_form(request: Request, user: User = Depends(require_staff)):
    return render(request, "venue/form.html", {"venue": None, "statuses": VENUE_STATUSES})


@router.get("/edit/{venue_id}", response_class=HTMLResponse)
def edit_venue_form(
    venue_id: int,
    request: Request,
    user: User = Depends(require_staff),
    venues: VenueService = Depends(get_venue_service),
):
    venue = venues.get_venue(venue_id)
    return render(request, "venue/form.html", {"venue": venue, "statuses": VENUE_STATUSES})


@router.post("/add")
def save_venue(
    request: Request,
    name: str = Form(...),
    location: str = Form(...),
    capacity: int = Form(0),
    price_per_day: float = Form(...),
    status: Optional[VenueStatus] = Form(None),
    venue_id: Optional[int] = Form(None),
    image_file: Optional[UploadFile] = File(None),
    user: User = Depends(require_staff),
    venues: VenueService = Depends(get_venue_service),
):
    form = VenueForm(
        name=name,
        location=location,
        capacity=capacity,
        price_per_day=price_per_day,
        status=status,
    )
    venue = venues.save_venue(form, image_file, venue_id=venue_id)
    flash(request, "success", "Venue saved successfully!")
    return RedirectResponse(url=f"/venues/edit/{venue.id}", status_code=303)


@router.post("/{venue_id}/status")
def set_venue_status(
    venue_id: int,
    request: Request,
    status: VenueStatus = Form(...),
    user: User = Depends(require_staff),
    venues: VenueService = Depends(get_venue_service),
):
    venue = venues.set_status(venue_id, status)
    flash(request, "success", f"Venue marked as {venue.status.value.lower()}.")
    return RedirectResponse(url=f"/venues/edit/{venue_id}", status_code=303)


@router.post("/delete/{venue_id}")
def delete_venue(
    venue_id: int,
    request: Request,
    user: User = Depends(require_admin),
    venues: VenueService = Depends(get_venue_service),
):
    venues.delete_venue(venue_id)
    flash(request, "success", "Venue deleted successfully!")
    return RedirectResponse(url="/venues", status_code=303)
