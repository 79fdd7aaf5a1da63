from typing import Optional

from fastapi import APIRouter, Depends, Form, Query, Request
from fastapi.responses import HTMLResponse
from starlette.responses import RedirectResponse

from venue_booking.dependencies import current_user, get_ticket_service, page_request, require_staff
from venue_booking.domain.enums import TicketStatus
from venue_booking.domain.errors import ValidationError
from venue_booking.models import User
from venue_booking.pagination import PageRequest
from venue_booking.schemas import TicketForm
from venue_booking.services import TicketService
from venue_booking.web import flash, render

router = APIRouter(prefix="/support", tags=["support"])

TICKET_STATUSES = [status.value for status in TicketStatus]
ISSUE_TYPES = ["Booking", "Payment", "Venue", "Account", "Other"]


@router.get("", response_class=HTMLResponse)
def list_tickets(
    request: Request,
    paging: PageRequest = Depends(page_request),
    status: Optional[str] = Query(None),
    search: Optional[str] = Query(None),
    user: User = Depends(current_user),
    tickets: TicketService = Depends(get_ticket_service),
):
    owner = None if user.role.is_staff else user
    page = tickets.list_tickets(paging, status=status, search=search, owner=owner)
    return render(request, "support/list.html", {
        "page": page,
        "tickets": page.items,
        "status": status,
        "search": search,
        "statuses": TICKET_STATUSES,
    })


@router.get("/create", response_class=HTMLResponse)
def create_ticket_form(request: Request, user: User = Depends(current_user)):
    return render(request, "support/create.html", {"issue_types": ISSUE_TYPES})


@router.post("/create")
def create_ticket(
    request: Request,
    issue_type: str = Form(...),
    description: str = Form(...),
    user: User = Depends(current_user),
    tickets: TicketService = Depends(get_ticket_service),
):
    form = TicketForm(issue_type=issue_type, description=description)
    ticket = tickets.create_ticket(user, form.issue_type, form.description)
    flash(request, "success", f"Ticket #{ticket.id} submitted.")
    return RedirectResponse(url="/support", status_code=303)


@router.get("/resolve/{ticket_id}", response_class=HTMLResponse)
def resolve_ticket_form(
    ticket_id: int,
    request: Request,
    user: User = Depends(require_staff),
    tickets: TicketService = Depends(get_ticket_service),
):
    ticket = tickets.get_ticket(ticket_id)
    tickets.check_can_resolve(ticket, user)
    return render(request, "support/resolve.html", {"ticket": ticket})


@router.post("/resolve/{ticket_id}", response_class=HTMLResponse)
def resolve_ticket(
    ticket_id: int,
    request: Request,
    resolution_notes: str = Form(""),
    user: User = Depends(require_staff),
    tickets: TicketService = Depends(get_ticket_service),
):
    try:
        tickets.resolve_ticket(ticket_id, resolution_notes, user)
    except ValidationError as exc:
        return render(
            request,
            "support/resolve.html",
            {"ticket": tickets.get_ticket(ticket_id), "error": exc.message},
            status_code=400,
        )
    flash(request, "success", "Ticket resolved successfully.")
    return RedirectResponse(url="/support", status_code=303)
