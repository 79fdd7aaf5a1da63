from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse
from starlette.responses import RedirectResponse

from venue_booking.dependencies import get_user_service, require_admin
from venue_booking.models import User
from venue_booking.services import UserService
from venue_booking.web import flash, render

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/approvals", response_class=HTMLResponse)
def approvals(
    request: Request,
    admin: User = Depends(require_admin),
    users: UserService = Depends(get_user_service),
):
    return render(request, "admin/approvals.html", {
        "pending_managers": users.pending_managers(),
        "approved_managers": users.approved_managers(),
    })


@router.post("/approve/{user_id}")
def approve_manager(
    user_id: int,
    request: Request,
    admin: User = Depends(require_admin),
    users: UserService = Depends(get_user_service),
):
    users.approve_manager(user_id)
    flash(request, "success", "Event manager approved successfully!")
    return RedirectResponse(url="/admin/approvals", status_code=303)


@router.post("/reject/{user_id}")
def reject_manager(
    user_id: int,
    request: Request,
    admin: User = Depends(require_admin),
    users: UserService = Depends(get_user_service),
):
    users.reject_manager(user_id)
    flash(request, "success", "Request rejected and removed.")
    return RedirectResponse(url="/admin/approvals", status_code=303)
