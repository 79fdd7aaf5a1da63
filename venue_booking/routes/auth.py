import logging

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import HTMLResponse
from pydantic import ValidationError as SchemaValidationError
from starlette.responses import RedirectResponse

from venue_booking.dependencies import SESSION_USER_KEY, get_user_service
from venue_booking.domain.errors import DomainError
from venue_booking.schemas import REGISTRATION_ROLES, RegistrationForm
from venue_booking.services import UserService
from venue_booking.web import error_message, flash, render, status_for

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])


@router.get("/", response_class=HTMLResponse)
def home(request: Request):
    if request.session.get(SESSION_USER_KEY) is not None:
        return RedirectResponse(url="/dashboard", status_code=303)
    return render(request, "home.html")


@router.get("/login", response_class=HTMLResponse)
def login_form(request: Request):
    return render(request, "auth/login.html")


@router.post("/login", response_class=HTMLResponse)
def login(
    request: Request,
    username: str = Form(...),
    password: str = Form(...),
    users: UserService = Depends(get_user_service),
):
    user = users.authenticate(username.strip(), password)
    if user is None:
        return render(
            request,
            "auth/login.html",
            {"error": "Invalid credentials, or the account is awaiting approval.", "username": username},
            status_code=401,
        )
    request.session[SESSION_USER_KEY] = user.id
    logger.info("User %s logged in", user.username)
    return RedirectResponse(url="/dashboard", status_code=303)


@router.get("/logout")
def logout(request: Request):
    request.session.clear()
    return RedirectResponse(url="/login", status_code=303)


@router.get("/register", response_class=HTMLResponse)
def register_form(request: Request):
    return render(request, "auth/register.html", {"roles": REGISTRATION_ROLES, "form": {}})


@router.post("/register", response_class=HTMLResponse)
def register(
    request: Request,
    username: str = Form(...),
    email: str = Form(...),
    password: str = Form(...),
    role: str = Form("CUSTOMER"),
    users: UserService = Depends(get_user_service),
):
    submitted = {"username": username, "email": email, "role": role}
    try:
        form = RegistrationForm(username=username, email=email, password=password, role=role)
        user = users.register(form.username, form.email, form.password, form.role)
    except (DomainError, SchemaValidationError) as exc:
        return render(
            request,
            "auth/register.html",
            {"roles": REGISTRATION_ROLES, "form": submitted, "error": error_message(exc)},
            status_code=status_for(exc),
        )
    if user.enabled:
        flash(request, "success", "Registration successful. Please log in.")
    else:
        flash(request, "success", "Registration received. An administrator must approve your account.")
    return RedirectResponse(url="/login", status_code=303)
