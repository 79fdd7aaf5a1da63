"""FastAPI dependencies: per-request stores, services and the logged-in user."""

from fastapi import Depends, Query, Request
from sqlalchemy.orm import Session

from .config import PAGE_SIZE
from .database import get_db
from .domain.enums import Role
from .domain.errors import PermissionDeniedError
from .images import ImageStorage
from .models import User
from .pagination import PageRequest
from .services import BookingService, PaymentService, TicketService, UserService, VenueService
from .stores import SqlBookingStore, SqlPaymentStore, SqlTicketStore, SqlUserStore, SqlVenueStore

SESSION_USER_KEY = "user_id"


class LoginRequired(Exception):
    """Raised when a protected page is requested without a valid session."""


def get_user_service(db: Session = Depends(get_db)) -> UserService:
    return UserService(SqlUserStore(db))


def get_venue_service(db: Session = Depends(get_db)) -> VenueService:
    return VenueService(SqlVenueStore(db), ImageStorage())


def get_payment_service(db: Session = Depends(get_db)) -> PaymentService:
    return PaymentService(SqlPaymentStore(db), SqlBookingStore(db))


def get_booking_service(
    db: Session = Depends(get_db),
    payments: PaymentService = Depends(get_payment_service),
) -> BookingService:
    return BookingService(SqlBookingStore(db), SqlVenueStore(db), payments)


def get_ticket_service(db: Session = Depends(get_db)) -> TicketService:
    return TicketService(SqlTicketStore(db))


def current_user(request: Request, users: UserService = Depends(get_user_service)) -> User:
    user_id = request.session.get(SESSION_USER_KEY)
    user = users.find_user(user_id) if user_id is not None else None
    if user is None or not user.enabled:
        request.session.pop(SESSION_USER_KEY, None)
        raise LoginRequired()
    request.state.user = user
    return user


def require_roles(*roles: Role):
    def dependency(user: User = Depends(current_user)) -> User:
        if user.role not in roles:
            raise PermissionDeniedError()
        return user

    return dependency


require_staff = require_roles(Role.ADMIN, Role.EVENT_MANAGER)
require_admin = require_roles(Role.ADMIN)


def page_request(
    page: int = Query(0),
    size: int = Query(PAGE_SIZE),
    sort_by: str = Query("id"),
    sort_dir: str = Query("desc"),
) -> PageRequest:
    return PageRequest.of(page=page, size=size, sort_by=sort_by, sort_dir=sort_dir)
