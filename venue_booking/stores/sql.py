"""SQLAlchemy implementation of the stores.

Every mutating call commits its own unit of work and rolls the session back
if the commit fails, so a failed write never leaves the request session dirty.
"""

import logging
from datetime import date
from typing import Type

from sqlalchemy import String, cast, func, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Query, Session

from venue_booking.database import Base
from venue_booking.domain.enums import BookingStatus, PaymentStatus, Role, TicketStatus, VenueStatus
from venue_booking.domain.rules import ranges_overlap
from venue_booking.models import Booking, Payment, SupportTicket, User, Venue
from venue_booking.pagination import Page, PageRequest
from venue_booking.stores.interfaces import (
    BookingStore,
    PaymentStore,
    TicketStore,
    UserStore,
    VenueStore,
)

logger = logging.getLogger(__name__)


def order_query(model: Type[Base], query: Query, sort_by: str, descending: bool) -> Query:
    if not sort_by or sort_by not in model.__table__.columns:
        sort_by = "id"
    column = getattr(model, sort_by)
    return query.order_by(column.desc() if descending else column.asc())


def paginate(model: Type[Base], query: Query, request: PageRequest) -> Page:
    total = query.order_by(None).count()
    query = order_query(model, query, request.sort_by, request.descending)
    items = query.offset(request.offset).limit(request.size).all()
    return Page(items=items, request=request, total=total)


def contains(column, search: str):
    term = search.strip().replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return cast(column, String).ilike(f"%{term}%", escape="\\")


class SqlStore:
    def __init__(self, db: Session) -> None:
        self.db = db

    def _commit(self) -> None:
        try:
            self.db.commit()
        except SQLAlchemyError:
            logger.exception("Commit failed, rolling back")
            self.db.rollback()
            raise

    def _save(self, instance):
        self.db.add(instance)
        self._commit()
        self.db.refresh(instance)
        return instance


class SqlVenueStore(SqlStore, VenueStore):
    def get(self, venue_id: int) -> Venue | None:
        return self.db.get(Venue, venue_id)

    def page(self, request: PageRequest, search: str | None = None) -> Page[Venue]:
        query = self.db.query(Venue)
        if search and search.strip():
            query = query.filter(
                contains(Venue.name, search)
                | contains(Venue.location, search)
                | contains(Venue.status, search)
            )
        return paginate(Venue, query, request)

    def list_by_status(self, status: VenueStatus) -> list[Venue]:
        return self.db.query(Venue).filter(Venue.status == status).order_by(Venue.name).all()

    def save(self, venue: Venue) -> Venue:
        return self._save(venue)

    def delete(self, venue: Venue) -> None:
        # Booking.payment and Venue.bookings cascade, so the ORM deletes
        # payments, then bookings, then the venue inside this one commit.
        for booking in list(venue.bookings):
            self.db.delete(booking)
        self.db.delete(venue)
        self._commit()

    def count(self) -> int:
        return self.db.query(func.count(Venue.id)).scalar() or 0


class SqlBookingStore(SqlStore, BookingStore):
    def get(self, booking_id: int) -> Booking | None:
        return self.db.get(Booking, booking_id)

    def page(
        self,
        request: PageRequest,
        status: BookingStatus | None = None,
        search: str | None = None,
        owner_id: int | None = None,
    ) -> Page[Booking]:
        query = self.db.query(Booking).join(Booking.venue).join(Booking.user)
        if owner_id is not None:
            query = query.filter(Booking.user_id == owner_id)
        if status is not None:
            query = query.filter(Booking.status == status)
        if search and search.strip():
            query = query.filter(
                or_(
                    contains(Venue.name, search),
                    contains(User.username, search),
                    contains(Booking.status, search),
                )
            )
        return paginate(Booking, query, request)

    def add_if_available(self, booking: Booking) -> Booking | None:
        # Row lock on the venue serializes concurrent creates for it. SQLite
        # ignores FOR UPDATE; there the engine opens transactions with
        # BEGIN IMMEDIATE (database.use_immediate_transactions) instead.
        self.db.query(Venue).filter(Venue.id == booking.venue_id).with_for_update().first()
        active = (
            self.db.query(Booking)
            .filter(Booking.venue_id == booking.venue_id, Booking.status != BookingStatus.CANCELLED)
            .all()
        )
        for existing in active:
            if ranges_overlap(booking.start_date, booking.end_date, existing.start_date, existing.end_date):
                logger.debug("Booking %s overlaps requested range", existing.id)
                self.db.rollback()
                return None
        return self._save(booking)

    def list_elapsed(self, today: date) -> list[Booking]:
        return (
            self.db.query(Booking)
            .filter(
                Booking.end_date < today,
                Booking.status.in_([BookingStatus.PENDING, BookingStatus.CONFIRMED]),
            )
            .all()
        )

    def save(self, booking: Booking) -> Booking:
        return self._save(booking)

    def save_all(self, bookings: list[Booking]) -> None:
        self.db.add_all(bookings)
        self._commit()

    def count(self) -> int:
        return self.db.query(func.count(Booking.id)).scalar() or 0


class SqlPaymentStore(SqlStore, PaymentStore):
    def get(self, payment_id: int) -> Payment | None:
        return self.db.get(Payment, payment_id)

    def get_for_booking(self, booking_id: int) -> Payment | None:
        return self.db.query(Payment).filter(Payment.booking_id == booking_id).first()

    def page(
        self,
        request: PageRequest,
        status: PaymentStatus | None = None,
        search: str | None = None,
        owner_id: int | None = None,
    ) -> Page[Payment]:
        query = self.db.query(Payment).join(Payment.booking).join(Booking.venue).join(Booking.user)
        if owner_id is not None:
            query = query.filter(Booking.user_id == owner_id)
        if status is not None:
            query = query.filter(Payment.status == status)
        if search and search.strip():
            query = query.filter(
                or_(
                    contains(Venue.name, search),
                    contains(User.username, search),
                    contains(Payment.status, search),
                )
            )
        return paginate(Payment, query, request)

    def save(self, payment: Payment) -> Payment:
        return self._save(payment)

    def save_with_booking(self, payment: Payment, booking: Booking) -> Payment:
        self.db.add(booking)
        return self._save(payment)

    def total_amount(self, status: PaymentStatus) -> float:
        total = self.db.query(func.sum(Payment.amount)).filter(Payment.status == status).scalar()
        return float(total or 0)

    def count_by_status(self, status: PaymentStatus) -> int:
        return self.db.query(func.count(Payment.id)).filter(Payment.status == status).scalar() or 0


class SqlTicketStore(SqlStore, TicketStore):
    def get(self, ticket_id: int) -> SupportTicket | None:
        return self.db.get(SupportTicket, ticket_id)

    def page(
        self,
        request: PageRequest,
        status: TicketStatus | None = None,
        search: str | None = None,
        owner_id: int | None = None,
    ) -> Page[SupportTicket]:
        query = self.db.query(SupportTicket).join(SupportTicket.customer)
        if owner_id is not None:
            query = query.filter(SupportTicket.customer_id == owner_id)
        if status is not None:
            query = query.filter(SupportTicket.status == status)
        if search and search.strip():
            query = query.filter(
                or_(
                    contains(User.username, search),
                    contains(SupportTicket.issue_type, search),
                    contains(SupportTicket.status, search),
                    contains(SupportTicket.description, search),
                )
            )
        return paginate(SupportTicket, query, request)

    def save(self, ticket: SupportTicket) -> SupportTicket:
        return self._save(ticket)

    def count_by_status(self, status: TicketStatus) -> int:
        return (
            self.db.query(func.count(SupportTicket.id))
            .filter(SupportTicket.status == status)
            .scalar()
            or 0
        )


class SqlUserStore(SqlStore, UserStore):
    def get(self, user_id: int) -> User | None:
        return self.db.get(User, user_id)

    def get_by_username(self, username: str) -> User | None:
        return self.db.query(User).filter(User.username == username).first()

    def get_by_email(self, email: str) -> User | None:
        return self.db.query(User).filter(func.lower(User.email) == email.lower()).first()

    def list_by_role(self, role: Role, enabled: bool | None = None) -> list[User]:
        query = self.db.query(User).filter(User.role == role)
        if enabled is not None:
            query = query.filter(User.enabled.is_(enabled))
        return query.order_by(User.created_at, User.id).all()

    def exists_with_role(self, role: Role) -> bool:
        return self.db.query(User.id).filter(User.role == role).first() is not None

    def save(self, user: User) -> User:
        return self._save(user)

    def delete(self, user: User) -> None:
        self.db.delete(user)
        self._commit()
