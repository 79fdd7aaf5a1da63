import logging
from datetime import datetime
from typing import Callable

from venue_booking.domain.enums import Role, TicketStatus
from venue_booking.domain.errors import NotFoundError, PermissionDeniedError, ValidationError
from venue_booking.models import SupportTicket, User
from venue_booking.pagination import Page, PageRequest
from venue_booking.services.base import parse_status
from venue_booking.stores.interfaces import TicketStore

logger = logging.getLogger(__name__)


class TicketService:
    """Support tickets filed by customers and resolved by staff."""

    def __init__(self, store: TicketStore, clock: Callable[[], datetime] = datetime.now) -> None:
        self._store = store
        self._clock = clock

    def create_ticket(self, customer: User, issue_type: str, description: str) -> SupportTicket:
        logger.info("Creating support ticket for user: %s", customer.username)
        ticket = SupportTicket(
            customer_id=customer.id,
            issue_type=issue_type.strip(),
            description=description.strip(),
            status=TicketStatus.OPEN,
            created_at=self._clock(),
        )
        ticket = self._store.save(ticket)
        logger.info("Support ticket created with ID: %s", ticket.id)
        return ticket

    def get_ticket(self, ticket_id: int) -> SupportTicket:
        ticket = self._store.get(ticket_id)
        if ticket is None:
            logger.error("Support ticket not found with ID: %s", ticket_id)
            raise NotFoundError("Support ticket", ticket_id)
        return ticket

    def check_can_resolve(self, ticket: SupportTicket, resolver: User) -> None:
        """Tickets filed by event managers are for admins only.

        Raises:
            PermissionDeniedError: If ``resolver`` may not resolve ``ticket``.
            ValidationError: If the ticket is already resolved.
        """
        if not resolver.role.is_staff:
            raise PermissionDeniedError("Only staff can resolve tickets")
        if ticket.customer.role == Role.EVENT_MANAGER and resolver.role != Role.ADMIN:
            logger.warning("Unauthorized attempt to resolve ticket %s by %s", ticket.id, resolver.username)
            raise PermissionDeniedError("You are not authorized to resolve tickets created by managers.")
        if ticket.status == TicketStatus.RESOLVED:
            raise ValidationError("This ticket is already resolved.")

    def resolve_ticket(self, ticket_id: int, resolution_notes: str | None, resolver: User) -> SupportTicket:
        logger.info("Resolving support ticket %s by %s", ticket_id, resolver.username)
        ticket = self.get_ticket(ticket_id)
        self.check_can_resolve(ticket, resolver)
        if not resolution_notes or not resolution_notes.strip():
            logger.warning("Resolution notes are empty for ticket ID: %s", ticket_id)
            raise ValidationError("Resolution notes are required.")
        ticket.status = TicketStatus.RESOLVED
        ticket.resolved_at = self._clock()
        ticket.resolution_notes = resolution_notes.strip()
        ticket = self._store.save(ticket)
        logger.info("Support ticket %s resolved", ticket_id)
        return ticket

    def list_tickets(
        self,
        request: PageRequest,
        status: str | None = None,
        search: str | None = None,
        owner: User | None = None,
    ) -> Page[SupportTicket]:
        page = self._store.page(
            request,
            status=parse_status(TicketStatus, status),
            search=search,
            owner_id=owner.id if owner else None,
        )
        logger.info("Found %d support tickets (status=%r, search=%r)", page.total, status, search)
        return page

    def count_open(self) -> int:
        return self._store.count_by_status(TicketStatus.OPEN)
