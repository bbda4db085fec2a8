"""
Tickets Application Services
=============================

Ticket creation and role-scoped reads.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, List, Optional, Union

from ticket_assistant.auth.domain import CurrentUser
from ticket_assistant.config import EventName
from ticket_assistant.core import ResourceNotFoundException, ValidationException
from ticket_assistant.events.application import IEventPublisher
from ticket_assistant.shared.infrastructure.logging import get_logger
from ticket_assistant.tickets.application.dto import (
    CreateTicketRequest,
    TicketDetailResponse,
    TicketSummaryResponse,
)
from ticket_assistant.tickets.domain import TicketAnnex, TicketVisibility

logger = get_logger(__name__)

TicketView = Union[TicketDetailResponse, TicketSummaryResponse]


# ========== Repository Interfaces ==========

class ITicketRepository(ABC):
    """Interface for ticket data access."""

    @abstractmethod
    async def get_by_id(self, ticket_id: str) -> Optional[Any]:
        """Get ticket by ID; None for unknown or malformed IDs."""

    @abstractmethod
    async def create(
        self,
        title: str,
        description: str,
        created_by: str,
        deadline: Optional[datetime] = None
    ) -> Any:
        """Create new ticket with status TODO and an empty annex."""

    @abstractmethod
    async def list_all(self) -> List[Any]:
        """Every ticket, newest first."""

    @abstractmethod
    async def list_by_creator(self, user_id: str) -> List[Any]:
        """Tickets created by a user, newest first."""

    @abstractmethod
    async def set_status(self, ticket: Any, status: str) -> Any:
        """Change the status."""

    @abstractmethod
    async def apply_annex(self, ticket: Any, annex: TicketAnnex) -> Any:
        """Write the AI annex."""

    @abstractmethod
    async def assign(self, ticket: Any, user_id: Optional[str]) -> Any:
        """Set or clear the assignee."""

    @abstractmethod
    async def commit(self) -> None:
        """Make pending changes visible to other sessions."""


# ========== Application Services ==========

class TicketService:
    """
    Service for ticket intake and reads.
    """

    def __init__(self, ticket_repository: ITicketRepository, events: IEventPublisher):
        self._tickets = ticket_repository
        self._events = events

    @staticmethod
    def _view(caller: CurrentUser, ticket: Any) -> TicketView:
        if TicketVisibility.full_view(caller):
            return TicketDetailResponse.model_validate(ticket)
        return TicketSummaryResponse.model_validate(ticket)

    async def create(self, caller: CurrentUser, request: CreateTicketRequest) -> TicketDetailResponse:
        """
        Store the ticket and emit ``ticket/created`` for triage.

        Raises:
            ValidationException: Title or description missing or blank
        """
        title = (request.title or "").strip()
        description = (request.description or "").strip()
        if not title or not description:
            raise ValidationException("Title and description are required")

        ticket = await self._tickets.create(
            title=title,
            description=description,
            created_by=caller.id,
            deadline=request.deadline
        )
        await self._tickets.commit()

        # Snapshot before triage may touch the row
        created = TicketDetailResponse.model_validate(ticket)

        logger.info("Ticket created", extra={"ticket_id": str(ticket.id), "created_by": caller.id})

        await self._events.send(EventName.TICKET_CREATED, {
            "ticketId": str(ticket.id),
            "title": ticket.title,
            "description": ticket.description,
            "createdBy": caller.id
        })

        return created

    async def list_for(self, caller: CurrentUser) -> List[TicketView]:
        if TicketVisibility.full_view(caller):
            tickets = await self._tickets.list_all()
        else:
            tickets = await self._tickets.list_by_creator(caller.id)
        return [self._view(caller, t) for t in tickets]

    async def get_for(self, caller: CurrentUser, ticket_id: str) -> TicketView:
        """
        Raises:
            ResourceNotFoundException: Unknown ID, or a ticket the caller may not see
        """
        ticket = await self._tickets.get_by_id(ticket_id)
        if ticket is None or not TicketVisibility.can_view(caller, ticket.created_by):
            raise ResourceNotFoundException("Ticket", ticket_id)
        return self._view(caller, ticket)
