"""
Triage Job Functions
=====================

Event handlers run by the event bus.

- ``on-ticket-created``: analyze, annotate and assign a new ticket
- ``on-user-signup``: welcome a new user
"""

from contextlib import AbstractAsyncContextManager
from typing import Any, Callable, Dict, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from ticket_assistant.auth.infrastructure import SQLAlchemyUserRepository
from ticket_assistant.config import EventName, TicketStatus
from ticket_assistant.core import ResourceNotFoundException, ValidationException
from ticket_assistant.events.application import EventBus
from ticket_assistant.events.domain import Event, JobFunction
from ticket_assistant.infrastructure.database import get_session_context
from ticket_assistant.infrastructure.notifications import SlackNotifier
from ticket_assistant.shared.infrastructure.logging import get_logger, log_latency
from ticket_assistant.tickets.infrastructure import SQLAlchemyTicketRepository
from ticket_assistant.triage.application import (
    AssignmentService,
    TriageService,
    assignment_notification,
    welcome_notification,
)

logger = get_logger(__name__)

SessionScope = Callable[[], AbstractAsyncContextManager[AsyncSession]]


class TriageFunctions:
    """
    Background jobs for the triage workflow.

    Each handler opens its own database session; the request that emitted
    the event has already committed.
    """

    TICKET_CREATED_ID = "on-ticket-created"
    USER_SIGNUP_ID = "on-user-signup"

    def __init__(
        self,
        triage_service: TriageService,
        notifier: SlackNotifier,
        session_scope: Optional[SessionScope] = None
    ):
        self._triage = triage_service
        self._notifier = notifier
        self._session_scope = session_scope or get_session_context

    def register(self, bus: EventBus) -> None:
        bus.register(JobFunction(
            id=self.TICKET_CREATED_ID,
            event=EventName.TICKET_CREATED,
            handler=self.on_ticket_created,
            name="On Ticket Created"
        ))
        bus.register(JobFunction(
            id=self.USER_SIGNUP_ID,
            event=EventName.USER_SIGNUP,
            handler=self.on_user_signup,
            name="On User Signup"
        ))

    async def on_ticket_created(self, event: Event) -> Dict[str, Any]:
        """
        Triage one ticket.

        Steps: reset status to TODO, analyze, write the annex and move to
        IN_PROGRESS, assign, notify the assignee.

        Raises:
            ValidationException: Event carries no ticketId
            ResourceNotFoundException: Ticket no longer exists
        """
        ticket_id = event.data.get("ticketId")
        if not ticket_id:
            raise ValidationException("Event is missing ticketId")

        async with self._session_scope() as session:
            tickets = SQLAlchemyTicketRepository(session)
            users = SQLAlchemyUserRepository(session)

            ticket = await tickets.get_by_id(str(ticket_id))
            if not ticket:
                raise ResourceNotFoundException("Ticket", ticket_id)

            await tickets.set_status(ticket, TicketStatus.TODO)
            await tickets.commit()

            with log_latency(logger, "ticket_analysis", ticket_id=str(ticket.id)):
                result = await self._triage.analyze(ticket.title, ticket.description, ticket_id=str(ticket.id))

            await tickets.apply_annex(ticket, result.to_annex())
            await tickets.set_status(ticket, TicketStatus.IN_PROGRESS)
            await tickets.commit()

            assignee = await AssignmentService(users).choose_assignee(result.related_skills)
            await tickets.assign(ticket, str(assignee.id) if assignee else None)
            await tickets.commit()

            logger.info(
                "Ticket triaged",
                extra={
                    "ticket_id": str(ticket.id),
                    "priority": result.priority,
                    "fallback": result.is_fallback,
                    "assigned_to": str(assignee.id) if assignee else None
                }
            )

            notification = assignment_notification(assignee, ticket) if assignee else None

        if notification is not None:
            await self._notifier.send(notification)
        else:
            logger.warning("No moderator or admin to assign", extra={"ticket_id": str(ticket_id)})

        return {"success": True}

    async def on_user_signup(self, event: Event) -> Dict[str, Any]:
        """
        Send the welcome message.

        Raises:
            ValidationException: Event carries no email
            ResourceNotFoundException: No user with that email
        """
        email = event.data.get("email")
        if not email:
            raise ValidationException("Event is missing email")

        async with self._session_scope() as session:
            user = await SQLAlchemyUserRepository(session).get_by_email(email)
            if not user:
                raise ResourceNotFoundException("User", email)
            recipient = user.email

        await self._notifier.send(welcome_notification(recipient))
        return {"success": True}
