"""
Tickets Controllers (API Routes)
=================================

FastAPI routes for ticket intake and reads. Every route requires a bearer token.

Controllers delegate to application services.
"""

from typing import List, Union

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from ticket_assistant.auth.domain import CurrentUser
from ticket_assistant.auth.interfaces import get_current_user
from ticket_assistant.events.interfaces import get_event_bus
from ticket_assistant.infrastructure.database import get_session
from ticket_assistant.shared.infrastructure.logging import get_logger
from ticket_assistant.tickets.application import (
    TicketService,
    CreateTicketRequest,
    CreateTicketResponse,
    TicketDetailResponse,
    TicketSummaryResponse,
)
from ticket_assistant.tickets.infrastructure import SQLAlchemyTicketRepository

logger = get_logger(__name__)
router = APIRouter(prefix="/api/tickets", tags=["Tickets"])


# ========== Example payloads for Swagger ==========

CREATE_TICKET_REQUEST_EXAMPLE = {
    "title": "Login page crashes",
    "description": "The React login form throws after submitting. Backend is Express + MongoDB."
}

TICKET_DETAIL_EXAMPLE = {
    "id": "123e4567-e89b-12d3-a456-426614174000",
    "title": "Login page crashes",
    "description": "The React login form throws after submitting.",
    "status": "IN_PROGRESS",
    "priority": "high",
    "summary": "Login form crashes on submit.",
    "helpful_notes": "Check the auth handler's error path...",
    "related_skills": ["React", "Node.js"],
    "deadline": None,
    "created_by": "0b6f8e9e-3a0e-4c53-9d1a-7f1f6f3f2f11",
    "assigned_to": {"id": "5e1c0c3d-2b7a-4d9a-8c61-0a2f6f0e7d42", "email": "mod@example.com"},
    "created_at": "2024-01-15T10:00:00Z"
}

TicketViewModel = Union[TicketDetailResponse, TicketSummaryResponse]


# ========== Dependencies ==========

def get_ticket_service(
    request: Request,
    session: AsyncSession = Depends(get_session)
) -> TicketService:
    return TicketService(SQLAlchemyTicketRepository(session), get_event_bus(request))


# ========== Route Handlers ==========

@router.post(
    "",
    response_model=CreateTicketResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Submit a ticket",
    description="""
    Stores the ticket and starts AI triage in the background. The annex
    (summary, priority, notes, skills) is empty in this response.
    """,
    responses={
        201: {"content": {"application/json": {"example": {
            "message": "Ticket created and processing started",
            "ticket": {**TICKET_DETAIL_EXAMPLE, "status": "TODO", "priority": None, "summary": None,
                       "helpful_notes": None, "related_skills": [], "assigned_to": None}
        }}}},
        400: {"description": "Title and description are required"},
        401: {"description": "Missing or invalid token"}
    }
)
async def create_ticket(
    payload: CreateTicketRequest,
    user: CurrentUser = Depends(get_current_user),
    service: TicketService = Depends(get_ticket_service)
):
    ticket = await service.create(user, payload)
    return CreateTicketResponse(message="Ticket created and processing started", ticket=ticket)


@router.get(
    "",
    response_model=List[TicketViewModel],
    summary="List tickets",
    description="Users get their own tickets (reduced fields); moderators and admins get all tickets in full."
)
async def list_tickets(
    user: CurrentUser = Depends(get_current_user),
    service: TicketService = Depends(get_ticket_service)
):
    return await service.list_for(user)


@router.get(
    "/{ticket_id}",
    response_model=TicketViewModel,
    summary="Get one ticket",
    responses={
        200: {"content": {"application/json": {"example": TICKET_DETAIL_EXAMPLE}}},
        404: {"description": "Ticket not found"}
    }
)
async def get_ticket(
    ticket_id: str,
    user: CurrentUser = Depends(get_current_user),
    service: TicketService = Depends(get_ticket_service)
):
    return await service.get_for(user, ticket_id)


# Export router for inclusion in main app
tickets_router = router
