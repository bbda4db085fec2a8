"""
Tickets Application Layer
==========================

Contains:
- Services: ticket intake and role-scoped reads
- DTOs: request/response models
"""

from ticket_assistant.tickets.application.dto import (
    CreateTicketRequest,
    CreateTicketResponse,
    TicketDetailResponse,
    TicketSummaryResponse,
    AssigneeInfo,
)
from ticket_assistant.tickets.application.services import (
    TicketService,
    TicketView,
    ITicketRepository,
)

__all__ = [
    # DTOs
    "CreateTicketRequest",
    "CreateTicketResponse",
    "TicketDetailResponse",
    "TicketSummaryResponse",
    "AssigneeInfo",
    # Services
    "TicketService",
    "TicketView",
    # Repository Interfaces
    "ITicketRepository",
]
