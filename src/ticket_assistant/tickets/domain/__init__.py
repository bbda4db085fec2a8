"""
Tickets Domain Layer
====================
"""

from ticket_assistant.tickets.domain.entities import (
    TicketAnnex,
    TicketVisibility,
    normalize_priority,
)

__all__ = [
    "TicketAnnex",
    "TicketVisibility",
    "normalize_priority",
]
