"""
Tickets Infrastructure Layer
=============================

Contains:
- Models: SQLAlchemy ORM models
- Repositories: Data access implementations
"""

from ticket_assistant.tickets.infrastructure.models import TicketModel
from ticket_assistant.tickets.infrastructure.repositories import SQLAlchemyTicketRepository

__all__ = [
    "TicketModel",
    "SQLAlchemyTicketRepository",
]
