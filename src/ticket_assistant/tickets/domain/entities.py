"""
Tickets Domain Entities
=======================

Visibility rules and the AI-owned part of a ticket.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from ticket_assistant.auth.domain import CurrentUser
from ticket_assistant.config import Priority, VALID_PRIORITIES


def normalize_priority(value: object) -> str:
    """Anything outside low/medium/high becomes medium."""
    if isinstance(value, str) and value.strip().lower() in VALID_PRIORITIES:
        return value.strip().lower()
    return Priority.MEDIUM


@dataclass
class TicketAnnex:
    """
    Fields written once by triage. Empty until triage completes.
    """
    summary: Optional[str] = None
    priority: Optional[str] = None
    helpful_notes: Optional[str] = None
    related_skills: List[str] = field(default_factory=list)


class TicketVisibility:
    """
    Who may see which ticket, and how much of it.

    Users see only tickets they created, in the reduced projection.
    Moderators and admins see every ticket in full.
    """

    @staticmethod
    def can_view(caller: CurrentUser, created_by: str) -> bool:
        return caller.is_staff or str(created_by) == caller.id

    @staticmethod
    def full_view(caller: CurrentUser) -> bool:
        return caller.is_staff
