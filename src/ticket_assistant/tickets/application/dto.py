"""
Tickets Application DTOs
=========================

Pydantic models for request/response validation.
"""

from datetime import datetime
from typing import List, Literal, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

TicketStatusStr = Literal["TODO", "IN_PROGRESS", "DONE"]
PriorityStr = Literal["low", "medium", "high"]


# ========== Request DTOs ==========

class CreateTicketRequest(BaseModel):
    """
    Request model for ticket creation.

    Title and description are checked by the service so a missing field
    answers 400 ``Title and description are required``.
    """
    title: Optional[str] = Field(None, description="Short title")
    description: Optional[str] = Field(None, description="What went wrong")
    deadline: Optional[datetime] = Field(None, description="Optional due date")


# ========== Response DTOs ==========

class AssigneeInfo(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    email: str


class TicketDetailResponse(BaseModel):
    """Full ticket, as seen by moderators and admins."""
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    title: str
    description: str
    status: TicketStatusStr
    priority: Optional[PriorityStr]
    summary: Optional[str]
    helpful_notes: Optional[str]
    related_skills: List[str]
    deadline: Optional[datetime]
    created_by: UUID
    assigned_to: Optional[AssigneeInfo]
    created_at: datetime


class TicketSummaryResponse(BaseModel):
    """Reduced projection shown to the ticket's author."""
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    title: str
    description: str
    status: TicketStatusStr
    created_at: datetime


class CreateTicketResponse(BaseModel):
    message: str
    ticket: TicketDetailResponse
