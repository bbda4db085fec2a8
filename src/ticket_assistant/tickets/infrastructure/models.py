"""
Tickets Infrastructure Models
==============================

SQLAlchemy ORM models for the tickets module.
"""

from datetime import datetime, timezone
from typing import List, Optional
from uuid import UUID, uuid4

from sqlalchemy import JSON, String, DateTime, Text, Uuid, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ticket_assistant.infrastructure.database import Base
from ticket_assistant.auth.infrastructure.models import UserModel
from ticket_assistant.config import TicketStatus


class TicketModel(Base):
    """
    Database model for tickets.

    Maps to the 'tickets' table. The annex columns (summary, priority,
    helpful_notes, related_skills) stay empty until triage writes them.
    """
    __tablename__ = "tickets"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)

    # Ticket content
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[str] = mapped_column(String(50), nullable=False, default=TicketStatus.TODO, index=True)
    deadline: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    # Ownership
    created_by: Mapped[UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    assigned_to_id: Mapped[Optional[UUID]] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        index=True
    )
    assigned_to: Mapped[Optional[UserModel]] = relationship(
        UserModel,
        foreign_keys=[assigned_to_id],
        lazy="selectin"
    )

    # AI annex
    summary: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    priority: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    helpful_notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    related_skills: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        index=True
    )
