"""
Tickets Infrastructure Repositories
====================================

SQLAlchemy implementation of the ticket repository.
"""

from datetime import datetime, timezone
from typing import List, Optional
from uuid import UUID, uuid4

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ticket_assistant.config import TicketStatus
from ticket_assistant.core import RepositoryException
from ticket_assistant.tickets.application import ITicketRepository
from ticket_assistant.tickets.domain import TicketAnnex
from ticket_assistant.tickets.infrastructure.models import TicketModel


def _as_uuid(value: str) -> Optional[UUID]:
    try:
        return UUID(str(value))
    except ValueError:
        return None


class SQLAlchemyTicketRepository(ITicketRepository):
    """SQLAlchemy implementation for tickets."""

    def __init__(self, session: AsyncSession):
        self._session = session

    async def get_by_id(self, ticket_id: str) -> Optional[TicketModel]:
        ticket_uuid = _as_uuid(ticket_id)
        if ticket_uuid is None:
            return None
        return await self._session.get(TicketModel, ticket_uuid)

    async def create(
        self,
        title: str,
        description: str,
        created_by: str,
        deadline: Optional[datetime] = None
    ) -> TicketModel:
        creator = _as_uuid(created_by)
        if creator is None:
            raise RepositoryException(f"Invalid user ID: {created_by}")

        model = TicketModel(
            id=uuid4(),
            title=title,
            description=description,
            status=TicketStatus.TODO,
            deadline=deadline,
            created_by=creator,
            assigned_to_id=None,
            assigned_to=None,
            summary=None,
            priority=None,
            helpful_notes=None,
            related_skills=[],
            created_at=datetime.now(timezone.utc)
        )

        self._session.add(model)
        await self._session.flush()

        return model

    async def list_all(self) -> List[TicketModel]:
        stmt = select(TicketModel).order_by(TicketModel.created_at.desc())
        result = await self._session.execute(stmt)
        return list(result.scalars().all())

    async def list_by_creator(self, user_id: str) -> List[TicketModel]:
        creator = _as_uuid(user_id)
        if creator is None:
            return []

        stmt = (
            select(TicketModel)
            .where(TicketModel.created_by == creator)
            .order_by(TicketModel.created_at.desc())
        )
        result = await self._session.execute(stmt)
        return list(result.scalars().all())

    async def set_status(self, ticket: TicketModel, status: str) -> TicketModel:
        ticket.status = status
        await self._session.flush()
        return ticket

    async def apply_annex(self, ticket: TicketModel, annex: TicketAnnex) -> TicketModel:
        ticket.summary = annex.summary
        ticket.priority = annex.priority
        ticket.helpful_notes = annex.helpful_notes
        ticket.related_skills = list(annex.related_skills)
        await self._session.flush()
        return ticket

    async def assign(self, ticket: TicketModel, user_id: Optional[str]) -> TicketModel:
        ticket.assigned_to_id = _as_uuid(user_id) if user_id else None
        await self._session.flush()
        # Reload the assignee relationship for the new FK value
        await self._session.refresh(ticket, attribute_names=["assigned_to"])
        return ticket

    async def commit(self) -> None:
        await self._session.commit()
