"""
Auth Infrastructure Repositories
=================================

SQLAlchemy implementation of the user repository.
"""

from typing import List, Optional
from uuid import UUID, uuid4

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ticket_assistant.auth.application import IUserRepository
from ticket_assistant.auth.infrastructure.models import UserModel


class SQLAlchemyUserRepository(IUserRepository):
    """SQLAlchemy implementation for users."""

    def __init__(self, session: AsyncSession):
        self._session = session

    async def get_by_id(self, user_id: str) -> Optional[UserModel]:
        try:
            user_uuid = UUID(str(user_id))
        except ValueError:
            return None

        return await self._session.get(UserModel, user_uuid)

    async def get_by_email(self, email: str) -> Optional[UserModel]:
        stmt = select(UserModel).where(UserModel.email == email)
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def create(self, email: str, password_hash: str, skills: List[str], role: str) -> UserModel:
        model = UserModel(
            id=uuid4(),
            email=email,
            password=password_hash,
            role=role,
            skills=list(skills)
        )

        self._session.add(model)
        await self._session.flush()

        return model

    async def update(
        self,
        user: UserModel,
        role: Optional[str],
        skills: Optional[List[str]]
    ) -> UserModel:
        if role is not None:
            user.role = role
        if skills is not None:
            # Reassign so the JSON column is flagged dirty
            user.skills = list(skills)

        await self._session.flush()
        return user

    async def list_all(self) -> List[UserModel]:
        stmt = select(UserModel).order_by(UserModel.created_at, UserModel.email)
        result = await self._session.execute(stmt)
        return list(result.scalars().all())

    async def list_by_role(self, role: str) -> List[UserModel]:
        stmt = (
            select(UserModel)
            .where(UserModel.role == role)
            .order_by(UserModel.created_at, UserModel.email)
        )
        result = await self._session.execute(stmt)
        return list(result.scalars().all())

    async def commit(self) -> None:
        await self._session.commit()
