"""
Auth Infrastructure Layer
==========================

Contains:
- Models: SQLAlchemy ORM models
- Repositories: Data access implementations
"""

from ticket_assistant.auth.infrastructure.models import UserModel
from ticket_assistant.auth.infrastructure.repositories import SQLAlchemyUserRepository

__all__ = [
    "UserModel",
    "SQLAlchemyUserRepository",
]
