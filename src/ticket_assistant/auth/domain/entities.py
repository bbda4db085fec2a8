"""
Auth Domain Entities
====================

Pure Python objects for the authenticated principal and skill matching.
"""

import re
from dataclasses import dataclass
from typing import Iterable, List, Optional, Pattern

from ticket_assistant.config import UserRole, STAFF_ROLES


def normalize_email(email: str) -> str:
    return email.strip().lower()


def normalize_skills(skills: Optional[Iterable[object]]) -> List[str]:
    """Keep non-empty string skills, trimmed, in their original order without duplicates."""
    result: List[str] = []
    for skill in skills or []:
        if not isinstance(skill, str):
            continue
        cleaned = skill.strip()
        if cleaned and cleaned not in result:
            result.append(cleaned)
    return result


@dataclass(frozen=True)
class CurrentUser:
    """
    The caller resolved from a verified JWT.

    Claims follow the token layout ``{"_id": ..., "role": ...}``.
    """
    id: str
    role: str

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    @property
    def is_staff(self) -> bool:
        """Moderators and admins see every ticket."""
        return self.role in STAFF_ROLES

    @classmethod
    def from_claims(cls, claims: dict) -> "CurrentUser":
        return cls(id=str(claims["_id"]), role=str(claims.get("role", UserRole.USER)))


class SkillMatcher:
    """
    Case-insensitive match between a moderator's skills and the skills a
    ticket needs. Each needed skill is a literal substring pattern.
    """

    def __init__(self, related_skills: Iterable[str]):
        skills = normalize_skills(related_skills)
        self._pattern: Optional[Pattern[str]] = (
            re.compile("|".join(re.escape(s) for s in skills), re.IGNORECASE)
            if skills else None
        )

    @property
    def is_empty(self) -> bool:
        return self._pattern is None

    def matches(self, skills: Iterable[str]) -> bool:
        if self._pattern is None:
            return False
        return any(self._pattern.search(skill) for skill in skills if isinstance(skill, str))
