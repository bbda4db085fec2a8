"""
Auth Domain Layer
=================

Framework-agnostic user concepts: the authenticated principal and the
skill matching used to pick a moderator.
"""

from ticket_assistant.auth.domain.entities import (
    CurrentUser,
    SkillMatcher,
    normalize_email,
    normalize_skills,
)

__all__ = [
    "CurrentUser",
    "SkillMatcher",
    "normalize_email",
    "normalize_skills",
]
