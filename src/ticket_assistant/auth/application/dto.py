"""
Auth Application DTOs
======================

Pydantic models for request/response validation.
"""

import re
from datetime import datetime
from typing import List, Literal, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ticket_assistant.auth.domain import normalize_email, normalize_skills

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

UserRoleStr = Literal["user", "moderator", "admin"]


def _validate_email(value: str) -> str:
    email = normalize_email(value)
    if not EMAIL_PATTERN.match(email):
        raise ValueError("Invalid email address")
    return email


# ========== Request DTOs ==========

class SignupRequest(BaseModel):
    """Request model for account creation."""
    email: str = Field(..., description="Login email")
    password: str = Field(..., min_length=1, description="Plain-text password")
    skills: List[str] = Field(default_factory=list, description="Skills, used for ticket assignment")

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        return _validate_email(v)

    @field_validator("password")
    @classmethod
    def validate_password_length(cls, v: str) -> str:
        """bcrypt only reads the first 72 bytes."""
        if len(v.encode("utf-8")) > 72:
            raise ValueError("Password too long (max 72 bytes)")
        return v

    @field_validator("skills")
    @classmethod
    def clean_skills(cls, v: List[str]) -> List[str]:
        return normalize_skills(v)


class LoginRequest(BaseModel):
    """Request model for login."""
    email: str
    password: str = Field(..., min_length=1)

    @field_validator("email")
    @classmethod
    def clean_email(cls, v: str) -> str:
        return normalize_email(v)


class UpdateUserRequest(BaseModel):
    """Admin request to change a user's role and skills."""
    email: str = Field(..., description="Email of the user to update")
    role: Optional[UserRoleStr] = None
    skills: Optional[List[str]] = None

    @field_validator("email")
    @classmethod
    def clean_email(cls, v: str) -> str:
        return normalize_email(v)

    @field_validator("skills")
    @classmethod
    def clean_skills(cls, v: Optional[List[str]]) -> Optional[List[str]]:
        return None if v is None else normalize_skills(v)


# ========== Response DTOs ==========

class UserResponse(BaseModel):
    """User as exposed by the API (never includes the password hash)."""
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    email: str
    role: UserRoleStr
    skills: List[str]
    created_at: datetime


class AuthResponse(BaseModel):
    """Response for signup and login."""
    user: UserResponse
    token: str


class MessageResponse(BaseModel):
    message: str
