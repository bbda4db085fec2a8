"""
Auth Application Layer
=======================

Contains:
- Services: account flows, password hashing, JWT handling
- DTOs: request/response models
"""

from ticket_assistant.auth.application.dto import (
    SignupRequest,
    LoginRequest,
    UpdateUserRequest,
    UserResponse,
    AuthResponse,
    MessageResponse,
)
from ticket_assistant.auth.application.services import (
    AuthService,
    PasswordHasher,
    TokenService,
    IUserRepository,
)

__all__ = [
    # DTOs
    "SignupRequest",
    "LoginRequest",
    "UpdateUserRequest",
    "UserResponse",
    "AuthResponse",
    "MessageResponse",
    # Services
    "AuthService",
    "PasswordHasher",
    "TokenService",
    # Repository Interfaces
    "IUserRepository",
]
