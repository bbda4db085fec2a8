"""
Auth Interfaces Layer
======================

Contains:
- Controllers: FastAPI route handlers
- Dependencies: current-user resolution
"""

from ticket_assistant.auth.interfaces.controllers import auth_router
from ticket_assistant.auth.interfaces.dependencies import (
    get_current_user,
    extract_bearer_token,
)

__all__ = ["auth_router", "get_current_user", "extract_bearer_token"]
