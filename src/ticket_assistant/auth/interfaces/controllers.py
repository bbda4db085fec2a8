"""
Auth Controllers (API Routes)
==============================

FastAPI routes for signup, login, logout and admin user management.

Controllers delegate to application services.
"""

from typing import List

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from ticket_assistant.auth.application import (
    AuthService, PasswordHasher,
    SignupRequest, LoginRequest, UpdateUserRequest,
    AuthResponse, UserResponse, MessageResponse
)
from ticket_assistant.auth.domain import CurrentUser
from ticket_assistant.auth.infrastructure import SQLAlchemyUserRepository
from ticket_assistant.auth.interfaces.dependencies import (
    get_current_user, get_token_service
)
from ticket_assistant.events.interfaces.dependencies import get_event_bus
from ticket_assistant.infrastructure.database import get_session
from ticket_assistant.shared.infrastructure.logging import get_logger

logger = get_logger(__name__)
router = APIRouter(prefix="/api/auth", tags=["Auth"])


# ========== Example payloads for Swagger ==========

AUTH_RESPONSE_EXAMPLE = {
    "user": {
        "id": "123e4567-e89b-12d3-a456-426614174000",
        "email": "jane@example.com",
        "role": "user",
        "skills": ["React"],
        "created_at": "2024-01-15T10:00:00Z"
    },
    "token": "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9..."
}


# ========== Dependencies ==========

def get_auth_service(
    request: Request,
    session: AsyncSession = Depends(get_session)
) -> AuthService:
    """Build the auth service for this request."""
    return AuthService(
        SQLAlchemyUserRepository(session),
        request.app.state.password_hasher,
        get_token_service(request),
        get_event_bus(request)
    )


# ========== Route Handlers ==========

@router.post(
    "/signup",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create an account",
    responses={
        201: {"content": {"application/json": {"example": AUTH_RESPONSE_EXAMPLE}}},
        409: {"description": "Email already registered"}
    }
)
async def signup(
    payload: SignupRequest,
    service: AuthService = Depends(get_auth_service)
):
    return await service.signup(payload)


@router.post(
    "/login",
    response_model=AuthResponse,
    summary="Log in with email and password",
    responses={
        200: {"content": {"application/json": {"example": AUTH_RESPONSE_EXAMPLE}}},
        401: {"description": "Unknown user or wrong password"}
    }
)
async def login(
    payload: LoginRequest,
    service: AuthService = Depends(get_auth_service)
):
    return await service.login(payload)


@router.post(
    "/logout",
    response_model=MessageResponse,
    summary="Log out",
    description="Tokens are stateless; the server only checks the token is valid."
)
async def logout(user: CurrentUser = Depends(get_current_user)):
    logger.info("User logged out", extra={"user_id": user.id})
    return MessageResponse(message="Logout successfully")


@router.post(
    "/update-user",
    response_model=MessageResponse,
    summary="Change a user's role and skills (admin)",
    responses={403: {"description": "Caller is not an admin"}, 404: {"description": "User not found"}}
)
async def update_user(
    payload: UpdateUserRequest,
    user: CurrentUser = Depends(get_current_user),
    service: AuthService = Depends(get_auth_service)
):
    await service.update_user(user, payload)
    return MessageResponse(message="User updated successfully")


@router.get(
    "/users",
    response_model=List[UserResponse],
    summary="List users (admin)",
    responses={403: {"description": "Caller is not an admin"}}
)
async def list_users(
    user: CurrentUser = Depends(get_current_user),
    service: AuthService = Depends(get_auth_service)
):
    return await service.list_users(user)


# Export router for inclusion in main app
auth_router = router
