"""
Auth Dependencies
==================

FastAPI dependencies resolving the caller from ``Authorization: Bearer <jwt>``.
"""

from typing import Optional

from fastapi import Depends, Request

from ticket_assistant.auth.application import TokenService
from ticket_assistant.auth.domain import CurrentUser
from ticket_assistant.core import AuthenticationException


def get_token_service(request: Request) -> TokenService:
    return request.app.state.token_service


def extract_bearer_token(authorization: Optional[str]) -> Optional[str]:
    """Second space-separated segment of the header, if any."""
    if not isinstance(authorization, str):
        return None
    parts = authorization.split(" ")
    if len(parts) < 2 or not parts[1]:
        return None
    return parts[1]


async def get_current_user(
    request: Request,
    tokens: TokenService = Depends(get_token_service)
) -> CurrentUser:
    """
    Raises:
        AuthenticationException: no token (``Access Denied. No token found.``)
            or a token that fails verification (``Invalid token``)
    """
    token = extract_bearer_token(request.headers.get("authorization"))
    if not token:
        raise AuthenticationException("Access Denied. No token found.")

    user = tokens.verify(token)
    request.state.user = user
    return user
