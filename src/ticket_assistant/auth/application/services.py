"""
Auth Application Services
==========================

Account creation, login, token verification and admin user management.

Following SOLID principles:
- Single Responsibility: hashing, tokens and account flows are separate
- Dependency Inversion: depend on the repository and publisher interfaces
"""

from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone
from typing import Any, List, Optional

import bcrypt
import jwt

from ticket_assistant.auth.application.dto import (
    AuthResponse, LoginRequest, SignupRequest, UpdateUserRequest, UserResponse
)
from ticket_assistant.auth.domain import CurrentUser
from ticket_assistant.config import EventName, UserRole
from ticket_assistant.core import (
    AuthenticationException,
    AuthorizationException,
    ConflictException,
    ResourceNotFoundException,
)
from ticket_assistant.events.application import IEventPublisher
from ticket_assistant.shared.infrastructure.logging import get_logger

logger = get_logger(__name__)


# ========== Repository Interfaces ==========

class IUserRepository(ABC):
    """Interface for user data access."""

    @abstractmethod
    async def get_by_id(self, user_id: str) -> Optional[Any]:
        """Get user by internal ID."""

    @abstractmethod
    async def get_by_email(self, email: str) -> Optional[Any]:
        """Get user by (normalized) email."""

    @abstractmethod
    async def create(self, email: str, password_hash: str, skills: List[str], role: str) -> Any:
        """Create new user."""

    @abstractmethod
    async def update(self, user: Any, role: Optional[str], skills: Optional[List[str]]) -> Any:
        """Apply role and skills changes."""

    @abstractmethod
    async def list_all(self) -> List[Any]:
        """List every user, oldest first."""

    @abstractmethod
    async def list_by_role(self, role: str) -> List[Any]:
        """List users with the given role, oldest first."""

    @abstractmethod
    async def commit(self) -> None:
        """Make pending changes visible to other sessions."""


# ========== Helpers ==========

class PasswordHasher:
    """bcrypt password hashing."""

    def __init__(self, rounds: int = 10):
        self._rounds = rounds

    def hash(self, password: str) -> str:
        return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(self._rounds)).decode("utf-8")

    def verify(self, password: str, password_hash: str) -> bool:
        try:
            return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
        except ValueError:
            # Stored value is not a bcrypt hash
            return False


class TokenService:
    """
    Issues and verifies HS256 JWTs carrying ``{"_id", "role"}``.
    """

    def __init__(self, secret: str, algorithm: str = "HS256", expire_minutes: Optional[int] = None):
        self._secret = secret
        self._algorithm = algorithm
        self._expire_minutes = expire_minutes

    def issue(self, user_id: str, role: str) -> str:
        now = datetime.now(timezone.utc)
        claims: dict = {"_id": user_id, "role": role, "iat": now}
        if self._expire_minutes:
            claims["exp"] = now + timedelta(minutes=self._expire_minutes)
        return jwt.encode(claims, self._secret, algorithm=self._algorithm)

    def verify(self, token: str) -> CurrentUser:
        """
        Decode a token.

        Raises:
            AuthenticationException: ``Invalid token`` for any verification failure
        """
        try:
            claims = jwt.decode(token, self._secret, algorithms=[self._algorithm])
            return CurrentUser.from_claims(claims)
        except (jwt.InvalidTokenError, KeyError) as e:
            logger.info("Token rejected", extra={"reason": type(e).__name__})
            raise AuthenticationException("Invalid token") from e


# ========== Application Services ==========

class AuthService:
    """
    Service for account flows.

    Coordinates hashing, token issue, persistence and the signup event.
    """

    def __init__(
        self,
        user_repository: IUserRepository,
        hasher: PasswordHasher,
        tokens: TokenService,
        events: IEventPublisher
    ):
        self._users = user_repository
        self._hasher = hasher
        self._tokens = tokens
        self._events = events

    def _auth_response(self, user: Any) -> AuthResponse:
        return AuthResponse(
            user=UserResponse.model_validate(user),
            token=self._tokens.issue(str(user.id), user.role)
        )

    async def signup(self, request: SignupRequest) -> AuthResponse:
        """
        Create an account and emit ``user/signup``.

        Raises:
            ConflictException: If the email is already registered
        """
        if await self._users.get_by_email(request.email):
            raise ConflictException("User already exists")

        user = await self._users.create(
            email=request.email,
            password_hash=self._hasher.hash(request.password),
            skills=request.skills,
            role=UserRole.USER
        )
        await self._users.commit()

        logger.info("User signed up", extra={"user_id": str(user.id)})

        await self._events.send(EventName.USER_SIGNUP, {"email": user.email})

        return self._auth_response(user)

    async def login(self, request: LoginRequest) -> AuthResponse:
        """
        Raises:
            AuthenticationException: Unknown email or wrong password
        """
        user = await self._users.get_by_email(request.email)
        if not user:
            raise AuthenticationException("User not found")

        if not self._hasher.verify(request.password, user.password):
            raise AuthenticationException("Invalid credentials")

        logger.info("User logged in", extra={"user_id": str(user.id)})
        return self._auth_response(user)

    async def update_user(self, caller: CurrentUser, request: UpdateUserRequest) -> Any:
        """
        Admin-only role/skills update.

        Raises:
            AuthorizationException: Caller is not an admin
            ResourceNotFoundException: No user with that email
        """
        if not caller.is_admin:
            raise AuthorizationException()

        user = await self._users.get_by_email(request.email)
        if not user:
            raise ResourceNotFoundException("User", request.email)

        updated = await self._users.update(user, role=request.role, skills=request.skills)
        await self._users.commit()

        logger.info(
            "User updated",
            extra={"user_id": str(user.id), "role": updated.role, "updated_by": caller.id}
        )
        return updated

    async def list_users(self, caller: CurrentUser) -> List[Any]:
        """
        Raises:
            AuthorizationException: Caller is not an admin
        """
        if not caller.is_admin:
            raise AuthorizationException()
        return await self._users.list_all()
