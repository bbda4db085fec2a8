"""
Configuration Module
====================

Application settings and configuration management using Pydantic.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, field_validator
from functools import lru_cache
from pathlib import Path
from typing import List, Optional


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Uses Pydantic for validation and type safety.
    """

    # ========== Application ==========
    app_name: str = Field(default="ai-ticket-assistant", description="Application name")
    app_version: str = Field(default="1.0.0", description="Application version")
    environment: str = Field(default="development", description="Environment name")
    debug: bool = Field(default=False, description="Enable debug mode")

    # ========== Server ==========
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=3000, description="Server port", ge=1, le=65535)

    # ========== Database ==========
    database_url: str = Field(
        default="sqlite+aiosqlite:///./tickets.db",
        description="Async SQLAlchemy connection URL (postgresql+asyncpg://... in production)"
    )
    db_pool_size: int = Field(default=5, description="Database connection pool size", ge=1)
    db_max_overflow: int = Field(default=10, description="Max overflow connections", ge=0)

    # ========== Authentication ==========
    jwt_secret: str = Field(default="change-me", description="Secret used to sign JWTs")
    jwt_algorithm: str = Field(default="HS256", description="JWT signing algorithm")
    jwt_expire_minutes: Optional[int] = Field(
        default=None,
        description="Token lifetime in minutes; unset issues non-expiring tokens",
        ge=1
    )

    # ========== LLM (Gemini via OpenAI-compatible API) ==========
    gemini_api_key: Optional[str] = Field(default=None, description="Gemini API key")
    gemini_model: str = Field(default="gemini-1.5-flash-8b", description="Model used for triage")
    llm_base_url: str = Field(
        default="https://generativelanguage.googleapis.com/v1beta/openai/",
        description="OpenAI-compatible endpoint of the model provider"
    )
    llm_temperature: float = Field(default=0.3, ge=0.0, le=1.0)
    llm_max_tokens: int = Field(default=1000, ge=1, le=8000)
    mock_llm: bool = Field(
        default=False,
        description="Use mock LLM responses for testing (no API calls)"
    )

    # ========== Slack Notifications ==========
    slack_webhook_url: Optional[str] = Field(
        default=None,
        description="Slack webhook URL for moderator notifications"
    )
    slack_channel: str = Field(default="#support-tickets", description="Slack channel")
    slack_timeout_seconds: float = Field(default=5.0, ge=0.1, le=30)

    # ========== Event Bus ==========
    event_signing_key: Optional[str] = Field(
        default=None,
        description="HMAC key required on POST /api/events when set"
    )
    job_history_size: int = Field(default=200, description="Function runs kept in memory", ge=1)

    # ========== Logging ==========
    log_level: str = Field(default="INFO", description="Root log level")
    log_dir: Path = Field(default=Path("logs"), description="Directory for the log file")
    log_file: str = Field(default="backend.log", description="Log file name")

    # ========== CORS ==========
    cors_origins: List[str] = Field(
        default=["http://localhost:5173", "http://localhost:3000"],
        description="Allowed CORS origins"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Ensure environment is one of allowed values."""
        allowed = {"development", "staging", "production", "test"}
        if v not in allowed:
            raise ValueError(f"environment must be one of {allowed}")
        return v

    @property
    def log_path(self) -> Path:
        return self.log_dir / self.log_file


@lru_cache()
def get_settings() -> Settings:
    """Returns cached Settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()


# ========== Constants ==========

class UserRole(str):
    """User roles."""
    USER = "user"
    MODERATOR = "moderator"
    ADMIN = "admin"


class TicketStatus(str):
    """Ticket lifecycle statuses."""
    TODO = "TODO"
    IN_PROGRESS = "IN_PROGRESS"
    DONE = "DONE"


class Priority(str):
    """Ticket priority levels assigned by triage."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class EventName(str):
    """Events emitted to the job framework."""
    TICKET_CREATED = "ticket/created"
    USER_SIGNUP = "user/signup"


# ========== Lists for validation ==========

VALID_PRIORITIES = [Priority.LOW, Priority.MEDIUM, Priority.HIGH]
STAFF_ROLES = [UserRole.MODERATOR, UserRole.ADMIN]
