"""
Shared test fixtures.

Provides: the app wired to an in-memory SQLite database, a scripted LLM
client, an HTTP client and helpers to create users with a given role.

Settings are read at import time, so the environment is set before any
``ticket_assistant`` import.
"""

import json
import os
import tempfile
from typing import List, Optional

os.environ["ENVIRONMENT"] = "test"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["JWT_SECRET"] = "test-secret"
os.environ["LOG_DIR"] = tempfile.mkdtemp(prefix="ticket-assistant-logs-")
os.environ.pop("GEMINI_API_KEY", None)
os.environ.pop("SLACK_WEBHOOK_URL", None)
os.environ.pop("EVENT_SIGNING_KEY", None)

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from ticket_assistant.auth.infrastructure import SQLAlchemyUserRepository
from ticket_assistant.config import get_settings
from ticket_assistant.core import LLMException
from ticket_assistant.infrastructure.database import get_session_context
from ticket_assistant.infrastructure.llm import ChatCompletionResult, ILLMClient


class ScriptedLLMClient(ILLMClient):
    """
    Returns queued replies in order; the last one repeats.

    A queued exception is raised instead of returned.
    """

    def __init__(self, replies: Optional[list] = None):
        self.replies = list(replies or [])
        self.calls: List[List[dict]] = []

    async def chat_completion(self, messages, temperature=0.3, max_tokens=1000, operation="chat_completion"):
        self.calls.append(messages)
        reply = self.replies[0] if len(self.replies) == 1 else self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return ChatCompletionResult(
            content=reply,
            model="scripted-model",
            prompt_tokens=10,
            completion_tokens=10,
            latency_ms=1
        )


def fenced(payload: dict) -> str:
    return f"Here you go:\n```json\n{json.dumps(payload)}\n```"


DEFAULT_REPLY = {
    "summary": "Login page crashes after submit.",
    "priority": "high",
    "helpfulNotes": "Check the React error boundary and the auth API logs.",
    "relatedSkills": ["React", "Node.js"],
}


@pytest.fixture
def llm():
    return ScriptedLLMClient([fenced(DEFAULT_REPLY)])


@pytest.fixture
def failing_llm():
    return ScriptedLLMClient([LLMException("quota exceeded")])


@pytest_asyncio.fixture
async def app(llm):
    from ticket_assistant.main import app as fastapi_app, start_services, stop_services

    await start_services(fastapi_app, get_settings(), llm_client=llm, use_scheduler=False)
    yield fastapi_app
    await stop_services(fastapi_app)


@pytest_asyncio.fixture
async def client(app):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


async def signup(client, email: str, password: str = "secret123", skills: Optional[list] = None) -> dict:
    resp = await client.post("/api/auth/signup", json={
        "email": email,
        "password": password,
        "skills": skills or [],
    })
    assert resp.status_code == 201, resp.text
    return resp.json()


async def set_role(email: str, role: str, skills: Optional[list] = None) -> None:
    """Change a role directly in the database (no admin exists yet)."""
    async with get_session_context() as session:
        users = SQLAlchemyUserRepository(session)
        user = await users.get_by_email(email)
        await users.update(user, role=role, skills=skills)


async def login(client, email: str, password: str = "secret123") -> str:
    resp = await client.post("/api/auth/login", json={"email": email, "password": password})
    assert resp.status_code == 200, resp.text
    return resp.json()["token"]


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest_asyncio.fixture
async def user_token(client):
    return (await signup(client, "user@example.com"))["token"]


@pytest_asyncio.fixture
async def admin_token(client):
    await signup(client, "admin@example.com")
    await set_role("admin@example.com", "admin")
    return await login(client, "admin@example.com")


@pytest_asyncio.fixture
async def moderator_token(client):
    await signup(client, "mod@example.com")
    await set_role("mod@example.com", "moderator", ["react", "css"])
    return await login(client, "mod@example.com")
