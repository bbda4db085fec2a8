# tests/test_scheduler.py
# Job functions run through the APScheduler runner instead of inline.

import asyncio

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from conftest import ScriptedLLMClient, DEFAULT_REPLY, bearer, fenced, login, set_role, signup
from ticket_assistant.config import get_settings
from ticket_assistant.events.infrastructure import APSchedulerJobScheduler


async def wait_for_runs(bus, expected, timeout=5.0):
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while loop.time() < deadline:
        runs = bus.recent_runs()
        if len(runs) >= expected and all(run.is_finished for run in runs):
            return runs
        await asyncio.sleep(0.05)
    raise AssertionError(f"Runs did not finish: {[run.status for run in bus.recent_runs()]}")


@pytest_asyncio.fixture
async def scheduled_app():
    from ticket_assistant.main import app, start_services, stop_services

    llm = ScriptedLLMClient([fenced(DEFAULT_REPLY)])
    await start_services(app, get_settings(), llm_client=llm, use_scheduler=True)
    yield app
    await stop_services(app)


@pytest.mark.asyncio
async def test_ticket_is_triaged_by_the_scheduler(scheduled_app):
    bus = scheduled_app.state.event_bus
    assert scheduled_app.state.scheduler.is_running

    async with AsyncClient(transport=ASGITransport(app=scheduled_app), base_url="http://test") as ac:
        token = (await signup(ac, "queued@example.com"))["token"]
        await signup(ac, "boss@example.com")
        await wait_for_runs(bus, 2)
        await set_role("boss@example.com", "admin")
        admin = await login(ac, "boss@example.com")

        health = (await ac.get("/health")).json()
        assert health["checks"]["scheduler"] == "running"

        resp = await ac.post(
            "/api/tickets",
            json={"title": "Login broken", "description": "Form crashes"},
            headers=bearer(token)
        )
        assert resp.status_code == 201
        ticket_id = resp.json()["ticket"]["id"]

        # two signup welcomes, then the triage
        runs = await wait_for_runs(bus, 3)
        assert {run.status for run in runs} == {"completed"}

        ticket = (await ac.get(f"/api/tickets/{ticket_id}", headers=bearer(admin))).json()

    assert ticket["status"] == "IN_PROGRESS"
    assert ticket["priority"] == "high"
    assert ticket["summary"] == DEFAULT_REPLY["summary"]
    assert ticket["related_skills"] == ["React", "Node.js"]
    assert ticket["assigned_to"]["email"] == "boss@example.com"


def test_submit_before_start_is_rejected():
    scheduler = APSchedulerJobScheduler()

    async def job():
        return None

    with pytest.raises(RuntimeError):
        scheduler.submit("run-1", job)


@pytest.mark.asyncio
async def test_stop_resets_running_state():
    scheduler = APSchedulerJobScheduler()
    scheduler.start()
    assert scheduler.is_running

    scheduler.stop()
    assert not scheduler.is_running
    scheduler.stop()
