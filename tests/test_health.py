# tests/test_health.py

import os
import re
from pathlib import Path

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient


@pytest.mark.asyncio
async def test_health_reports_checks(client):
    resp = await client.get("/health")
    assert resp.status_code == 200
    data = resp.json()
    assert data["status"] == "healthy"
    assert data["environment"] == "test"
    assert data["checks"] == {
        "database": "connected",
        "llm_client": "available",
        "scheduler": "inline",
    }


@pytest.mark.asyncio
async def test_root_lists_modules(client):
    resp = await client.get("/")
    assert resp.status_code == 200
    assert set(resp.json()["modules"]) == {"auth", "tickets", "events"}


@pytest.mark.asyncio
async def test_correlation_id_is_echoed(client):
    resp = await client.get("/health", headers={"X-Correlation-ID": "abc-123"})
    assert resp.headers["X-Correlation-ID"] == "abc-123"


@pytest_asyncio.fixture
async def app_without_model():
    from ticket_assistant.config import get_settings
    from ticket_assistant.main import app, start_services, stop_services

    await start_services(app, get_settings(), use_scheduler=False)
    yield app
    await stop_services(app)


@pytest.mark.asyncio
async def test_health_without_model(app_without_model):
    async with AsyncClient(transport=ASGITransport(app=app_without_model), base_url="http://test") as ac:
        resp = await ac.get("/health")
    assert resp.json()["checks"]["llm_client"] == "not_configured"


@pytest.mark.asyncio
async def test_request_line_written_to_log_file(client):
    await client.get("/health?source=log-file-check")

    log_file = Path(os.environ["LOG_DIR"]) / "backend.log"
    content = log_file.read_text(encoding="utf-8")
    pattern = r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\S* \[INFO\] GET /health\?source=log-file-check$"
    assert re.search(pattern, content, re.MULTILINE), content[-500:]
