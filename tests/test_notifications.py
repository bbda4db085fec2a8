# tests/test_notifications.py
# SlackNotifier delivery, retries and the circuit breaker.

import json

import httpx
import pytest

from conftest import bearer, login, signup
from ticket_assistant.events.domain import Event
from ticket_assistant.infrastructure.notifications import (
    CircuitBreaker,
    CircuitState,
    Notification,
    SlackNotifier,
)
from ticket_assistant.triage.application import TriageService
from ticket_assistant.triage.interfaces import TriageFunctions

WEBHOOK = "https://hooks.slack.test/services/T000/B000/XXX"


def make_notifier(handler, **kwargs):
    notifier = SlackNotifier(webhook_url=WEBHOOK, channel="#support", retry_base_delay=0, **kwargs)
    notifier._http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return notifier


def notification(**overrides):
    values = {
        "recipient": "mod@example.com",
        "subject": "Ticket assigned",
        "text": "A new ticket is assigned to you: *Login broken*",
        "fields": {"Priority": "high", "Skills": "React"},
    }
    values.update(overrides)
    return Notification(**values)


class CountingHandler:
    def __init__(self, *statuses):
        self.statuses = list(statuses)
        self.requests = []

    def __call__(self, request):
        self.requests.append(request)
        status = self.statuses[0] if len(self.statuses) == 1 else self.statuses.pop(0)
        return httpx.Response(status, text="ok")


# ── Delivery ─────────────────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_send_posts_block_kit_message():
    handler = CountingHandler(200)
    notifier = make_notifier(handler)

    assert await notifier.send(notification())
    await notifier.close()

    request = handler.requests[0]
    assert str(request.url) == WEBHOOK
    body = json.loads(request.content)
    assert body["channel"] == "#support"
    assert body["text"] == "Ticket assigned"

    header, section, fields, context = body["blocks"]
    assert header["type"] == "header"
    assert header["text"]["text"] == "Ticket assigned"
    assert "Login broken" in section["text"]["text"]
    assert [f["text"] for f in fields["fields"]] == ["*Priority:*\nhigh", "*Skills:*\nReact"]
    assert context["elements"][0]["text"] == "To: mod@example.com"


@pytest.mark.asyncio
async def test_message_without_fields_has_no_field_section():
    handler = CountingHandler(200)
    notifier = make_notifier(handler)

    await notifier.send(notification(fields={}))

    blocks = json.loads(handler.requests[0].content)["blocks"]
    assert [block["type"] for block in blocks] == ["header", "section", "context"]


@pytest.mark.asyncio
async def test_send_without_webhook_is_skipped():
    notifier = SlackNotifier(webhook_url=None)
    assert not notifier.enabled
    assert await notifier.send(notification()) is False


# ── Retries and the circuit breaker ──────────────────────────────────────────

@pytest.mark.asyncio
async def test_send_retries_then_gives_up():
    handler = CountingHandler(500)
    notifier = make_notifier(handler, max_retries=3)

    assert await notifier.send(notification()) is False
    assert len(handler.requests) == 3
    assert notifier._circuit_breaker._failure_count == 1


@pytest.mark.asyncio
async def test_send_succeeds_after_transient_failure():
    handler = CountingHandler(503, 200)
    notifier = make_notifier(handler)

    assert await notifier.send(notification())
    assert len(handler.requests) == 2
    assert notifier._circuit_breaker._failure_count == 0


@pytest.mark.asyncio
async def test_transport_errors_are_retried():
    calls = []

    def handler(request):
        calls.append(request)
        raise httpx.ConnectError("refused", request=request)

    notifier = make_notifier(handler, max_retries=2)
    assert await notifier.send(notification()) is False
    assert len(calls) == 2


@pytest.mark.asyncio
async def test_malformed_webhook_url_returns_false():
    notifier = SlackNotifier(webhook_url="http://exa mple.com/\x00hook", retry_base_delay=0)
    assert await notifier.send(notification()) is False
    await notifier.close()


@pytest.mark.asyncio
async def test_breaker_opens_after_repeated_failures():
    handler = CountingHandler(500)
    notifier = make_notifier(handler, max_retries=1)

    for _ in range(5):
        assert await notifier.send(notification()) is False
    assert notifier._circuit_breaker.state == CircuitState.OPEN
    assert len(handler.requests) == 5

    assert await notifier.send(notification()) is False
    assert len(handler.requests) == 5


@pytest.mark.asyncio
async def test_success_resets_failures():
    handler = CountingHandler(500, 500, 500, 500, 200)
    notifier = make_notifier(handler, max_retries=1)

    for _ in range(4):
        await notifier.send(notification())
    assert notifier._circuit_breaker._failure_count == 4

    assert await notifier.send(notification())
    assert notifier._circuit_breaker._failure_count == 0
    assert notifier._circuit_breaker.state == CircuitState.CLOSED


def test_breaker_half_opens_after_recovery_timeout():
    breaker = CircuitBreaker(failure_threshold=2, recovery_timeout=0)
    breaker.record_failure()
    assert breaker.allow_request()

    breaker.record_failure()
    assert breaker.state == CircuitState.HALF_OPEN
    assert breaker.allow_request()

    breaker.record_success()
    assert breaker.state == CircuitState.CLOSED


def test_breaker_blocks_while_open():
    breaker = CircuitBreaker(failure_threshold=1, recovery_timeout=60)
    breaker.record_failure()
    assert breaker.state == CircuitState.OPEN
    assert not breaker.allow_request()


# ── Jobs survive notification failures ──────────────────────────────────────

@pytest.mark.asyncio
async def test_jobs_succeed_with_malformed_webhook(app, client, admin_token):
    await signup(client, "reporter@example.com")
    token = await login(client, "reporter@example.com")
    resp = await client.post(
        "/api/tickets",
        json={"title": "Login broken", "description": "Form crashes"},
        headers=bearer(token)
    )
    ticket_id = resp.json()["ticket"]["id"]

    notifier = SlackNotifier(webhook_url="http://exa mple.com/\x00hook", retry_base_delay=0)
    functions = TriageFunctions(TriageService(app.state.llm_client), notifier)

    ticket_output = await functions.on_ticket_created(Event(name="ticket/created", data={"ticketId": ticket_id}))
    signup_output = await functions.on_user_signup(Event(name="user/signup", data={"email": "reporter@example.com"}))

    assert ticket_output == {"success": True}
    assert signup_output == {"success": True}
    await notifier.close()
