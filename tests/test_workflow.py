# tests/test_workflow.py
# The on-ticket-created and on-user-signup job functions end to end.

import pytest

from conftest import ScriptedLLMClient, bearer, fenced, login, set_role, signup
from ticket_assistant.events.domain import Event
from ticket_assistant.infrastructure.notifications import SlackNotifier
from ticket_assistant.triage.application import TriageService
from ticket_assistant.triage.interfaces import TriageFunctions


class RecordingNotifier(SlackNotifier):
    def __init__(self):
        super().__init__(webhook_url=None)
        self.sent = []

    async def send(self, notification):
        self.sent.append(notification)
        return True


async def submit(client, token, title, description):
    resp = await client.post(
        "/api/tickets",
        json={"title": title, "description": description},
        headers=bearer(token)
    )
    assert resp.status_code == 201, resp.text
    return resp.json()["ticket"]["id"]


async def fetch(client, token, ticket_id):
    resp = await client.get(f"/api/tickets/{ticket_id}", headers=bearer(token))
    assert resp.status_code == 200, resp.text
    return resp.json()


@pytest.mark.asyncio
async def test_ticket_assigned_to_matching_moderator(client, user_token, admin_token):
    await signup(client, "dba@example.com")
    await set_role("dba@example.com", "moderator", ["PostgreSQL"])
    await signup(client, "fe@example.com")
    await set_role("fe@example.com", "moderator", ["reactjs", "CSS"])

    ticket_id = await submit(client, user_token, "Login broken", "Form crashes")
    ticket = await fetch(client, admin_token, ticket_id)

    assert ticket["status"] == "IN_PROGRESS"
    assert ticket["assigned_to"]["email"] == "fe@example.com"


@pytest.mark.asyncio
async def test_first_matching_moderator_wins(client, user_token, admin_token):
    await signup(client, "first@example.com")
    await set_role("first@example.com", "moderator", ["node.js"])
    await signup(client, "second@example.com")
    await set_role("second@example.com", "moderator", ["React"])

    ticket_id = await submit(client, user_token, "Login broken", "Form crashes")
    ticket = await fetch(client, admin_token, ticket_id)

    assert ticket["assigned_to"]["email"] == "first@example.com"


@pytest.mark.asyncio
async def test_falls_back_to_admin_without_matching_moderator(client, user_token, admin_token):
    await signup(client, "ops@example.com")
    await set_role("ops@example.com", "moderator", ["Kubernetes"])

    ticket_id = await submit(client, user_token, "Login broken", "Form crashes")
    ticket = await fetch(client, admin_token, ticket_id)

    assert ticket["assigned_to"]["email"] == "admin@example.com"


@pytest.mark.asyncio
async def test_unassigned_when_no_staff(app, client, user_token):
    ticket_id = await submit(client, user_token, "Login broken", "Form crashes")

    run = app.state.event_bus.recent_runs()[0]
    assert run.function_id == "on-ticket-created"
    assert run.status == "completed"

    await set_role("user@example.com", "moderator", [])
    staff_token = await login(client, "user@example.com")
    ticket = await fetch(client, staff_token, ticket_id)
    assert ticket["assigned_to"] is None
    assert ticket["summary"] == "Login page crashes after submit."


@pytest.mark.asyncio
@pytest.mark.parametrize("llm", [ScriptedLLMClient(["no json here"])])
async def test_model_failure_uses_keyword_fallback(client, user_token, admin_token, llm):
    ticket_id = await submit(client, user_token, "Docker build fails", "The k8s pipeline cannot pull the image")
    ticket = await fetch(client, admin_token, ticket_id)

    assert ticket["summary"] == "Docker build fails"
    assert ticket["priority"] == "medium"
    assert ticket["helpful_notes"] == "Fallback analysis: The k8s pipeline cannot pull the image"
    assert ticket["related_skills"] == ["Docker"]
    assert ticket["status"] == "IN_PROGRESS"


@pytest.mark.asyncio
@pytest.mark.parametrize("llm", [ScriptedLLMClient([fenced({
    "summary": "Odd reply", "priority": "critical", "helpfulNotes": "n", "relatedSkills": "SQL"
})])])
async def test_reply_normalised_before_storing(client, user_token, admin_token, llm):
    ticket_id = await submit(client, user_token, "Report", "Numbers look off")
    ticket = await fetch(client, admin_token, ticket_id)

    assert ticket["priority"] == "medium"
    assert ticket["related_skills"] == []
    assert ticket["assigned_to"]["email"] == "admin@example.com"


@pytest.mark.asyncio
async def test_assignee_is_notified(app, client, user_token, moderator_token):
    ticket_id = await submit(client, user_token, "Login broken", "Form crashes")

    notifier = RecordingNotifier()
    functions = TriageFunctions(TriageService(app.state.llm_client), notifier)
    output = await functions.on_ticket_created(Event(name="ticket/created", data={"ticketId": ticket_id}))

    assert output == {"success": True}
    assert len(notifier.sent) == 1
    message = notifier.sent[0]
    assert message.recipient == "mod@example.com"
    assert message.subject == "Ticket assigned"
    assert "Login broken" in message.text
    assert message.fields["Priority"] == "high"


@pytest.mark.asyncio
async def test_missing_ticket_fails_the_run(app):
    run = (await app.state.event_bus.dispatch(Event(
        name="ticket/created",
        data={"ticketId": "00000000-0000-0000-0000-000000000000"}
    )))[0]

    assert run.status == "failed"
    assert "Ticket not found" in run.error


@pytest.mark.asyncio
async def test_signup_job_sends_welcome(app, client):
    await signup(client, "new@example.com")

    notifier = RecordingNotifier()
    functions = TriageFunctions(TriageService(None), notifier)
    output = await functions.on_user_signup(Event(name="user/signup", data={"email": "new@example.com"}))

    assert output == {"success": True}
    assert notifier.sent[0].recipient == "new@example.com"
    assert notifier.sent[0].subject == "Welcome to the app"


@pytest.mark.asyncio
async def test_signup_job_fails_for_unknown_user(app):
    run = (await app.state.event_bus.dispatch(Event(name="user/signup", data={"email": "ghost@example.com"})))[0]
    assert run.status == "failed"
    assert "User not found" in run.error
