"""
Events Controllers (API Routes)
================================

Webhook endpoint of the job framework.

- ``GET /api/events`` lists registered functions and recent runs
- ``POST /api/events`` accepts an event and starts its functions
"""

from fastapi import APIRouter, Depends, Query, Request, status
from pydantic import ValidationError

from ticket_assistant.core import AuthenticationException, ValidationException
from ticket_assistant.events.application import (
    EventBus,
    EventRequest,
    EventAcceptedResponse,
    IntrospectionResponse,
    FunctionInfo,
    RunInfo,
)
from ticket_assistant.events.domain import Event
from ticket_assistant.events.infrastructure import SIGNATURE_HEADER, verify_signature
from ticket_assistant.events.interfaces.dependencies import get_event_bus
from ticket_assistant.shared.infrastructure.logging import get_logger

logger = get_logger(__name__)
router = APIRouter(prefix="/api/events", tags=["Events"])


@router.get(
    "",
    response_model=IntrospectionResponse,
    summary="List registered functions and recent runs"
)
async def introspect(
    limit: int = Query(default=50, ge=1, le=500),
    bus: EventBus = Depends(get_event_bus)
):
    return IntrospectionResponse(
        functions=[FunctionInfo(id=f.id, event=f.event, name=f.name) for f in bus.functions],
        runs=[RunInfo.model_validate(run) for run in bus.recent_runs(limit)]
    )


@router.post(
    "",
    response_model=EventAcceptedResponse,
    status_code=status.HTTP_202_ACCEPTED,
    summary="Send an event",
    description=f"""
    Starts every function registered for the event name. Unknown names are
    accepted with no runs.

    When an event signing key is configured, `{SIGNATURE_HEADER}` must carry the
    hex HMAC-SHA256 of the raw body.
    """,
    responses={401: {"description": "Missing or invalid signature"}}
)
async def send_event(
    request: Request,
    bus: EventBus = Depends(get_event_bus)
):
    body = await request.body()

    signing_key = request.app.state.settings.event_signing_key
    if signing_key and not verify_signature(body, request.headers.get(SIGNATURE_HEADER), signing_key):
        raise AuthenticationException("Invalid signature")

    try:
        payload = EventRequest.model_validate_json(body)
    except ValidationError as e:
        raise ValidationException("Invalid event payload", {"errors": e.errors()}) from e

    event = Event(name=payload.name, data=payload.data)
    runs = await bus.dispatch(event)

    return EventAcceptedResponse(event_id=event.id, run_ids=[run.id for run in runs])


# Export router for inclusion in main app
events_router = router
