"""
Events Infrastructure Layer
============================

Contains:
- Scheduler: APScheduler-backed job runner
- Signatures: HMAC verification for posted events
"""

from ticket_assistant.events.infrastructure.scheduler import APSchedulerJobScheduler
from ticket_assistant.events.infrastructure.signatures import (
    SIGNATURE_HEADER,
    sign_body,
    verify_signature,
)

__all__ = [
    "APSchedulerJobScheduler",
    "SIGNATURE_HEADER",
    "sign_body",
    "verify_signature",
]
