"""
Events Application Layer
=========================

Contains:
- Services: the event bus and its scheduler interface
- DTOs: webhook request/response models
"""

from ticket_assistant.events.application.dto import (
    EventRequest,
    FunctionInfo,
    RunInfo,
    EventAcceptedResponse,
    IntrospectionResponse,
)
from ticket_assistant.events.application.services import (
    EventBus,
    IEventPublisher,
    IJobScheduler,
)

__all__ = [
    # DTOs
    "EventRequest",
    "FunctionInfo",
    "RunInfo",
    "EventAcceptedResponse",
    "IntrospectionResponse",
    # Services
    "EventBus",
    "IEventPublisher",
    "IJobScheduler",
]
