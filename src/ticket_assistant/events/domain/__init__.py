"""
Events Domain Layer
===================

Framework-agnostic event and function-run objects.
"""

from ticket_assistant.events.domain.entities import (
    Event,
    EventHandler,
    JobFunction,
    FunctionRun,
    RunStatus,
)

__all__ = [
    "Event",
    "EventHandler",
    "JobFunction",
    "FunctionRun",
    "RunStatus",
]
