"""
Events Interfaces Layer
========================

Contains:
- Controllers: the event webhook
"""

from ticket_assistant.events.interfaces.controllers import events_router
from ticket_assistant.events.interfaces.dependencies import get_event_bus

__all__ = ["events_router", "get_event_bus"]
