"""
Events Dependencies
====================
"""

from fastapi import Request

from ticket_assistant.events.application import EventBus


def get_event_bus(request: Request) -> EventBus:
    """Event bus created at startup."""
    return request.app.state.event_bus
