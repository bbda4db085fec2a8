"""
Triage Interfaces Layer
========================

Interface adapters for the triage module.

Contains:
- Job functions: event handlers run by the event bus
"""

from ticket_assistant.triage.interfaces.functions import TriageFunctions

__all__ = ["TriageFunctions"]
