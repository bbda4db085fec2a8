"""
Triage Application Layer
=========================

Contains:
- TriageService: model call with keyword fallback
- AssignmentService: moderator/admin selection
- Notification builders
"""

from ticket_assistant.triage.application.services import (
    TriageService,
    AssignmentService,
    assignment_notification,
    welcome_notification,
)

__all__ = [
    "TriageService",
    "AssignmentService",
    "assignment_notification",
    "welcome_notification",
]
