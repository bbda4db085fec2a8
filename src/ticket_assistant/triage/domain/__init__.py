"""
Triage Domain Layer
===================

Contains:
- TriageResult: the AI annex produced for a ticket
- TriagePromptBuilder: prompt text
- Reply parsing and the keyword fallback

This layer is framework-agnostic and contains pure business logic.
"""

from ticket_assistant.triage.domain.entities import (
    TriageResult,
    TriageSource,
    TriagePromptBuilder,
    KeywordTriage,
    extract_json_text,
    parse_reply,
    result_from_reply,
)

__all__ = [
    "TriageResult",
    "TriageSource",
    "TriagePromptBuilder",
    "KeywordTriage",
    "extract_json_text",
    "parse_reply",
    "result_from_reply",
]
