"""
Tickets Module
==============

Bounded Context for support tickets.

Responsibilities:
- Accept tickets from authenticated users and emit ``ticket/created``
- Serve tickets scoped by role: users see their own, staff see all
- Persist the AI annex written by the triage job
"""

__version__ = "1.0.0"
