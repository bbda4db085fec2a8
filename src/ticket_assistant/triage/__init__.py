"""
Triage Module
=============

Bounded Context for AI ticket enrichment.

Responsibilities:
- Ask the model for a summary, priority, moderator notes and skills
- Fall back to a keyword analysis when the model gives no usable answer
- Assign the ticket to a matching moderator (else an admin)
- Run as job functions on ``ticket/created`` and ``user/signup``
"""

__version__ = "1.0.0"
