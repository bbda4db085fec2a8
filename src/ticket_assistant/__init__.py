"""
AI Ticket Assistant
===================

Support-ticket intake API with background AI triage.
"""

__version__ = "1.0.0"
