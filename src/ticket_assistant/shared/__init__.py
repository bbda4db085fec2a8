"""
Shared Kernel Module
====================

This module contains shared infrastructure used across all bounded contexts
(auth, tickets, triage, events).

Architecture Pattern: Modular Monolith
- Each module is a bounded context
- Shared kernel contains only generic infrastructure

DO NOT add business logic from tickets or triage to shared kernel.
"""

__version__ = "1.0.0"
