"""
Events Module
=============

In-process job framework.

Responsibilities:
- Accept named events (``ticket/created``, ``user/signup``)
- Run every function registered for an event in the background
- Keep a bounded history of function runs
- Expose the webhook endpoint that lists functions and accepts events
"""

__version__ = "1.0.0"
