"""
Infrastructure Layer
=====================

Technical adapters shared by all modules:
- database: async SQLAlchemy engine and sessions
- llm: chat completion client for the hosted model
- notifications: Slack webhook notifier
"""
