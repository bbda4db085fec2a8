"""Shared API helpers (middleware, exception handlers)."""
