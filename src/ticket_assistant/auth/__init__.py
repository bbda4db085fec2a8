"""
Auth Module
===========

Bounded Context for users and authentication.

Responsibilities:
- Sign up and log in users (bcrypt password hashes, JWT bearer tokens)
- Resolve the current user from the Authorization header
- Let admins list users and change their role and skills
- Emit ``user/signup`` for the welcome job
"""

__version__ = "1.0.0"
