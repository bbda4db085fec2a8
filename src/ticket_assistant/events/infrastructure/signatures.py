"""
Event Signature Verification
=============================

Verifies that posted events were signed with the shared signing key.

Header: ``X-Event-Signature`` = hex HMAC-SHA256 of the raw request body.
"""

import hmac
import hashlib
from typing import Optional

from ticket_assistant.shared.infrastructure.logging import get_logger

logger = get_logger(__name__)

SIGNATURE_HEADER = "X-Event-Signature"


def sign_body(body: bytes, secret: str) -> str:
    return hmac.new(secret.encode("utf-8"), body, hashlib.sha256).hexdigest()


def verify_signature(body: bytes, signature: Optional[str], secret: str) -> bool:
    """
    Returns:
        True if ``signature`` matches the body, False otherwise
    """
    if not signature:
        logger.warning("event_signature_missing")
        return False

    expected = sign_body(body, secret)

    # compare_digest avoids timing attacks
    is_valid = hmac.compare_digest(signature.strip().lower(), expected)
    if not is_valid:
        logger.warning("event_signature_mismatch", extra={"provided": signature[:16]})

    return is_valid
