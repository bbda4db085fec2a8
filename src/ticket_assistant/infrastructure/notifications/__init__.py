"""
Notification Infrastructure
============================

Slack webhook notifications for users and moderators:
- Welcome message after signup
- Ticket assignment message for the chosen moderator

Delivery is best-effort: failures are logged and reported as ``False``,
never raised into the calling job.
"""

import asyncio
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import httpx

from ticket_assistant.config import Settings, settings as default_settings
from ticket_assistant.shared.infrastructure.logging import get_logger

logger = get_logger(__name__)


class CircuitState:
    """Circuit breaker states."""
    CLOSED = "closed"
    OPEN = "open"
    HALF_OPEN = "half_open"


class CircuitBreaker:
    """
    Circuit breaker for preventing cascade failures.

    States:
    - CLOSED: Normal operation, requests pass through
    - OPEN: After N failures, reject all requests for M seconds
    - HALF_OPEN: After timeout, allow one test request
    """

    def __init__(
        self,
        failure_threshold: int = 5,
        recovery_timeout: float = 60.0
    ):
        self.failure_threshold = failure_threshold
        self.recovery_timeout = recovery_timeout
        self._state = CircuitState.CLOSED
        self._failure_count = 0
        self._last_failure_time: Optional[float] = None

    @property
    def state(self) -> str:
        """Get current circuit state."""
        if self._state == CircuitState.OPEN and self._last_failure_time is not None:
            if time.monotonic() - self._last_failure_time >= self.recovery_timeout:
                self._state = CircuitState.HALF_OPEN
        return self._state

    def allow_request(self) -> bool:
        return self.state in (CircuitState.CLOSED, CircuitState.HALF_OPEN)

    def record_success(self) -> None:
        self._failure_count = 0
        self._state = CircuitState.CLOSED

    def record_failure(self) -> None:
        self._failure_count += 1
        self._last_failure_time = time.monotonic()

        if self._failure_count >= self.failure_threshold:
            self._state = CircuitState.OPEN
            logger.warning(
                "Circuit breaker opened",
                extra={
                    "failure_count": self._failure_count,
                    "recovery_timeout": self.recovery_timeout
                }
            )


@dataclass
class Notification:
    """A message addressed to one user."""
    recipient: str
    subject: str
    text: str
    fields: Dict[str, str] = field(default_factory=dict)


class SlackNotifier:
    """
    Slack webhook client with circuit breaker and retry logic.
    """

    def __init__(
        self,
        webhook_url: Optional[str] = None,
        channel: Optional[str] = None,
        timeout_seconds: Optional[float] = None,
        max_retries: int = 3,
        retry_base_delay: float = 1.0
    ):
        self._webhook_url = webhook_url
        self._channel = channel or default_settings.slack_channel
        self._timeout = timeout_seconds or default_settings.slack_timeout_seconds
        self._max_retries = max_retries
        self._retry_base_delay = retry_base_delay
        self._circuit_breaker = CircuitBreaker(failure_threshold=5, recovery_timeout=60)
        self._http_client: Optional[httpx.AsyncClient] = None

    @classmethod
    def from_settings(cls, config: Settings) -> "SlackNotifier":
        return cls(
            webhook_url=config.slack_webhook_url,
            channel=config.slack_channel,
            timeout_seconds=config.slack_timeout_seconds
        )

    @property
    def enabled(self) -> bool:
        return bool(self._webhook_url)

    async def _get_client(self) -> httpx.AsyncClient:
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(timeout=self._timeout)
        return self._http_client

    def _build_message(self, notification: Notification) -> Dict[str, Any]:
        """Build Slack Block Kit message."""
        blocks: List[Dict[str, Any]] = [
            {
                "type": "header",
                "text": {"type": "plain_text", "text": notification.subject, "emoji": True}
            },
            {
                "type": "section",
                "text": {"type": "mrkdwn", "text": notification.text}
            }
        ]

        if notification.fields:
            blocks.append({
                "type": "section",
                "fields": [
                    {"type": "mrkdwn", "text": f"*{name}:*\n{value}"}
                    for name, value in notification.fields.items()
                ]
            })

        blocks.append({
            "type": "context",
            "elements": [{"type": "mrkdwn", "text": f"To: {notification.recipient}"}]
        })

        return {"channel": self._channel, "text": notification.subject, "blocks": blocks}

    async def send(self, notification: Notification) -> bool:
        """
        Send a notification to the Slack webhook.

        Returns:
            True if sent successfully, False otherwise
        """
        if not self._webhook_url:
            logger.info(
                "Slack webhook URL not configured, skipping notification",
                extra={"recipient": notification.recipient, "subject": notification.subject}
            )
            return False

        if not self._circuit_breaker.allow_request():
            logger.warning(
                "Circuit breaker open, skipping Slack notification",
                extra={"recipient": notification.recipient}
            )
            return False

        message = self._build_message(notification)

        for attempt in range(self._max_retries):
            try:
                client = await self._get_client()
                response = await client.post(self._webhook_url, json=message)

                if response.status_code == 200:
                    self._circuit_breaker.record_success()
                    logger.info(
                        "Slack notification sent",
                        extra={"recipient": notification.recipient, "subject": notification.subject}
                    )
                    return True

                logger.warning(
                    "Slack webhook returned non-200",
                    extra={"status_code": response.status_code, "attempt": attempt + 1}
                )

            except Exception as e:
                logger.error(
                    "Slack notification failed",
                    extra={
                        "error": str(e),
                        "error_type": type(e).__name__,
                        "attempt": attempt + 1,
                        "recipient": notification.recipient
                    }
                )

            if attempt < self._max_retries - 1:
                await asyncio.sleep(self._retry_base_delay * 2 ** attempt)

        self._circuit_breaker.record_failure()
        return False

    async def close(self) -> None:
        """Close HTTP client."""
        if self._http_client:
            await self._http_client.aclose()
            self._http_client = None
