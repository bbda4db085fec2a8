"""
Job Scheduler
=============

Wrapper around APScheduler's ``AsyncIOScheduler`` that runs submitted
coroutines once, on the application's event loop.
"""

from typing import Any, Awaitable, Callable, Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler

from ticket_assistant.events.application import IJobScheduler
from ticket_assistant.shared.infrastructure.logging import get_logger

logger = get_logger(__name__)


class APSchedulerJobScheduler(IJobScheduler):
    """
    Manages the lifecycle of the scheduler and its one-shot jobs.
    """

    def __init__(self):
        self._scheduler: Optional[AsyncIOScheduler] = None
        self._running = False

    def start(self) -> None:
        """Start the scheduler. Must be called from a running event loop."""
        if self._running:
            logger.warning("Job scheduler already running")
            return

        self._scheduler = AsyncIOScheduler()
        self._scheduler.start()
        self._running = True

        logger.info("Job scheduler started")

    def stop(self) -> None:
        """Stop the scheduler without waiting for queued jobs."""
        if not self._running:
            return

        if self._scheduler:
            self._scheduler.shutdown(wait=False)

        self._scheduler = None
        self._running = False
        logger.info("Job scheduler stopped")

    def submit(self, job_id: str, func: Callable[..., Awaitable[Any]], *args: Any) -> None:
        if not self._running or self._scheduler is None:
            raise RuntimeError("Job scheduler not started. Call start() first.")

        # A date trigger without run_date fires once, immediately
        self._scheduler.add_job(
            func,
            "date",
            args=list(args),
            id=job_id,
            misfire_grace_time=None,
            replace_existing=False
        )

    @property
    def is_running(self) -> bool:
        return self._running
