"""
Events Domain Entities
======================

Events, job functions and the record of a function run.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Dict, Optional
from uuid import uuid4


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return str(uuid4())


class RunStatus(str):
    """Function run lifecycle."""
    QUEUED = "queued"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass(frozen=True)
class Event:
    """A named payload that triggers job functions."""
    name: str
    data: Dict[str, Any] = field(default_factory=dict)
    id: str = field(default_factory=_new_id)
    created_at: datetime = field(default_factory=_now)


EventHandler = Callable[[Event], Awaitable[Any]]


@dataclass(frozen=True)
class JobFunction:
    """A handler bound to the event that triggers it."""
    id: str
    event: str
    handler: EventHandler
    name: Optional[str] = None


@dataclass
class FunctionRun:
    """One execution of a job function for one event."""
    function_id: str
    event_id: str
    event_name: str
    id: str = field(default_factory=_new_id)
    status: str = RunStatus.QUEUED
    queued_at: datetime = field(default_factory=_now)
    started_at: Optional[datetime] = None
    finished_at: Optional[datetime] = None
    output: Any = None
    error: Optional[str] = None

    def mark_running(self) -> None:
        self.status = RunStatus.RUNNING
        self.started_at = _now()

    def mark_completed(self, output: Any) -> None:
        self.status = RunStatus.COMPLETED
        self.output = output
        self.finished_at = _now()

    def mark_failed(self, error: str) -> None:
        self.status = RunStatus.FAILED
        self.error = error
        self.finished_at = _now()

    @property
    def is_finished(self) -> bool:
        return self.status in (RunStatus.COMPLETED, RunStatus.FAILED)
