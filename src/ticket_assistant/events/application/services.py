"""
Events Application Services
============================

The event bus: function registry, dispatch and run history.

A function run is best-effort: it executes once, and a failure is logged and
recorded on the run. Nothing is retried.
"""

from abc import ABC, abstractmethod
from collections import OrderedDict
from typing import Any, Awaitable, Callable, Dict, List, Optional

from ticket_assistant.events.domain import Event, FunctionRun, JobFunction
from ticket_assistant.shared.infrastructure.logging import get_logger

logger = get_logger(__name__)


# ========== Interfaces ==========

class IEventPublisher(ABC):
    """Interface used by other modules to emit events."""

    @abstractmethod
    async def send(self, name: str, data: Optional[Dict[str, Any]] = None) -> Event:
        """Emit an event; registered functions run in the background."""


class IJobScheduler(ABC):
    """Runs coroutine functions outside the caller's flow."""

    @abstractmethod
    def submit(self, job_id: str, func: Callable[..., Awaitable[Any]], *args: Any) -> None:
        """Schedule ``func(*args)`` to run as soon as possible."""


# ========== Application Services ==========

class EventBus(IEventPublisher):
    """
    Registry of job functions and dispatcher of events.

    With a scheduler, runs are handed to it and ``send`` returns immediately.
    Without one, runs execute inline before ``send`` returns.
    """

    def __init__(self, scheduler: Optional[IJobScheduler] = None, history_size: int = 200):
        self._scheduler = scheduler
        self._history_size = history_size
        self._functions: Dict[str, JobFunction] = {}
        self._runs: "OrderedDict[str, FunctionRun]" = OrderedDict()

    # ----- registry -----

    def register(self, function: JobFunction) -> JobFunction:
        if function.id in self._functions:
            raise ValueError(f"Function '{function.id}' is already registered")
        self._functions[function.id] = function
        logger.info("Function registered", extra={"function_id": function.id, "event": function.event})
        return function

    def function(self, function_id: str, event: str, name: Optional[str] = None):
        """Decorator form of :meth:`register`."""
        def decorator(handler):
            self.register(JobFunction(id=function_id, event=event, handler=handler, name=name))
            return handler
        return decorator

    @property
    def functions(self) -> List[JobFunction]:
        return list(self._functions.values())

    def functions_for(self, event_name: str) -> List[JobFunction]:
        return [f for f in self._functions.values() if f.event == event_name]

    # ----- dispatch -----

    async def send(self, name: str, data: Optional[Dict[str, Any]] = None) -> Event:
        event = Event(name=name, data=dict(data or {}))
        await self.dispatch(event)
        return event

    async def dispatch(self, event: Event) -> List[FunctionRun]:
        """Start one run per function registered for ``event.name``."""
        functions = self.functions_for(event.name)

        logger.info(
            "Event received",
            extra={"event_id": event.id, "event_name": event.name, "functions": len(functions)}
        )

        runs = []
        for function in functions:
            run = FunctionRun(function_id=function.id, event_id=event.id, event_name=event.name)
            self._record(run)
            runs.append(run)

            if self._scheduler is not None:
                self._scheduler.submit(run.id, self._execute, function, event, run)
            else:
                await self._execute(function, event, run)

        return runs

    async def _execute(self, function: JobFunction, event: Event, run: FunctionRun) -> None:
        run.mark_running()
        logger.info(
            "Function run started",
            extra={"run_id": run.id, "function_id": function.id, "event_id": event.id}
        )

        try:
            output = await function.handler(event)
        except Exception as e:
            run.mark_failed(f"{type(e).__name__}: {e}")
            logger.error(
                "Function run failed",
                exc_info=e,
                extra={"run_id": run.id, "function_id": function.id, "error": run.error}
            )
            return

        run.mark_completed(output)
        logger.info(
            "Function run completed",
            extra={"run_id": run.id, "function_id": function.id}
        )

    # ----- history -----

    def _record(self, run: FunctionRun) -> None:
        self._runs[run.id] = run
        while len(self._runs) > self._history_size:
            self._runs.popitem(last=False)

    def get_run(self, run_id: str) -> Optional[FunctionRun]:
        return self._runs.get(run_id)

    def recent_runs(self, limit: int = 50) -> List[FunctionRun]:
        """Newest first."""
        return list(reversed(self._runs.values()))[:limit]
