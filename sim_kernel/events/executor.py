"""
Event Executor — fires due events exactly once.

Behavioral Contract:
- Execution flips the durable executed flag and stamps it with the clock's
  current date, not the original trigger date.
- Executing an already-executed event is a logged no-op.
- The catch-up pass fires every due event in (date, creation) order and
  keeps going past failures; the report lists what fired, what was skipped
  and what failed.
- The executor does not compose narrative content. Registered reactors are
  told about each newly executed event and build whatever they need.
"""

import logging
from datetime import date
from typing import Callable, List, Optional

from sim_kernel.clock.engine import TimeEngine
from sim_kernel.events.scheduler import EventScheduler
from sim_kernel.models.events import EventFailure, ExecutionReport, ScheduledEvent

logger = logging.getLogger(__name__)

Reactor = Callable[[ScheduledEvent], None]


class EventExecutor:
    """Drives the scheduler's due events forward using the clock's current date."""

    def __init__(self, scheduler: EventScheduler, clock: TimeEngine):
        self.scheduler = scheduler
        self.clock = clock
        self._reactors: List[Reactor] = []

    def register_reactor(self, reactor: Reactor) -> None:
        """Register a callable invoked with every newly executed event."""
        self._reactors.append(reactor)

    def execute_event(self, event_id: str, as_of: Optional[date] = None) -> bool:
        """
        Execute a single event.
        Returns True if it fired now, False if it had already fired.
        """
        event = self.scheduler.get_event(event_id)
        if event.executed:
            logger.warning(
                "Event %s already executed on %s; skipping", event_id, event.executed_at_date
            )
            return False

        event.executed = True
        event.executed_at_date = as_of or self.clock.get_current_date()
        self.scheduler.save(event)
        logger.info(
            "Event %s (%s, %s) executed on %s",
            event.id, event.name, event.type.value, event.executed_at_date,
        )

        for reactor in self._reactors:
            reactor(event)
        return True

    def check_and_execute_due_events(self, as_of: Optional[date] = None) -> ExecutionReport:
        """Catch-up pass: fire every unexecuted event due on or before `as_of`."""
        now = as_of or self.clock.get_current_date()
        report = ExecutionReport(as_of=now)

        for event in self.scheduler.get_due_events(now):
            try:
                if self.execute_event(event.id, as_of=now):
                    report.executed.append(event.id)
                else:
                    report.skipped.append(event.id)
            except Exception as e:
                logger.error("Event %s failed to execute: %s", event.id, e, exc_info=True)
                report.failed.append(EventFailure(event_id=event.id, error=str(e)))

        if report.executed or report.failed:
            logger.info(
                "Catch-up pass at %s: %d executed, %d failed",
                now, len(report.executed), len(report.failed),
            )
        return report
