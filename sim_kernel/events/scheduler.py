"""
Event Scheduler — durable registry of future narrative triggers.

The scheduler only records when events should fire. Firing is the
Executor's job.

Behavioral Contract:
- No dedup: scheduling the same template twice yields two events.
- Queries always return events ordered by (scheduled_for_date, sequence),
  where sequence is the creation order.
- Executed events cannot be rescheduled.
"""

import logging
from datetime import date, datetime, timezone
from typing import List, Optional
from uuid import uuid4

from sim_kernel.errors import InvalidOperationError, NotFoundError
from sim_kernel.models.events import EventTemplate, EventType, ScheduledEvent
from sim_kernel.persistence.store import DocumentStore

logger = logging.getLogger(__name__)

SCHEDULED_EVENTS = "scheduled_events"


class EventScheduler:
    """Stores scheduled events and answers date/type/state queries over them."""

    def __init__(self, store: DocumentStore):
        self.store = store

    def schedule_event(self, template: EventTemplate, scheduled_for_date: date) -> str:
        """Persist a new unexecuted event built from `template`. Returns its id."""
        event = ScheduledEvent(
            id=f"evt_{uuid4().hex[:12]}",
            name=template.name,
            type=template.type,
            description=template.description,
            scheduled_for_date=scheduled_for_date,
            payload=dict(template.payload),
            sequence=self._next_sequence(),
            created_at=datetime.now(timezone.utc),
        )
        self.save(event)
        logger.info(
            "Event %s (%s) scheduled for %s", event.id, event.name, scheduled_for_date
        )
        return event.id

    def get_event(self, event_id: str) -> ScheduledEvent:
        record = self.store.get(SCHEDULED_EVENTS, event_id)
        if record is None:
            raise NotFoundError("Event", event_id)
        return ScheduledEvent.model_validate(record)

    def get_scheduled_events(
        self,
        type: Optional[EventType] = None,
        executed: Optional[bool] = None,
        from_date: Optional[date] = None,
        to_date: Optional[date] = None,
    ) -> List[ScheduledEvent]:
        """Events matching every given filter; the date window is inclusive."""
        events = [ScheduledEvent.model_validate(r) for r in self.store.list(SCHEDULED_EVENTS)]

        if type is not None:
            events = [e for e in events if e.type == type]
        if executed is not None:
            events = [e for e in events if e.executed == executed]
        if from_date is not None:
            events = [e for e in events if e.scheduled_for_date >= from_date]
        if to_date is not None:
            events = [e for e in events if e.scheduled_for_date <= to_date]

        return sorted(events, key=lambda e: (e.scheduled_for_date, e.sequence))

    def get_due_events(self, as_of: date) -> List[ScheduledEvent]:
        """Unexecuted events whose trigger date is on or before `as_of`."""
        return self.get_scheduled_events(executed=False, to_date=as_of)

    def get_executed_on(self, day: date) -> List[ScheduledEvent]:
        """Events that fired on `day`, in firing order."""
        return [
            e for e in self.get_scheduled_events(executed=True)
            if e.executed_at_date == day
        ]

    def reschedule(self, event_id: str, new_date: date) -> ScheduledEvent:
        """Move an unexecuted event to `new_date`."""
        event = self.get_event(event_id)
        if event.executed:
            raise InvalidOperationError(
                f"Event {event_id} already executed on {event.executed_at_date}; "
                f"it cannot be rescheduled."
            )

        previous = event.scheduled_for_date
        event.scheduled_for_date = new_date
        self.save(event)
        logger.info("Event %s rescheduled from %s to %s", event_id, previous, new_date)
        return event

    def save(self, event: ScheduledEvent) -> None:
        self.store.put(SCHEDULED_EVENTS, event.id, event.model_dump(mode="json"))

    def purge_executed_after(self, cutoff: date) -> List[str]:
        """
        Delete the firings that happened after `cutoff`.

        The fired record is removed, never flipped back. Its trigger is put
        back as a fresh unexecuted event with the same date and sequence, so
        it fires again when the clock reaches it.
        """
        purged = []
        for event in self.get_scheduled_events(executed=True):
            if event.executed_at_date and event.executed_at_date > cutoff:
                self.store.delete(SCHEDULED_EVENTS, event.id)
                self.save(event.model_copy(update={
                    "id": f"evt_{uuid4().hex[:12]}",
                    "executed": False,
                    "executed_at_date": None,
                    "payload": dict(event.payload),
                }))
                purged.append(event.id)
        if purged:
            logger.warning(
                "Purged %d events fired after %s; triggers restored", len(purged), cutoff
            )
        return purged

    def _next_sequence(self) -> int:
        records = self.store.list(SCHEDULED_EVENTS)
        return max((r["sequence"] for r in records), default=0) + 1
