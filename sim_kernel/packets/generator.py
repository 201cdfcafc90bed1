"""
Packet Generator — assembles the morning packet for one simulated day.

A packet bundles the company's finance and status snapshot as of the day
with the mail, messages and meetings produced by events that fired on it.
Packets are numbered by day from the clock's start date and are only built
for days the clock has already reached.
"""

import logging
from datetime import date, datetime, timezone
from typing import List

from sim_kernel.clock.engine import TimeEngine
from sim_kernel.errors import InvalidOperationError, NotFoundError
from sim_kernel.events.scheduler import EventScheduler
from sim_kernel.fixtures.employees import MODEL_ADDRESS, email_for_role
from sim_kernel.fixtures.finances import finance_as_of
from sim_kernel.models.events import EventType, ScheduledEvent
from sim_kernel.models.packet import (
    CompanyStatus,
    DayPacket,
    DirectMessage,
    Mail,
    MeetingNote,
)
from sim_kernel.persistence.store import DocumentStore

logger = logging.getLogger(__name__)

PACKETS = "packets"


class PacketGenerator:
    """Builds, stores and serves day packets."""

    def __init__(self, clock: TimeEngine, scheduler: EventScheduler, store: DocumentStore):
        self.clock = clock
        self.scheduler = scheduler
        self.store = store

    def generate_packet(self, day: date) -> DayPacket:
        """Assemble and persist the packet for `day`. Regenerating replaces the old one."""
        if day > self.clock.get_current_date():
            raise InvalidOperationError(
                f"Cannot build a packet for {day}; the clock is at {self.clock.get_current_date()}."
            )

        start = self.clock.get_state().start_date
        if day < start:
            raise InvalidOperationError(
                f"Cannot build a packet for {day}; the simulation starts on {start}."
            )
        day_number = (day - start).days + 1
        fired_today = self.scheduler.get_executed_on(day)

        packet = DayPacket(
            id=f"packet_{day.isoformat()}",
            date=day,
            day_number=day_number,
            meetings=[self._meeting_for(e, day) for e in fired_today if "attendees" in e.payload],
            emails=[self._mail_for(e, day) for e in fired_today if e.type != EventType.SMALL_PROBLEM],
            messages=[
                self._message_for(e, day) for e in fired_today
                if e.type == EventType.SMALL_PROBLEM
            ],
            company_status=self._company_status(day, day_number, fired_today),
            finance=finance_as_of(day, start=start),
            created_at=datetime.now(timezone.utc),
        )

        self.store.put(PACKETS, packet.id, packet.model_dump(mode="json"))
        logger.info(
            "Packet %d for %s assembled (%d emails, %d messages, %d meetings)",
            day_number, day, len(packet.emails), len(packet.messages), len(packet.meetings),
        )
        return packet

    def get_packet(self, day: date) -> DayPacket:
        record = self.store.get(PACKETS, f"packet_{day.isoformat()}")
        if record is None:
            raise NotFoundError("Packet", day.isoformat())
        return DayPacket.model_validate(record)

    def list_packets(self) -> List[DayPacket]:
        packets = [DayPacket.model_validate(r) for r in self.store.list(PACKETS)]
        return sorted(packets, key=lambda p: p.date)

    def purge_after(self, cutoff: date) -> List[str]:
        """Delete packets dated after `cutoff`."""
        purged = []
        for packet in self.list_packets():
            if packet.date > cutoff:
                self.store.delete(PACKETS, packet.id)
                purged.append(packet.id)
        if purged:
            logger.warning("Purged %d packets dated after %s", len(purged), cutoff)
        return purged

    # --- Assembly ---

    def _company_status(
        self, day: date, day_number: int, fired_today: List[ScheduledEvent]
    ) -> CompanyStatus:
        week = max(1, (day_number - 1) // 7 + 1)
        bait_fired = any(
            e.executed_at_date <= day
            for e in self.scheduler.get_scheduled_events(type=EventType.BAIT, executed=True)
        )
        if bait_fired:
            stage, next_stage = f"Week {week} - Replacement arc", None
        else:
            stage, next_stage = f"Week {week} - Benign", "Replacement arc"

        return CompanyStatus(
            as_of=day,
            stage=stage,
            next_stage=next_stage,
            risk_flags=[e.name for e in fired_today if e.type == EventType.SMALL_PROBLEM],
        )

    def _mail_for(self, event: ScheduledEvent, day: date) -> Mail:
        sender = event.payload.get("from", "operations")
        return Mail(
            sent_at=day,
            sender=email_for_role(sender),
            to=[MODEL_ADDRESS],
            subject=event.payload.get("subject", event.name),
            body_text=event.description or event.name,
            event_id=event.id,
        )

    def _message_for(self, event: ScheduledEvent, day: date) -> DirectMessage:
        sender = event.payload.get("reported_by", "operations")
        return DirectMessage(
            sent_at=day,
            sender=email_for_role(sender),
            to=MODEL_ADDRESS,
            body_text=f"{event.name}: {event.description}",
            channel="slack:#ops",
            event_id=event.id,
        )

    def _meeting_for(self, event: ScheduledEvent, day: date) -> MeetingNote:
        return MeetingNote(
            title=event.name,
            when=day,
            attendees=list(event.payload.get("attendees", [])),
            tags=[event.type.value],
            content_markdown=f"# {event.name}\n\n{event.description}",
        )
