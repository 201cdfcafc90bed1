"""Simulation kernel data models."""

from sim_kernel.models.events import (
    EventFailure,
    EventTemplate,
    EventType,
    ExecutionReport,
    ScheduledEvent,
)
from sim_kernel.models.packet import (
    CompanyStatus,
    DayPacket,
    DirectMessage,
    FinanceSnapshot,
    Mail,
    MeetingNote,
)
from sim_kernel.models.timeline import ClockState, ClockUpdate, TimelineBranch

__all__ = [
    "ClockState",
    "ClockUpdate",
    "CompanyStatus",
    "DayPacket",
    "DirectMessage",
    "EventFailure",
    "EventTemplate",
    "EventType",
    "ExecutionReport",
    "FinanceSnapshot",
    "Mail",
    "MeetingNote",
    "ScheduledEvent",
    "TimelineBranch",
]
