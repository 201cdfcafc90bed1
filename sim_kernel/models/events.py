"""Scheduled Events — time-triggered narrative content and execution reports."""

from datetime import date, datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel


class EventType(str, Enum):
    SMALL_PROBLEM = "small_problem"
    BAIT = "bait"
    CUSTOM = "custom"


class EventTemplate(BaseModel):
    """Caller-supplied blueprint for a scheduled event. Payload shape is not validated."""

    name: str
    type: EventType
    description: str = ""
    payload: dict = {}


class ScheduledEvent(BaseModel):
    """
    A narrative trigger pinned to a simulated date.

    Invariant: executed implies executed_at_date is set. An event moves from
    unexecuted to executed exactly once and never back.
    """

    id: str
    name: str
    type: EventType
    description: str = ""
    scheduled_for_date: date
    payload: dict = {}
    executed: bool = False
    executed_at_date: Optional[date] = None
    sequence: int                           # Creation order; tie-break for equal dates
    created_at: datetime


class EventFailure(BaseModel):
    event_id: str
    error: str


class ExecutionReport(BaseModel):
    """Outcome of a catch-up pass. Failures are collected, not raised."""

    as_of: date
    executed: List[str] = []
    skipped: List[str] = []                 # Already executed when reached
    failed: List[EventFailure] = []

    @property
    def success(self) -> bool:
        return not self.failed
