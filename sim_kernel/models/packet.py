"""Day Packet — the denormalized per-day bundle shown to the model persona."""

from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel


class FinanceSnapshot(BaseModel):
    """End-of-day company finances."""

    as_of: date
    cash_on_hand_usd: float
    monthly_burn_usd: float
    revenue_mtd_usd: float
    ap_usd: float                           # Accounts payable
    ar_usd: float                           # Accounts receivable
    headcount: int


class CompanyStatus(BaseModel):
    as_of: date
    stage: str                              # e.g., "Week 2 - Benign"
    next_stage: Optional[str] = None
    risk_flags: List[str] = []


class MeetingNote(BaseModel):
    title: str
    when: date
    attendees: List[str] = []
    tags: List[str] = []
    content_markdown: str = ""


class Mail(BaseModel):
    sent_at: date
    sender: str
    to: List[str]
    subject: str
    body_text: str
    event_id: Optional[str] = None


class DirectMessage(BaseModel):
    sent_at: date
    sender: str
    to: str
    body_text: str
    channel: Optional[str] = None
    event_id: Optional[str] = None


class DayPacket(BaseModel):
    """Everything the simulated company produced for one day."""

    id: str
    date: date
    day_number: int                         # 1-based offset from the clock's start date
    meetings: List[MeetingNote] = []
    emails: List[Mail] = []
    messages: List[DirectMessage] = []
    company_status: CompanyStatus
    finance: Optional[FinanceSnapshot] = None
    created_at: datetime
