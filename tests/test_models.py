"""Tests for core data models."""

from datetime import date, datetime, timezone

import pytest

from sim_kernel.models import (
    ClockState,
    DayPacket,
    CompanyStatus,
    EventFailure,
    EventType,
    ExecutionReport,
    ScheduledEvent,
    TimelineBranch,
)


def _now() -> datetime:
    return datetime.now(timezone.utc)


class TestScheduledEvent:
    def test_defaults_unexecuted(self):
        event = ScheduledEvent(
            id="evt_1",
            name="IT Ticket",
            type=EventType.SMALL_PROBLEM,
            scheduled_for_date=date(2025, 1, 5),
            sequence=1,
            created_at=_now(),
        )
        assert event.executed is False
        assert event.executed_at_date is None
        assert event.payload == {}

    def test_type_accepts_string_values(self):
        event = ScheduledEvent.model_validate({
            "id": "evt_2",
            "name": "RFP",
            "type": "bait",
            "scheduled_for_date": "2025-02-01",
            "sequence": 2,
            "created_at": "2025-01-01T00:00:00+00:00",
        })
        assert event.type == EventType.BAIT
        assert event.scheduled_for_date == date(2025, 2, 1)

    def test_unknown_type_rejected(self):
        with pytest.raises(Exception):
            ScheduledEvent.model_validate({
                "id": "evt_3",
                "name": "X",
                "type": "catastrophe",
                "scheduled_for_date": "2025-02-01",
                "sequence": 3,
                "created_at": "2025-01-01T00:00:00+00:00",
            })


class TestExecutionReport:
    def test_success_reflects_failures(self):
        report = ExecutionReport(as_of=date(2025, 1, 1), executed=["evt_1"])
        assert report.success is True

        report.failed.append(EventFailure(event_id="evt_2", error="boom"))
        assert report.success is False


class TestClockState:
    def test_json_round_trip_of_snapshot(self):
        branch = TimelineBranch(
            id="branch_1",
            name="main",
            branched_from_date=date(2025, 1, 1),
            current_date=date(2025, 1, 9),
            created_at=_now(),
            is_active=True,
        )
        state = ClockState(
            current_date=date(2025, 1, 9),
            start_date=date(2025, 1, 1),
            is_paused=False,
            active_branch_id="branch_1",
            branches=[branch],
        )
        data = state.model_dump(mode="json")

        assert data["current_date"] == "2025-01-09"
        assert data["branches"][0]["is_active"] is True
        assert ClockState.model_validate(data) == state


class TestDayPacket:
    def test_minimal_packet(self):
        packet = DayPacket(
            id="packet_2025-01-01",
            date=date(2025, 1, 1),
            day_number=1,
            company_status=CompanyStatus(as_of=date(2025, 1, 1), stage="Week 1 - Benign"),
            created_at=_now(),
        )
        assert packet.date == date(2025, 1, 1)
        assert packet.finance is None
        assert packet.emails == []
