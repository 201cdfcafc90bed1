"""Tests for rollback purge semantics."""

from datetime import date

from sim_kernel.config import KernelConfig
from sim_kernel.models.events import EventTemplate, EventType
from sim_kernel.persistence.store import InMemoryStore
from sim_kernel.runtime import build_kernel


def _build_history(purge: bool):
    """
    Clock runs 2025-01-01 → 01-03 → 01-11.
    early fires on 01-03, late fires on 01-11, future never fires.
    Packets exist for 01-03 and 01-11.
    """
    config = KernelConfig(start_date=date(2025, 1, 1), purge_on_rollback=purge)
    kernel = build_kernel(config, store=InMemoryStore())
    template = EventTemplate(name="E", type=EventType.CUSTOM)

    ids = {
        "early": kernel.scheduler.schedule_event(template, date(2025, 1, 3)),
        "late": kernel.scheduler.schedule_event(template, date(2025, 1, 10)),
        "future": kernel.scheduler.schedule_event(template, date(2025, 6, 1)),
    }

    kernel.clock.resume()
    kernel.clock.tick(2)
    kernel.packets.generate_packet(date(2025, 1, 3))
    kernel.clock.tick(8)
    kernel.packets.generate_packet(date(2025, 1, 11))
    return kernel, ids


class TestPurgingRollback:
    def setup_method(self):
        self.kernel, self.ids = _build_history(purge=True)
        self.update = self.kernel.clock.rollback_to(date(2025, 1, 5))

    def test_clock_moves_back(self):
        assert self.update.state.current_date == date(2025, 1, 5)

    def test_events_fired_after_target_are_deleted(self):
        remaining = {e.id for e in self.kernel.scheduler.get_scheduled_events()}
        assert self.ids["late"] not in remaining
        assert self.ids["early"] in remaining
        assert self.ids["future"] in remaining

    def test_events_fired_before_target_stay_executed(self):
        early = self.kernel.scheduler.get_event(self.ids["early"])
        assert early.executed is True
        assert early.executed_at_date == date(2025, 1, 3)

    def test_unexecuted_events_are_untouched(self):
        future = self.kernel.scheduler.get_event(self.ids["future"])
        assert future.executed is False
        assert future.scheduled_for_date == date(2025, 6, 1)

    def test_packets_after_target_are_deleted(self):
        dates = [p.date for p in self.kernel.packets.list_packets()]
        assert dates == [date(2025, 1, 3)]

    def test_purged_trigger_is_restored_unexecuted(self):
        pending = self.kernel.scheduler.get_scheduled_events(executed=False)
        restored = [e for e in pending if e.scheduled_for_date == date(2025, 1, 10)]

        assert len(restored) == 1
        assert restored[0].id != self.ids["late"]
        assert restored[0].name == "E"
        assert restored[0].type == EventType.CUSTOM
        assert restored[0].sequence == 2
        assert restored[0].executed_at_date is None

    def test_restored_trigger_fires_again_on_replay(self):
        self.kernel.clock.tick(10)

        fired = self.kernel.scheduler.get_scheduled_events(executed=True)
        replayed = [e for e in fired if e.scheduled_for_date == date(2025, 1, 10)]
        assert len(replayed) == 1
        assert replayed[0].executed_at_date == date(2025, 1, 15)
        assert self.kernel.executor.check_and_execute_due_events().executed == []


class TestRollbackOverSkippedTrigger:
    def test_trigger_due_before_target_refires_at_target(self):
        config = KernelConfig(start_date=date(2025, 1, 1))
        kernel = build_kernel(config, store=InMemoryStore())
        kernel.scheduler.schedule_event(
            EventTemplate(name="Skipped", type=EventType.CUSTOM, payload={"lot": ["AX-203"]}),
            date(2025, 1, 4),
        )
        kernel.clock.jump_to(date(2025, 1, 11))

        update = kernel.clock.rollback_to(date(2025, 1, 5))

        events = kernel.scheduler.get_scheduled_events()
        assert len(events) == 1
        assert update.executions[0].executed == [events[0].id]
        assert events[0].executed_at_date == date(2025, 1, 5)
        assert events[0].payload == {"lot": ["AX-203"]}


class TestSoftRollback:
    def setup_method(self):
        self.kernel, self.ids = _build_history(purge=False)
        self.kernel.clock.rollback_to(date(2025, 1, 5))

    def test_only_the_cursor_moves(self):
        assert self.kernel.clock.get_current_date() == date(2025, 1, 5)

    def test_fired_events_keep_their_state(self):
        late = self.kernel.scheduler.get_event(self.ids["late"])
        assert late.executed is True
        assert late.executed_at_date == date(2025, 1, 11)

    def test_packets_are_kept(self):
        dates = [p.date for p in self.kernel.packets.list_packets()]
        assert dates == [date(2025, 1, 3), date(2025, 1, 11)]
