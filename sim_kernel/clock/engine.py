"""
Time Engine — the single authority for "what day is it in the simulation".

Holds the simulated date, the pause flag and the active timeline branch.
Every branch owns its own date cursor; the live clock mirrors the cursor of
whichever branch is active.

Behavioral Contract:
- The date only moves through tick / jump_to / switch_branch / rollback_to.
- tick is refused (logged, not raised) while paused. jump_to is the
  administrative override and ignores the pause flag.
- The active branch is a single pointer record, so switching branches is one
  write and there is never more than one active branch.
- Every clock move runs the registered advance hooks (the event catch-up
  pass) before returning.
- Every successful mutation synchronously notifies all listeners.
"""

import logging
from datetime import date, datetime, timedelta, timezone
from typing import Callable, Dict, List, Optional
from uuid import uuid4

from sim_kernel.errors import InvalidOperationError, NotFoundError
from sim_kernel.models.events import ExecutionReport
from sim_kernel.models.timeline import ClockState, ClockUpdate, TimelineBranch
from sim_kernel.persistence.store import DocumentStore

logger = logging.getLogger(__name__)
audit_logger = logging.getLogger("sim_kernel.audit")

BRANCHES = "branches"
SETTINGS = "settings"
ACTIVE_BRANCH_KEY = "active_branch"

Listener = Callable[[ClockState], None]
AdvanceHook = Callable[[date], Optional[ExecutionReport]]
RollbackHook = Callable[[date], object]


class TimeEngine:
    """
    Clock state plus branch management.

    States:
      NO_ACTIVE_BRANCH → BRANCH_ACTIVE(id) → BRANCH_ACTIVE(other id) ...
    Once a branch is active, it is only ever replaced by another.
    """

    def __init__(self, store: DocumentStore, purge_on_rollback: bool = True):
        self.store = store
        self.purge_on_rollback = purge_on_rollback

        today = date.today()
        self._current_date = today
        self._start_date = today
        self._is_paused = True
        self._active_branch_id: Optional[str] = None
        self._branches: Dict[str, TimelineBranch] = {}

        self._listeners: List[Listener] = []
        self._advance_hooks: List[AdvanceHook] = []
        self._rollback_hooks: List[RollbackHook] = []

    # --- Wiring ---

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a state listener. Returns a callable that unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def add_advance_hook(self, hook: AdvanceHook) -> None:
        """Run `hook(current_date)` after every clock move."""
        self._advance_hooks.append(hook)

    def add_rollback_hook(self, hook: RollbackHook) -> None:
        """Run `hook(target_date)` before a purging rollback moves the clock."""
        self._rollback_hooks.append(hook)

    # --- Queries ---

    @property
    def is_paused(self) -> bool:
        return self._is_paused

    @property
    def active_branch_id(self) -> Optional[str]:
        return self._active_branch_id

    def get_current_date(self) -> date:
        return self._current_date

    def get_state(self) -> ClockState:
        """Snapshot of the clock with branch activity filled in."""
        return ClockState(
            current_date=self._current_date,
            start_date=self._start_date,
            is_paused=self._is_paused,
            active_branch_id=self._active_branch_id,
            branches=self.list_branches(),
        )

    def list_branches(self) -> List[TimelineBranch]:
        return [self._with_activity(b) for b in self._branches.values()]

    def get_branch(self, branch_id: str) -> TimelineBranch:
        record = self.store.get(BRANCHES, branch_id)
        if record is None:
            raise NotFoundError("Branch", branch_id)
        return self._with_activity(TimelineBranch.model_validate(record))

    # --- Lifecycle ---

    def initialize(self, start_date: Optional[date] = None) -> ClockUpdate:
        """
        Seed the clock and load persisted branches.

        If the active-branch pointer resolves, the clock adopts that branch's
        cursor. Otherwise the clock runs with no active branch; no branch is
        created implicitly.
        """
        seed = start_date or date.today()
        self._start_date = seed
        self._current_date = seed
        self._is_paused = True

        self._branches = {
            r["id"]: TimelineBranch.model_validate(r)
            for r in self.store.list(BRANCHES)
        }
        self._active_branch_id = None

        pointer = self.store.get(SETTINGS, ACTIVE_BRANCH_KEY)
        if pointer:
            branch = self._branches.get(pointer["branch_id"])
            if branch is None:
                logger.warning(
                    "Active branch pointer references missing branch %s; ignoring",
                    pointer["branch_id"],
                )
            else:
                self._active_branch_id = branch.id
                self._current_date = branch.current_date

        logger.info(
            "Time engine initialized at %s (branches=%d, active=%s)",
            self._current_date, len(self._branches), self._active_branch_id,
        )
        self._notify()
        return ClockUpdate(
            state=self.get_state(),
            changed=True,
            executions=self._run_advance_hooks(),
        )

    def pause(self) -> ClockState:
        self._is_paused = True
        logger.info("Time paused at %s", self._current_date)
        self._notify()
        return self.get_state()

    def resume(self) -> ClockState:
        self._is_paused = False
        logger.info("Time resumed at %s", self._current_date)
        self._notify()
        return self.get_state()

    # --- Clock movement ---

    def tick(self, days: int = 1) -> ClockUpdate:
        """Advance the clock by `days` calendar days. Ignored while paused."""
        if days < 0:
            raise InvalidOperationError(
                f"Cannot tick by {days} days; use jump_to or rollback_to to go back."
            )
        if self._is_paused:
            logger.warning("Cannot tick while paused (requested %d days)", days)
            return ClockUpdate(state=self.get_state(), changed=False)

        return self._move_to(self._current_date + timedelta(days=days))

    def jump_to(self, target: date) -> ClockUpdate:
        """Set the clock directly, ignoring the pause flag. Backward jumps are allowed."""
        return self._move_to(target)

    def rollback_to(self, target: date) -> ClockUpdate:
        """
        Destructive jump back to `target`.

        With purge_on_rollback, the rollback hooks remove records derived after
        `target` (fired events, assembled packets) before the clock moves.
        Without it, only the cursor moves.
        """
        audit_logger.warning(
            "Time rollback from %s to %s (branch=%s, purge=%s)",
            self._current_date, target, self._active_branch_id, self.purge_on_rollback,
        )
        if self.purge_on_rollback:
            for hook in self._rollback_hooks:
                hook(target)
        return self._move_to(target)

    def _move_to(self, target: date) -> ClockUpdate:
        if self._active_branch_id:
            record = self.store.update(
                BRANCHES, self._active_branch_id, {"current_date": target.isoformat()}
            )
            if record is None:
                raise NotFoundError("Branch", self._active_branch_id)
            self._branches[self._active_branch_id] = TimelineBranch.model_validate(record)

        previous = self._current_date
        self._current_date = target
        logger.info("Time moved from %s to %s", previous, target)
        self._notify()

        return ClockUpdate(
            state=self.get_state(),
            changed=True,
            executions=self._run_advance_hooks(),
        )

    # --- Branches ---

    def create_branch(self, name: str, from_date: Optional[date] = None) -> TimelineBranch:
        """Create an inactive branch whose cursor starts at `from_date` (default: now)."""
        branch_date = from_date or self._current_date
        branch = TimelineBranch(
            id=f"branch_{uuid4().hex[:12]}",
            name=name,
            branched_from_date=branch_date,
            current_date=branch_date,
            created_at=datetime.now(timezone.utc),
        )
        self.store.put(BRANCHES, branch.id, self._serialize(branch))
        self._branches[branch.id] = branch

        logger.info("Branch %s (%s) created from %s", branch.id, name, branch_date)
        self._notify()
        return branch

    def switch_branch(self, branch_id: str) -> ClockUpdate:
        """Make `branch_id` the active branch and adopt its cursor."""
        record = self.store.get(BRANCHES, branch_id)
        if record is None:
            raise NotFoundError("Branch", branch_id)

        # One pointer write: the previous branch stops being active in the same step
        self.store.put(
            SETTINGS, ACTIVE_BRANCH_KEY, {"id": ACTIVE_BRANCH_KEY, "branch_id": branch_id}
        )

        branch = TimelineBranch.model_validate(record)
        self._branches[branch_id] = branch
        previous = self._active_branch_id
        self._active_branch_id = branch_id
        self._current_date = branch.current_date

        logger.info(
            "Switched branch %s -> %s at %s", previous, branch_id, branch.current_date
        )
        self._notify()
        return ClockUpdate(
            state=self.get_state(),
            changed=True,
            executions=self._run_advance_hooks(),
        )

    # --- Internals ---

    def _with_activity(self, branch: TimelineBranch) -> TimelineBranch:
        return branch.model_copy(update={"is_active": branch.id == self._active_branch_id})

    def _serialize(self, branch: TimelineBranch) -> dict:
        return branch.model_dump(mode="json", exclude={"is_active"})

    def _run_advance_hooks(self) -> List[ExecutionReport]:
        reports = []
        for hook in self._advance_hooks:
            report = hook(self._current_date)
            if report is not None:
                reports.append(report)
        return reports

    def _notify(self) -> None:
        state = self.get_state()
        for listener in list(self._listeners):
            listener(state)
