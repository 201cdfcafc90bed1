"""Timeline — branch records and the clock state snapshot."""

from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict

from sim_kernel.models.events import ExecutionReport


class TimelineBranch(BaseModel):
    """An independent date cursor representing one counterfactual history."""

    id: str
    name: str
    branched_from_date: date
    current_date: date
    created_at: datetime
    is_active: bool = False                 # Derived from the active-branch pointer, never stored


class ClockState(BaseModel):
    """Immutable snapshot of the clock, handed to observers on every mutation."""

    model_config = ConfigDict(frozen=True)

    current_date: date
    start_date: date
    is_paused: bool
    active_branch_id: Optional[str] = None
    branches: List[TimelineBranch] = []


class ClockUpdate(BaseModel):
    """Result of a clock-moving operation, including the catch-up passes it ran."""

    state: ClockState
    changed: bool
    executions: List[ExecutionReport] = []
