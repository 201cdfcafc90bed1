"""
Kernel wiring — builds one connected set of simulation components.

The application creates a single SimulationKernel at startup and passes it
to whatever needs it; there is no module-level engine instance.
"""

import logging
from typing import Optional

from sim_kernel.clock.engine import TimeEngine
from sim_kernel.config import KernelConfig
from sim_kernel.events.executor import EventExecutor
from sim_kernel.events.scheduler import EventScheduler
from sim_kernel.packets.generator import PacketGenerator
from sim_kernel.persistence.store import DocumentStore, SqliteStore

logger = logging.getLogger(__name__)


class SimulationKernel:
    """Clock, scheduler, executor and packet generator sharing one store."""

    def __init__(self, store: DocumentStore, config: Optional[KernelConfig] = None):
        self.config = config or KernelConfig()
        self.store = store

        self.clock = TimeEngine(store, purge_on_rollback=self.config.purge_on_rollback)
        self.scheduler = EventScheduler(store)
        self.executor = EventExecutor(self.scheduler, self.clock)
        self.packets = PacketGenerator(self.clock, self.scheduler, store)

        if self.config.auto_execute_due_events:
            self.clock.add_advance_hook(self.executor.check_and_execute_due_events)
        self.clock.add_rollback_hook(self.scheduler.purge_executed_after)
        self.clock.add_rollback_hook(self.packets.purge_after)

    def initialize(self):
        """Initialize the clock at the configured start date."""
        return self.clock.initialize(self.config.start_date)


def build_kernel(
    config: Optional[KernelConfig] = None,
    store: Optional[DocumentStore] = None,
) -> SimulationKernel:
    """Create and initialize a kernel. Uses SqliteStore at config.db_path if no store is given."""
    config = config or KernelConfig()
    kernel = SimulationKernel(store or SqliteStore(config.db_path), config)
    kernel.initialize()
    logger.info("Simulation kernel ready at %s", kernel.clock.get_current_date())
    return kernel
