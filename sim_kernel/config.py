"""Kernel configuration and logging setup."""

import logging
import os
from datetime import date
from typing import Optional

from pydantic import BaseModel


class KernelConfig(BaseModel):
    """Configuration for the simulation kernel."""

    start_date: Optional[date] = None       # None seeds from today's date
    db_path: str = ":memory:"
    auto_execute_due_events: bool = True
    purge_on_rollback: bool = True
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, prefix: str = "SIM_KERNEL_") -> "KernelConfig":
        """Build a config from SIM_KERNEL_* environment variables."""
        values = {}
        for field_name in cls.model_fields:
            raw = os.environ.get(f"{prefix}{field_name.upper()}")
            if raw is not None:
                values[field_name] = raw
        return cls.model_validate(values)


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
