"""Structured logging configuration."""

from __future__ import annotations

import logging
import sys
from typing import Callable


class SimTimeFilter(logging.Filter):
    """Stamps every record with the virtual time of the bound clock."""

    def __init__(self, clock: Callable[[], float] | None = None) -> None:
        super().__init__()
        self.clock = clock

    def filter(self, record: logging.LogRecord) -> bool:
        record.simtime = f"{self.clock():10.3f}" if self.clock is not None else f"{'-':>10}"
        return True


_sim_time_filter = SimTimeFilter()


def bind_clock(clock: Callable[[], float] | None) -> None:
    """Point the log time column at *clock* (e.g. ``lambda: env.now``)."""
    _sim_time_filter.clock = clock


def setup_logging(level: str = "INFO") -> None:
    """Configure root logger with a clean format for simulation output."""
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(numeric_level)
    handler.addFilter(_sim_time_filter)

    formatter = logging.Formatter(
        fmt="%(asctime)s [%(levelname)-5s] t=%(simtime)s %(name)-25s | %(message)s",
        datefmt="%H:%M:%S",
    )
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.setLevel(numeric_level)
    root.handlers.clear()
    root.addHandler(handler)
