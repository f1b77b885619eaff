"""Workshop — E2E test fixture for resource contention.

Creates an Environment with one shared resource and lets tests add scripted
workers that arrive, queue, hold a slot for a while and leave. Admission and
completion times are collected for assertion.

Usage:
    shop = Workshop(capacity=1)
    shop.add_worker("A", hold=5)
    shop.add_worker("B", hold=5)
    shop.run()
    assert shop.admission_order() == ["A", "B"]
"""

from __future__ import annotations

import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", ".."))

from dessim.config import SimulationConfig
from dessim.core.exceptions import Interrupt
from dessim.core.process import Process
from dessim.engine.environment import Environment


class Workshop:
    """E2E test fixture for FIFO admission through real processes."""

    def __init__(self, capacity: int = 1, config: SimulationConfig | None = None) -> None:
        self.env = Environment(config or SimulationConfig())
        self.resource = self.env.resource(capacity, name="machines")
        self.admitted: list[tuple[float, str]] = []
        self.finished: list[tuple[float, str]] = []
        self.workers: dict[str, Process] = {}

    def add_worker(
        self,
        name: str,
        arrive: float = 0.0,
        hold: float = 1.0,
        patience: float | None = None,
    ) -> Process:
        """Worker that queues at *arrive*, holds for *hold*, gives up after *patience*."""
        env = self.env

        def work():
            if arrive:
                yield env.timeout(arrive)
            try:
                with self.resource.request() as req:
                    if patience is None:
                        yield req
                    else:
                        first = yield env.any_of([req, env.timeout(patience)])
                        if first is not req:
                            self.finished.append((env.now, f"{name}:reneged"))
                            return
                    self.admitted.append((env.now, name))
                    yield env.timeout(hold)
            except Interrupt:
                self.finished.append((env.now, f"{name}:interrupted"))
                return
            self.finished.append((env.now, name))

        proc = env.process(work(), name=name)
        self.workers[name] = proc
        return proc

    def interrupt_at(self, time: float, name: str, cause: str = "breakdown") -> Process:
        env = self.env

        def breaker():
            yield env.timeout(time)
            self.workers[name].interrupt(cause)

        return env.process(breaker(), name=f"breaker-{name}")

    def run(self, until: float | None = None) -> None:
        self.env.run(until)

    def admission_order(self) -> list[str]:
        return [n for _, n in self.admitted]

    def admitted_at(self, name: str) -> float | None:
        for t, n in self.admitted:
            if n == name:
                return t
        return None
