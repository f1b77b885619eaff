"""Environment — the virtual-time scheduler.

Every occurrence in a simulation is resolved from a single queue ordered by
``(time, priority, insertion id)``. One item (and every continuation it
triggers) runs to completion before the next is popped, so nothing that
executes inside the environment needs a lock.
"""

from __future__ import annotations

import heapq
import itertools
import logging
from typing import TYPE_CHECKING, Any, Callable, Generator, Iterable

from dessim.config import SimulationConfig
from dessim.core.enums import EventState, Priority
from dessim.core.events import AnyOf, Event, Timeout
from dessim.core.exceptions import EmptySchedule
from dessim.core.process import Process
from dessim.core.resources import AllocationStrategy, Resource
from dessim.core.snapshot import EnvironmentSnapshot
from dessim.systems.rng import DeterministicRNG
from dessim.utils.event_log import EventLog

if TYPE_CHECKING:
    from dessim.core.snapshot import ResourceSnapshot

logger = logging.getLogger(__name__)

_ScheduledItem = tuple[float, int, int, Callable[[], None]]


class Environment:
    """Owns the virtual clock, the event queue and the resources of one run."""

    __slots__ = (
        "_config",
        "_now",
        "_queue",
        "_eid",
        "_active_process",
        "_resources",
        "_rng",
        "_event_log",
    )

    def __init__(self, config: SimulationConfig | None = None) -> None:
        self._config = (config or SimulationConfig()).validate()
        self._now: float = self._config.initial_time
        self._queue: list[_ScheduledItem] = []
        self._eid = itertools.count()
        self._active_process: Process | None = None
        self._resources: list[Resource] = []
        self._rng = DeterministicRNG(self._config.seed)
        self._event_log: EventLog | None = (
            EventLog(self._config.event_log_limit) if self._config.trace_events else None
        )

    # -- public properties --

    @property
    def config(self) -> SimulationConfig:
        return self._config

    @property
    def now(self) -> float:
        return self._now

    @property
    def active_process(self) -> Process | None:
        """The process whose generator is currently executing, if any."""
        return self._active_process

    @property
    def resources(self) -> tuple[Resource, ...]:
        return tuple(self._resources)

    @property
    def rng(self) -> DeterministicRNG:
        return self._rng

    @property
    def event_log(self) -> EventLog | None:
        return self._event_log

    @property
    def queued(self) -> int:
        return len(self._queue)

    # -- factories --

    def event(self) -> Event:
        return Event(self)

    def timeout(self, delay: float, value: Any = None) -> Timeout:
        return Timeout(self, delay, value)

    def any_of(self, events: Iterable[Event]) -> AnyOf:
        return AnyOf(self, events)

    def process(self, generator: Generator[Event, Any, Any], name: str | None = None) -> Process:
        return Process(self, generator, name=name)

    def resource(
        self,
        capacity: int | None = None,
        name: str | None = None,
        strategy: AllocationStrategy | None = None,
    ) -> Resource:
        if capacity is None:
            capacity = self._config.default_capacity
        return Resource(self, capacity, name=name, strategy=strategy)

    def register_resource(self, resource: Resource) -> None:
        """Called by Resource on construction so snapshots can find it."""
        self._resources.append(resource)

    def get_resource(self, name: str) -> Resource | None:
        for resource in self._resources:
            if resource.name == name:
                return resource
        return None

    # -- scheduling --

    def schedule(
        self,
        callback: Callable[[], None],
        delay: float = 0.0,
        priority: Priority = Priority.NORMAL,
    ) -> None:
        """Run *callback* once *delay* units of virtual time have passed."""
        if delay < 0:
            raise ValueError(f"Negative delay {delay}")
        heapq.heappush(self._queue, (self._now + delay, int(priority), next(self._eid), callback))

    def peek(self) -> float:
        """Time of the next scheduled item, or infinity if none."""
        return self._queue[0][0] if self._queue else float("inf")

    def step(self) -> None:
        """Pop and run exactly one scheduled item."""
        if not self._queue:
            raise EmptySchedule("No scheduled events left")
        time, _priority, _eid, callback = heapq.heappop(self._queue)
        self._now = time
        callback()

    def run(self, until: float | Event | None = None) -> Any:
        """Run until the queue drains, a time is reached, or an event resolves."""
        if until is None:
            while self._queue:
                self.step()
            return None

        if isinstance(until, Event):
            while not until.resolved:
                if not self._queue:
                    raise RuntimeError(f"No scheduled events left but {until!r} was not resolved")
                self.step()
            if until.state == EventState.FAILED:
                until.defused = True
                raise until.value
            return until.value if until.ok else None

        at = float(until)
        if at <= self._now:
            raise ValueError(f"until ({at}) must be greater than the current time ({self._now})")
        while self._queue and self._queue[0][0] < at:
            self.step()
        self._now = at
        logger.debug("Environment advanced to t=%.3f (%d queued)", at, len(self._queue))
        return None

    # -- inspection --

    def resource_snapshots(self) -> list[ResourceSnapshot]:
        return [r.snapshot() for r in self._resources]

    def snapshot(self) -> EnvironmentSnapshot:
        return EnvironmentSnapshot.from_environment(self)

    def _set_active_process(self, process: Process | None) -> None:
        self._active_process = process
