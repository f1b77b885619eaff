"""EngineManager — serializes API access to one simulation environment.

The environment itself is single-threaded; every API call that reads or
advances it goes through one lock, so request handlers running on
different threads never interleave inside a resource cascade.
"""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING

from dessim.core.exceptions import EmptySchedule, ModelError
from dessim.core.snapshot import EnvironmentSnapshot
from dessim.engine.environment import Environment
from dessim.utils.event_log import SimEvent
from dessim.utils.loader import SetupFunc
from dessim.utils.logging import bind_clock

if TYPE_CHECKING:
    from dessim.config import SimulationConfig

logger = logging.getLogger(__name__)


class EngineManager:
    """Builds an Environment from a setup function and drives it on demand.

    Provides thread-safe access to:
      - the latest snapshot
      - the resource trace log
      - control commands (step / run / reset)
    """

    def __init__(self, config: SimulationConfig, setup: SetupFunc | None = None) -> None:
        self.config = config
        self._setup = setup
        self._lock = threading.Lock()
        self._env: Environment | None = None
        self._steps: int = 0
        self._build()

    # -- public properties --

    @property
    def steps(self) -> int:
        """Scheduler steps executed since the last reset."""
        return self._steps

    # -- snapshot access --

    def get_snapshot(self) -> EnvironmentSnapshot:
        with self._lock:
            return self._env.snapshot()

    def get_events(self, since: float = 0.0) -> list[SimEvent]:
        with self._lock:
            log = self._env.event_log
            return log.since(since) if log is not None else []

    # -- control --

    def step(self) -> bool:
        """Execute exactly one scheduled item. Returns False if none was queued."""
        with self._lock:
            try:
                self._env.step()
            except EmptySchedule:
                return False
            except Exception as exc:
                raise self._model_error(exc) from exc
            self._steps += 1
            return True

    def run(self, until: float | None = None) -> float:
        """Run to *until* (or until the schedule drains); returns the new time.

        Raises ValueError if *until* is not after the current time, and
        ModelError if model code raises while running.
        """
        with self._lock:
            env = self._env
            if until is not None and until <= env.now:
                raise ValueError(f"until ({until}) must be greater than the current time ({env.now})")
            try:
                env.run(until)
            except Exception as exc:
                raise self._model_error(exc) from exc
            logger.info("Environment ran to t=%.3f", env.now)
            return env.now

    def reset(self) -> None:
        """Discard the environment and rebuild it from the setup function."""
        with self._lock:
            self._build()
        logger.info("EngineManager reset.")

    # -- internals --

    def _build(self) -> None:
        env = Environment(self.config)
        if self._setup is not None:
            self._setup(env)
        self._env = env
        self._steps = 0
        bind_clock(lambda: env.now)
        logger.info(
            "Environment built: %d resources, %d items queued", len(env.resources), env.queued
        )

    def _model_error(self, exc: Exception) -> ModelError:
        now = self._env.now
        logger.error("Model failed at t=%.3f: %r", now, exc)
        return ModelError(f"Model failed at t={now:.3f}: {exc!r}. Reset to rebuild the environment.")
