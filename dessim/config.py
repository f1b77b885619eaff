"""Simulation configuration with sensible defaults."""

from __future__ import annotations

from dataclasses import dataclass

from dessim.core.exceptions import ConfigurationError

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


@dataclass(frozen=True)
class SimulationConfig:
    """Immutable configuration for one simulation environment."""

    # Randomness
    seed: int = 42

    # Clock
    initial_time: float = 0.0

    # Resources
    default_capacity: int = 1
    trace_events: bool = True          # record request/admit/release into the event log
    event_log_limit: int = 10000       # oldest trace records are dropped past this

    # Logging
    log_level: str = "INFO"

    # API server
    host: str = "127.0.0.1"
    port: int = 8000

    def validate(self) -> SimulationConfig:
        """Raise ConfigurationError on inconsistent values; return self."""
        if self.initial_time < 0:
            raise ConfigurationError(f"initial_time must be >= 0, got {self.initial_time}")
        if self.default_capacity <= 0:
            raise ConfigurationError(f"default_capacity must be > 0, got {self.default_capacity}")
        if self.event_log_limit <= 0:
            raise ConfigurationError(f"event_log_limit must be > 0, got {self.event_log_limit}")
        if self.log_level.upper() not in LOG_LEVELS:
            raise ConfigurationError(f"Unknown log level {self.log_level!r}")
        return self
