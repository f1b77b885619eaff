# dessim/core/exceptions.py

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from dessim.core.events import Event


class SimulationError(Exception):
    """Base class for simulation errors"""


class ConfigurationError(SimulationError, ValueError):
    """A resource or environment was constructed with invalid parameters."""


class ProtocolError(SimulationError, RuntimeError):
    """An event or resource was used against its contract."""


class EmptySchedule(SimulationError):
    pass


class SetupLoadError(SimulationError):
    pass


class Interrupt(Exception):
    """Thrown into a process that was interrupted by another party."""

    def __init__(self, cause: Any = None) -> None:
        super().__init__(cause)
        self.cause = cause

    def __str__(self) -> str:
        return f"Interrupt({self.cause!r})"


class EventCancelled(Exception):
    """Thrown into a process whose awaited event was cancelled."""

    def __init__(self, event: Event) -> None:
        super().__init__(event)
        self.event = event


class ModelError(SimulationError):
    """Model code raised while the environment was being advanced."""
