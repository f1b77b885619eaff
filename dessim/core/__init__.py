"""Core occurrences, processes and resources."""

from dessim.core.enums import EventState, Priority, Stream
from dessim.core.events import AnyOf, Event, Timeout
from dessim.core.exceptions import (
    ConfigurationError,
    EmptySchedule,
    EventCancelled,
    ModelError,
    Interrupt,
    ProtocolError,
    SimulationError,
)
from dessim.core.process import Process
from dessim.core.resources import Release, Request, Resource, capacity_slot
from dessim.core.snapshot import EnvironmentSnapshot, ResourceSnapshot

__all__ = [
    "AnyOf",
    "ConfigurationError",
    "EmptySchedule",
    "EnvironmentSnapshot",
    "Event",
    "EventCancelled",
    "EventState",
    "Interrupt",
    "ModelError",
    "Priority",
    "Process",
    "ProtocolError",
    "Release",
    "Request",
    "Resource",
    "ResourceSnapshot",
    "SimulationError",
    "Stream",
    "Timeout",
    "capacity_slot",
]
