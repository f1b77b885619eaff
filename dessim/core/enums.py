"""Enumerations used throughout the engine."""

from __future__ import annotations

from enum import IntEnum, unique


@unique
class EventState(IntEnum):
    """Resolution state of an event."""

    PENDING = 0
    SUCCEEDED = 1
    FAILED = 2
    CANCELLED = 3


@unique
class Priority(IntEnum):
    """Ordering of scheduled items that share the same virtual time.

    Lower values run first.
    """

    URGENT = 0
    NORMAL = 1


@unique
class Stream(IntEnum):
    """Random-number domains — each stream draws independently of the others."""

    GENERAL = 0
    ARRIVAL = 1
    SERVICE = 2
    FAILURE = 3
    REPAIR = 4
