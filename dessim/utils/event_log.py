"""Bounded log of resource trace records exposed via the API."""

from __future__ import annotations

import threading
from collections import deque
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class SimEvent:
    """A single resource trace record."""

    time: float
    category: str          # "request" | "admit" | "withdraw" | "release"
    resource: str
    message: str


class EventLog:
    """Ring buffer of trace records. Writers append; readers snapshot a slice.

    The simulation appends from whichever thread drives the environment;
    the API reads from request threads, hence the lock.
    """

    __slots__ = ("_buffer", "_lock")

    def __init__(self, limit: int = 10000) -> None:
        self._buffer: deque[SimEvent] = deque(maxlen=limit)
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._buffer)

    def append(self, event: SimEvent) -> None:
        with self._lock:
            self._buffer.append(event)

    def since(self, time: float) -> list[SimEvent]:
        """Return all records with time >= *time*."""
        with self._lock:
            return [e for e in self._buffer if e.time >= time]

    def latest(self, count: int = 50) -> list[SimEvent]:
        """Return the *count* most recent records."""
        with self._lock:
            items = list(self._buffer)
        return items[-count:]

    def categories(self, resource: str | None = None) -> list[str]:
        """Categories in order, optionally filtered by resource name."""
        with self._lock:
            return [e.category for e in self._buffer if resource is None or e.resource == resource]

    def clear(self) -> None:
        with self._lock:
            self._buffer.clear()
