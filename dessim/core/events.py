"""Events: one-shot occurrences with ordered continuations."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable, Iterable

from dessim.core.enums import EventState
from dessim.core.exceptions import ProtocolError

if TYPE_CHECKING:
    from dessim.engine.environment import Environment

Callback = Callable[["Event"], None]


class Event:
    """A future happening that resolves exactly once.

    Continuations registered with ``add_callback`` run synchronously inside
    the resolving call (``succeed`` / ``fail`` / ``cancel``), in the order
    they were registered. Subclasses override ``_on_resolved`` to update
    their owner before any continuation observes the event.
    """

    __slots__ = ("env", "_state", "_value", "_callbacks", "defused")

    def __init__(self, env: Environment) -> None:
        self.env = env
        self._state = EventState.PENDING
        self._value: Any = None
        self._callbacks: list[Callback] = []
        # Set once a process has received the failure.
        self.defused = False

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self._state.name.lower()} at 0x{id(self):x}>"

    # -- state --

    @property
    def state(self) -> EventState:
        return self._state

    @property
    def resolved(self) -> bool:
        return self._state != EventState.PENDING

    @property
    def triggered(self) -> bool:
        """Alias of ``resolved``."""
        return self._state != EventState.PENDING

    @property
    def ok(self) -> bool:
        return self._state == EventState.SUCCEEDED

    @property
    def cancelled(self) -> bool:
        return self._state == EventState.CANCELLED

    @property
    def value(self) -> Any:
        """Success payload, or the exception of a failed event."""
        if self._state == EventState.PENDING:
            raise ProtocolError(f"{self!r} has no value yet")
        return self._value

    @property
    def callbacks(self) -> tuple[Callback, ...]:
        return tuple(self._callbacks)

    # -- continuations --

    def add_callback(self, callback: Callback) -> None:
        if self.resolved:
            raise ProtocolError(f"Cannot add a callback to {self!r}: already resolved")
        self._callbacks.append(callback)

    def remove_callback(self, callback: Callback) -> bool:
        """Detach *callback*. Returns False if it was not registered."""
        try:
            self._callbacks.remove(callback)
        except ValueError:
            return False
        return True

    # -- resolution --

    def succeed(self, value: Any = None) -> Event:
        self._resolve(EventState.SUCCEEDED, value)
        return self

    def fail(self, exception: BaseException) -> Event:
        if not isinstance(exception, BaseException):
            raise TypeError(f"{exception!r} is not an exception")
        self._resolve(EventState.FAILED, exception)
        return self

    def cancel(self) -> Event:
        self._resolve(EventState.CANCELLED, None)
        return self

    def _resolve(self, state: EventState, value: Any) -> None:
        if self._state != EventState.PENDING:
            raise ProtocolError(f"{self!r} already resolved")
        self._state = state
        self._value = value
        self._on_resolved()
        callbacks, self._callbacks = self._callbacks, []
        for callback in callbacks:
            callback(self)

    def _on_resolved(self) -> None:
        """Hook run after the state flips and before any continuation."""


class Timeout(Event):
    """Succeeds with *value* once *delay* units of virtual time have passed."""

    __slots__ = ("delay",)

    def __init__(self, env: Environment, delay: float, value: Any = None) -> None:
        if delay < 0:
            raise ValueError(f"Negative delay {delay}")
        super().__init__(env)
        self.delay = delay
        env.schedule(lambda: self._expire(value), delay)

    def _expire(self, value: Any) -> None:
        # A cancelled timeout just never fires.
        if not self.resolved:
            self.succeed(value)


class AnyOf(Event):
    """Succeeds with the first of *events* to resolve, whatever its outcome."""

    __slots__ = ("events",)

    def __init__(self, env: Environment, events: Iterable[Event]) -> None:
        super().__init__(env)
        self.events = tuple(events)
        if not self.events:
            raise ValueError("AnyOf needs at least one event")
        for event in self.events:
            if event.resolved:
                self.succeed(event)
                return
        for event in self.events:
            event.add_callback(self._check)

    def _check(self, event: Event) -> None:
        if not self.resolved:
            self.succeed(event)

    def _on_resolved(self) -> None:
        for event in self.events:
            if not event.resolved:
                event.remove_callback(self._check)
