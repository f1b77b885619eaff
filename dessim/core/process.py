"""Process — a generator-driven unit of cooperative work."""

from __future__ import annotations

import inspect
import logging
from typing import TYPE_CHECKING, Any, Callable, Generator

from dessim.core.enums import Priority
from dessim.core.events import Event
from dessim.core.exceptions import EventCancelled, Interrupt, ProtocolError

if TYPE_CHECKING:
    from dessim.engine.environment import Environment

logger = logging.getLogger(__name__)

ExitHook = Callable[["Process"], None]


class Process(Event):
    """Runs *generator*, suspending it on every Event it yields.

    A process is itself an Event: it succeeds with the generator's return
    value, or fails with the exception that escaped the generator.

    Resumption is always scheduled through the environment, never run
    inside the call that resolved the awaited event, so process code is
    never re-entered from a resource cascade.
    """

    __slots__ = ("name", "_generator", "_target", "_exit_hooks")

    def __init__(
        self,
        env: Environment,
        generator: Generator[Event, Any, Any],
        name: str | None = None,
    ) -> None:
        if not inspect.isgenerator(generator):
            raise TypeError(f"{generator!r} is not a generator")
        super().__init__(env)
        self.name = name or generator.__name__
        self._generator = generator
        self._target: Event | None = None
        self._exit_hooks: list[ExitHook] = []
        env.schedule(self._start, priority=Priority.URGENT)

    def __repr__(self) -> str:
        return f"<Process {self.name!r} {self.state.name.lower()}>"

    @property
    def target(self) -> Event | None:
        """The event this process is currently suspended on."""
        return self._target

    @property
    def is_alive(self) -> bool:
        return not self.resolved

    # -- exit hooks --

    def add_exit_hook(self, hook: ExitHook) -> None:
        """Run *hook(process)* when the process terminates, before its waiters."""
        self._exit_hooks.append(hook)

    def discard_exit_hook(self, hook: ExitHook) -> None:
        try:
            self._exit_hooks.remove(hook)
        except ValueError:
            pass

    def _on_resolved(self) -> None:
        hooks, self._exit_hooks = self._exit_hooks, []
        for hook in hooks:
            hook(self)

    # -- interruption --

    def interrupt(self, cause: Any = None) -> None:
        """Throw Interrupt(cause) into the process at the current time."""
        if self.resolved:
            raise ProtocolError(f"{self!r} has terminated and cannot be interrupted")
        if self is self.env.active_process:
            raise ProtocolError(f"{self!r} is not allowed to interrupt itself")
        self.env.schedule(lambda: self._deliver_interrupt(cause), priority=Priority.URGENT)

    def _deliver_interrupt(self, cause: Any) -> None:
        if self.resolved:
            return
        if self._target is not None:
            self._target.remove_callback(self._on_target)
            self._target = None
        logger.debug("%r interrupted (cause=%r)", self, cause)
        self._advance(None, Interrupt(cause))

    # -- stepping --

    def _start(self) -> None:
        self._advance(None, None)

    def _on_target(self, event: Event) -> None:
        self.env.schedule(lambda: self._resume(event))

    def _resume(self, event: Event) -> None:
        # An interrupt delivered in between supersedes this resumption.
        if self._target is not event:
            return
        self._target = None
        self._advance(event, None)

    def _advance(self, event: Event | None, throw: BaseException | None) -> None:
        env = self.env
        previous = env.active_process
        env._set_active_process(self)
        try:
            while True:
                try:
                    if throw is not None:
                        yielded = self._generator.throw(throw)
                    elif event is None:
                        yielded = self._generator.send(None)
                    elif event.ok:
                        yielded = self._generator.send(event.value)
                    elif event.cancelled:
                        yielded = self._generator.throw(EventCancelled(event))
                    else:
                        event.defused = True
                        yielded = self._generator.throw(event.value)
                except StopIteration as stop:
                    self.succeed(stop.value)
                    return
                except Exception as exc:
                    self._crash(exc)
                    return

                if not isinstance(yielded, Event):
                    event, throw = None, ProtocolError(
                        f"{self!r} yielded {yielded!r}, which is not an Event"
                    )
                    continue
                if yielded.resolved:
                    event, throw = yielded, None
                    continue
                self._target = yielded
                yielded.add_callback(self._on_target)
                return
        finally:
            env._set_active_process(previous)

    def _crash(self, exc: Exception) -> None:
        waited_on = bool(self.callbacks)
        self.fail(exc)
        if not waited_on:
            logger.error("%r failed with nobody waiting on it: %r", self, exc)
            raise exc
