"""Capacity-limited shared resources with FIFO-strict admission.

A Resource keeps three collections:
  - pending_requests — Requests not yet resolved, in arrival order
  - pending_releases — Releases not yet resolved, in arrival order
  - holders          — admitted Requests whose Release has not resolved

Resolving a Release frees a slot and cascades admission through
pending_requests; resolving a Request cascades through pending_releases.
Both cascades walk a copy of their queue, skip entries resolved while the
walk is in progress, and stop at the first entry that stays unresolved.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Callable

from dessim.core.events import Event
from dessim.core.exceptions import ConfigurationError, ProtocolError
from dessim.core.snapshot import ResourceSnapshot
from dessim.utils.event_log import SimEvent

if TYPE_CHECKING:
    from dessim.core.process import Process
    from dessim.engine.environment import Environment

logger = logging.getLogger(__name__)

Predicate = Callable[[Any], bool]
AllocationStrategy = Callable[["Resource", "Request"], "tuple[bool, Any]"]


def capacity_slot(resource: Resource, request: Request) -> tuple[bool, Any]:
    """Grant an anonymous slot whenever one is free."""
    return len(resource.holders) < resource.capacity, None


class Request(Event):
    """Asks for one slot of *resource*.

    Succeeds with the granted member (``None`` for plain capacity) once
    admitted. Used as a context manager, leaving the block releases it:

        with resource.request() as req:
            yield req
            ...
    """

    __slots__ = ("resource", "predicate", "owner", "_exit_hook")

    def __init__(self, resource: Resource, predicate: Predicate | None = None) -> None:
        super().__init__(resource.env)
        self.resource = resource
        self.predicate = predicate
        self.owner: Process | None = resource.env.active_process
        self._exit_hook: Callable[[Process], None] | None = None
        if self.owner is not None:
            self._exit_hook = self._owner_exited
            self.owner.add_exit_hook(self._exit_hook)

    def __repr__(self) -> str:
        who = self.owner.name if self.owner is not None else "-"
        return f"<Request {self.resource.name}:{who} {self.state.name.lower()}>"

    def __enter__(self) -> Request:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.dispose()

    def dispose(self) -> Release:
        """Give the slot back, or withdraw the request if it is still waiting."""
        return self.resource.release(self)

    def _owner_exited(self, process: Process) -> None:
        self._exit_hook = None
        self.resource._abandon(self)

    def _unbind(self) -> None:
        if self.owner is not None and self._exit_hook is not None:
            self.owner.discard_exit_hook(self._exit_hook)
            self._exit_hook = None

    def _on_resolved(self) -> None:
        self.resource._request_resolved(self)


class Release(Event):
    """Returns the slot held by *request*. Always succeeds."""

    __slots__ = ("resource", "request")

    def __init__(self, resource: Resource, request: Request) -> None:
        super().__init__(resource.env)
        self.resource = resource
        self.request = request

    def __repr__(self) -> str:
        return f"<Release of {self.request!r} {self.state.name.lower()}>"

    def _on_resolved(self) -> None:
        self.resource._release_resolved(self)


class Resource:
    """A fixed number of interchangeable slots shared by many processes.

    Admission is strictly first-come first-served: a later Request is never
    admitted while an earlier one is still waiting. The admission check is
    delegated to *strategy*; the default grants an anonymous slot whenever
    fewer than *capacity* requests hold one.
    """

    __slots__ = (
        "env",
        "name",
        "_capacity",
        "_strategy",
        "_pending_requests",
        "_pending_releases",
        "_holders",
    )

    def __init__(
        self,
        env: Environment,
        capacity: int = 1,
        name: str | None = None,
        strategy: AllocationStrategy | None = None,
    ) -> None:
        if isinstance(capacity, bool) or not isinstance(capacity, int) or capacity <= 0:
            raise ConfigurationError(f"Capacity must be a positive integer, got {capacity!r}")
        self.env = env
        # Numbered per environment so a rebuilt model gets the same names.
        self.name = name or f"resource-{len(env.resources) + 1}"
        self._capacity = capacity
        self._strategy: AllocationStrategy = strategy or capacity_slot
        self._pending_requests: list[Request] = []
        self._pending_releases: list[Release] = []
        self._holders: list[Request] = []
        env.register_resource(self)

    def __repr__(self) -> str:
        return (
            f"<Resource {self.name!r} {len(self._holders)}/{self._capacity} "
            f"waiting={len(self._pending_requests)}>"
        )

    # -- public properties --

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def count(self) -> int:
        """Number of slots currently held."""
        return len(self._holders)

    @property
    def available(self) -> int:
        return self._capacity - len(self._holders)

    @property
    def holders(self) -> tuple[Request, ...]:
        return tuple(self._holders)

    @property
    def pending_requests(self) -> tuple[Request, ...]:
        return tuple(self._pending_requests)

    @property
    def pending_releases(self) -> tuple[Release, ...]:
        return tuple(self._pending_releases)

    # -- operations --

    def request(self, predicate: Predicate | None = None) -> Request:
        """Issue a Request; it is admitted before returning if a slot is free."""
        request = Request(self, predicate)
        self._pending_requests.append(request)
        self._trace("request", f"{request!r} queued at position {len(self._pending_requests)}")
        # Only the head of the queue may be admitted on arrival.
        if self._pending_requests[0] is request:
            self._do_request(request)
        return request

    def release(self, request: Request) -> Release:
        """Return *request*'s slot, or withdraw it if it was never admitted.

        Releasing a request that is neither waiting nor holding is a no-op
        that still yields a succeeded Release.
        """
        if not isinstance(request, Request) or request.resource is not self:
            raise ProtocolError(f"{request!r} was not issued by {self!r}")
        release = Release(self, request)
        self._pending_releases.append(release)
        self._do_release(release)
        return release

    def snapshot(self) -> ResourceSnapshot:
        return ResourceSnapshot(
            name=self.name,
            capacity=self._capacity,
            count=len(self._holders),
            waiting=len(self._pending_requests),
            releasing=len(self._pending_releases),
            holders=tuple(r.owner.name if r.owner is not None else None for r in self._holders),
        )

    # -- admission --

    def _do_request(self, request: Request) -> None:
        if request.resolved:
            return
        granted, member = self._strategy(self, request)
        if not granted:
            return
        if len(self._holders) >= self._capacity:
            raise ProtocolError(f"Allocation strategy of {self!r} granted beyond capacity")
        self._holders.append(request)
        self._trace("admit", f"{request!r} admitted ({len(self._holders)}/{self._capacity})")
        request.succeed(member)

    def _do_release(self, release: Release) -> None:
        if release.resolved:
            return
        request = release.request
        withdrawn = False
        if not request.resolved and request in self._pending_requests:
            self._pending_requests.remove(request)
            withdrawn = True
        held = request in self._holders
        if held:
            self._holders.remove(request)
        if held or withdrawn:
            request._unbind()
            self._trace(
                "release" if held else "withdraw",
                f"{request!r} {'released' if held else 'withdrawn'} "
                f"({len(self._holders)}/{self._capacity})",
            )
        release.succeed()
        if release in self._pending_releases:
            self._pending_releases.remove(release)
        if withdrawn:
            # Keeps "pending iff unresolved": a withdrawn request ends cancelled.
            request.cancel()

    def _abandon(self, request: Request) -> None:
        """Owner terminated: give back whatever *request* still occupies."""
        if request in self._holders or request in self._pending_requests:
            logger.debug("%r abandoned by its terminated owner", request)
            self.release(request)

    # -- cascades --

    def _request_resolved(self, request: Request) -> None:
        queued = request in self._pending_requests
        if queued:
            self._pending_requests.remove(request)
        if request.ok:
            if request not in self._holders:
                raise ProtocolError(f"{request!r} was resolved outside of {self!r}")
        else:
            request._unbind()
            if queued:
                self._trace("withdraw", f"{request!r} left the queue")
            self._trigger_requests()
        self._trigger_releases()

    def _release_resolved(self, release: Release) -> None:
        if release in self._pending_releases:
            self._pending_releases.remove(release)
        self._trigger_requests()

    def _trigger_requests(self) -> None:
        for request in list(self._pending_requests):
            if request.resolved or request not in self._pending_requests:
                continue
            self._do_request(request)
            if not request.resolved:
                break

    def _trigger_releases(self) -> None:
        for release in list(self._pending_releases):
            if release.resolved or release not in self._pending_releases:
                continue
            self._do_release(release)
            if not release.resolved:
                break

    def _trace(self, category: str, message: str) -> None:
        logger.debug("[t=%.3f] %s: %s", self.env.now, self.name, message)
        log = self.env.event_log
        if log is not None:
            log.append(SimEvent(time=self.env.now, category=category, resource=self.name, message=message))
