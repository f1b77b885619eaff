"""Immutable snapshots of resource and environment state."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from dessim.engine.environment import Environment


@dataclass(frozen=True, slots=True)
class ResourceSnapshot:
    """Read-only view of one resource, safe to hand to other threads."""

    name: str
    capacity: int
    count: int
    waiting: int
    releasing: int
    holders: tuple[str | None, ...] = ()

    @property
    def utilization(self) -> float:
        return self.count / self.capacity


@dataclass(frozen=True, slots=True)
class EnvironmentSnapshot:
    """Read-only view of an environment between two steps."""

    now: float
    queued: int
    seed: int
    resources: tuple[ResourceSnapshot, ...]

    @classmethod
    def from_environment(cls, env: Environment) -> EnvironmentSnapshot:
        return cls(
            now=env.now,
            queued=env.queued,
            seed=env.config.seed,
            resources=tuple(env.resource_snapshots()),
        )

    def resource(self, name: str) -> ResourceSnapshot | None:
        for snap in self.resources:
            if snap.name == name:
                return snap
        return None
