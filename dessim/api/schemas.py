"""Pydantic response models for the REST API."""

from __future__ import annotations

from pydantic import BaseModel

from dessim.core.snapshot import EnvironmentSnapshot, ResourceSnapshot
from dessim.utils.event_log import SimEvent


# --- Resources ---

class ResourceSchema(BaseModel):
    name: str
    capacity: int
    count: int
    waiting: int
    releasing: int = 0
    utilization: float = 0.0
    holders: list[str | None] = []

    @classmethod
    def from_snapshot(cls, snap: ResourceSnapshot) -> ResourceSchema:
        return cls(
            name=snap.name,
            capacity=snap.capacity,
            count=snap.count,
            waiting=snap.waiting,
            releasing=snap.releasing,
            utilization=snap.utilization,
            holders=list(snap.holders),
        )


# --- State ---

class EnvironmentStateResponse(BaseModel):
    now: float
    queued: int
    seed: int
    steps: int = 0
    resources: list[ResourceSchema] = []

    @classmethod
    def from_snapshot(cls, snap: EnvironmentSnapshot, steps: int = 0) -> EnvironmentStateResponse:
        return cls(
            now=snap.now,
            queued=snap.queued,
            seed=snap.seed,
            steps=steps,
            resources=[ResourceSchema.from_snapshot(r) for r in snap.resources],
        )


class EventSchema(BaseModel):
    time: float
    category: str
    resource: str
    message: str

    @classmethod
    def from_event(cls, event: SimEvent) -> EventSchema:
        return cls(time=event.time, category=event.category, resource=event.resource, message=event.message)


# --- Control ---

class ControlResponse(BaseModel):
    status: str
    message: str
    now: float


# --- Config ---

class SimulationConfigResponse(BaseModel):
    seed: int
    initial_time: float
    default_capacity: int
    trace_events: bool
    event_log_limit: int
    log_level: str
