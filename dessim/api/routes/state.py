"""GET /api/v1/state — environment, resource and trace data (polled by clients)."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query

from dessim.api.dependencies import get_engine_manager
from dessim.api.engine_manager import EngineManager
from dessim.api.schemas import EnvironmentStateResponse, EventSchema, ResourceSchema

router = APIRouter()


@router.get("/state", response_model=EnvironmentStateResponse)
def get_state(manager: EngineManager = Depends(get_engine_manager)) -> EnvironmentStateResponse:
    return EnvironmentStateResponse.from_snapshot(manager.get_snapshot(), steps=manager.steps)


@router.get("/resources/{name}", response_model=ResourceSchema)
def get_resource(name: str, manager: EngineManager = Depends(get_engine_manager)) -> ResourceSchema:
    snap = manager.get_snapshot().resource(name)
    if snap is None:
        raise HTTPException(status_code=404, detail=f"Unknown resource {name!r}.")
    return ResourceSchema.from_snapshot(snap)


@router.get("/events", response_model=list[EventSchema])
def get_events(
    since: float = Query(0.0, ge=0.0, description="Only records at or after this virtual time"),
    resource: str | None = Query(None, description="Only records of this resource"),
    manager: EngineManager = Depends(get_engine_manager),
) -> list[EventSchema]:
    return [
        EventSchema.from_event(e)
        for e in manager.get_events(since)
        if resource is None or e.resource == resource
    ]
