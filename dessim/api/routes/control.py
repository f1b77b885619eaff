"""POST /api/v1/control/{action} — environment lifecycle controls."""

from __future__ import annotations

from enum import Enum

from fastapi import APIRouter, Depends, HTTPException, Query

from dessim.api.dependencies import get_engine_manager
from dessim.api.engine_manager import EngineManager
from dessim.api.schemas import ControlResponse
from dessim.core.exceptions import ModelError

router = APIRouter()


class ControlAction(str, Enum):
    step = "step"
    reset = "reset"


@router.post("/control/{action}", response_model=ControlResponse)
def control(
    action: ControlAction,
    manager: EngineManager = Depends(get_engine_manager),
) -> ControlResponse:
    match action:
        case ControlAction.step:
            try:
                stepped = manager.step()
            except ModelError as exc:
                raise HTTPException(status_code=500, detail=str(exc)) from exc
            now = manager.get_snapshot().now
            if not stepped:
                return ControlResponse(status="noop", message="Nothing scheduled.", now=now)
            return ControlResponse(status="ok", message="Single step executed.", now=now)

        case ControlAction.reset:
            manager.reset()
            now = manager.get_snapshot().now
            return ControlResponse(status="ok", message="Environment reset.", now=now)


@router.post("/run", response_model=ControlResponse)
def run_until(
    until: float = Query(..., description="Virtual time to advance to"),
    manager: EngineManager = Depends(get_engine_manager),
) -> ControlResponse:
    try:
        now = manager.run(until)
    except ModelError as exc:
        raise HTTPException(status_code=500, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return ControlResponse(status="ok", message=f"Ran to t={now:.3f}.", now=now)
