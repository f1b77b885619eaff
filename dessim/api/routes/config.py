"""GET /api/v1/config — expose simulation configuration."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from dessim.api.dependencies import get_engine_manager
from dessim.api.engine_manager import EngineManager
from dessim.api.schemas import SimulationConfigResponse

router = APIRouter()


@router.get("/config", response_model=SimulationConfigResponse)
def get_config(
    manager: EngineManager = Depends(get_engine_manager),
) -> SimulationConfigResponse:
    cfg = manager.config
    return SimulationConfigResponse(
        seed=cfg.seed,
        initial_time=cfg.initial_time,
        default_capacity=cfg.default_capacity,
        trace_events=cfg.trace_events,
        event_log_limit=cfg.event_log_limit,
        log_level=cfg.log_level,
    )
