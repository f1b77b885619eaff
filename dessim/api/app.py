"""FastAPI application factory with lifespan management."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from dessim.api.dependencies import set_engine_manager
from dessim.api.engine_manager import EngineManager
from dessim.api.routes import api_router
from dessim.config import SimulationConfig
from dessim.utils.loader import SetupFunc
from dessim.utils.logging import setup_logging

logger = logging.getLogger(__name__)


def create_app(config: SimulationConfig | None = None, setup: SetupFunc | None = None) -> FastAPI:
    """Build and return the fully-configured FastAPI application.

    *setup* is called with a fresh Environment on startup and on every
    reset; it creates the resources and processes of the model.
    """
    if config is None:
        config = SimulationConfig()

    _config = config.validate()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        setup_logging(_config.log_level)
        manager = EngineManager(_config, setup)
        set_engine_manager(manager)
        logger.info("API server started — environment ready at t=%.3f.", _config.initial_time)
        yield
        set_engine_manager(None)
        logger.info("API server shutting down.")

    app = FastAPI(
        title="dessim",
        description=(
            "Discrete-event simulation with FIFO-fair shared resources — inspection API.\n\n"
            "## API Groups\n\n"
            "- **State** — Virtual time, queue size, resource occupancy and the resource trace\n"
            "- **Control** — Step, run to a time, reset\n"
            "- **Config** — Read-only simulation configuration\n"
        ),
        version="0.1.0",
        lifespan=lifespan,
        openapi_tags=[
            {"name": "State", "description": "Environment and resource snapshots; resource trace records."},
            {"name": "Control", "description": "Advance the environment one step or to a virtual time, or rebuild it."},
            {"name": "Config", "description": "Read-only simulation configuration parameters."},
        ],
    )

    # CORS: allow any origin in dev
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(api_router)

    return app
