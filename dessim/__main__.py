"""Entry point: ``python -m dessim``.

Supports two modes:
  - ``python -m dessim run --setup pkg.mod:func``    → Headless run, logs resource occupancy
  - ``python -m dessim serve --setup pkg.mod:func``  → Inspection/control API over HTTP

The setup function receives a fresh Environment and creates the model's
resources and processes on it.
"""

from __future__ import annotations

import argparse
import logging
import sys

from dessim.config import LOG_LEVELS

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Discrete-event simulation with FIFO-fair resources")
    sub = parser.add_subparsers(dest="command")

    # --- Headless mode ---
    run = sub.add_parser("run", help="Run a model headless and report resource occupancy")
    run.add_argument("--setup", type=str, required=True, help="module:function building the model")
    run.add_argument("--until", type=float, default=None, help="Virtual time to stop at (default: drain)")
    run.add_argument("--seed", type=int, default=42)
    run.add_argument("--log-level", type=str, default="INFO", choices=list(LOG_LEVELS))

    # --- Server mode ---
    srv = sub.add_parser("serve", help="Start the inspection API server")
    srv.add_argument("--setup", type=str, default=None, help="module:function building the model")
    srv.add_argument("--host", type=str, default="127.0.0.1")
    srv.add_argument("--port", type=int, default=8000)
    srv.add_argument("--seed", type=int, default=42)
    srv.add_argument("--log-level", type=str, default="INFO", choices=list(LOG_LEVELS))

    return parser


def _run_headless(args: argparse.Namespace) -> int:
    from dessim.config import SimulationConfig
    from dessim.engine.environment import Environment
    from dessim.utils.loader import load_setup
    from dessim.utils.logging import bind_clock, setup_logging

    config = SimulationConfig(seed=args.seed, log_level=args.log_level).validate()
    setup_logging(config.log_level)

    setup = load_setup(args.setup)
    env = Environment(config)
    bind_clock(lambda: env.now)
    setup(env)
    logger.info("Model %s built: %d resources", args.setup, len(env.resources))

    env.run(args.until)

    logger.info("Simulation stopped at t=%.3f", env.now)
    for snap in env.resource_snapshots():
        logger.info(
            "%-20s %d/%d held, %d waiting (utilization %.0f%%)",
            snap.name, snap.count, snap.capacity, snap.waiting, snap.utilization * 100,
        )
    return 0


def _run_server(args: argparse.Namespace) -> int:
    import uvicorn

    from dessim.api.app import create_app
    from dessim.config import SimulationConfig
    from dessim.utils.loader import load_setup

    config = SimulationConfig(
        seed=args.seed,
        log_level=args.log_level,
        host=args.host,
        port=args.port,
    )
    setup = load_setup(args.setup) if args.setup else None
    app = create_app(config, setup)
    uvicorn.run(app, host=config.host, port=config.port, log_level=config.log_level.lower())
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command == "run":
        return _run_headless(args)
    if args.command == "serve":
        return _run_server(args)
    parser.print_help()
    return 2


if __name__ == "__main__":
    sys.exit(main())
