"""
Entry point for running the bootstrapper via `python -m tunnelkeeper`.

Starts the companion web server and the bootstrap pipeline on one event loop.
"""

import asyncio
import logging

import uvicorn

from .config import Config, config
from .logging_setup import configure_logging
from .orchestrator import Orchestrator
from .web import create_app

logger = logging.getLogger(__name__)


async def serve(cfg: Config):
    """Run the web server and the pipeline side by side."""
    server = uvicorn.Server(
        uvicorn.Config(
            create_app(cfg.assets_dir),
            host=cfg.host,
            port=cfg.port,
            log_config=None,
        )
    )
    server_task = asyncio.create_task(server.serve())
    logger.info(f"Web server starting on port {cfg.port}")

    exit_code = await Orchestrator(cfg).run()
    if exit_code is None:
        logger.warning("Tunnel is not running; web server stays up")
    await server_task


def main():
    """Run the bootstrapper."""
    configure_logging(config)
    logger.info(f"--- Identity: {config.identity} ---")
    asyncio.run(serve(config))


if __name__ == "__main__":
    main()
