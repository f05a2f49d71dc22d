from __future__ import annotations

import logging

import uvicorn

from .app import create_app
from .config import AppConfig, setup_logging

logger = logging.getLogger(__name__)


def run_server() -> None:
    """Run the Dining Match API with uvicorn."""
    config = AppConfig()
    setup_logging(config)

    logger.info("Dining Match API starting on http://%s:%d", config.host, config.port)
    logger.info("Environment: %s", config.environment)

    uvicorn.run(
        create_app(config),
        host=config.host,
        port=config.port,
        log_level=config.log_level.lower(),
    )


if __name__ == "__main__":
    run_server()
