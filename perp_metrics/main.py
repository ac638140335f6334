"""API server entry point."""

import logging

import uvicorn

from perp_metrics.app import create_app
from perp_metrics.config import Config

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: str) -> None:
    logging.basicConfig(level=level, format=LOG_FORMAT)
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)


def main():
    """Serve the metrics API with settings taken from the environment."""
    config = Config.from_env()
    configure_logging(config.log_level)

    uvicorn.run(
        create_app(config),
        host=config.host,
        port=config.port,
        log_level=config.log_level.lower(),
    )


if __name__ == "__main__":
    main()
