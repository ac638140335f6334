"""FastAPI application factory."""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from perp_metrics.config import Config
from perp_metrics.datasources import DataSource, HyperliquidDataSource
from perp_metrics.errors import MissingAddressError
from perp_metrics.metrics import get_side_policy
from perp_metrics.api import router

logger = logging.getLogger(__name__)


def create_app(
    config: Optional[Config] = None,
    datasource: Optional[DataSource] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        config: Application configuration. If None, loads from environment.
        datasource: Data source to serve from. If None, a Hyperliquid
            data source is built from the configuration.

    Returns:
        Configured FastAPI application
    """
    if config is None:
        config = Config.from_env()

    # Fail at startup on a misconfigured side policy
    get_side_policy(config.unknown_side_policy)

    if datasource is None:
        datasource = HyperliquidDataSource(
            api_url=config.hyperliquid_api_url,
            timeout=config.request_timeout,
            max_retries=config.max_retries,
            retry_delay=config.retry_delay,
            aggregate_by_time=config.aggregate_fills_by_time,
        )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan handler for startup/shutdown."""
        logger.info("Starting perp metrics API")
        logger.info(f"Using Hyperliquid API: {config.hyperliquid_api_url}")
        logger.info(f"Session gap: {config.session_gap_ms}ms, side policy: {config.unknown_side_policy}")

        yield

        logger.info("Shutting down...")
        await app.state.datasource.close()

    app = FastAPI(
        title="Perp Metrics API",
        description="Windowed PnL, trade sessions and position risk for Hyperliquid wallets",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.config = config
    app.state.datasource = datasource

    @app.exception_handler(MissingAddressError)
    async def missing_address_handler(request: Request, exc: MissingAddressError):
        return JSONResponse(status_code=400, content={"error": str(exc)})

    # Include API routes
    app.include_router(router)

    # Health check endpoint
    @app.get("/health")
    async def health_check():
        return {"status": "healthy"}

    return app
