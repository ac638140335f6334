"""FastAPI dependencies for dependency injection."""

from fastapi import Request

from perp_metrics.config import Config
from perp_metrics.datasources import DataSource


def get_datasource(request: Request) -> DataSource:
    """Get the datasource attached to the application at startup."""
    datasource = getattr(request.app.state, "datasource", None)
    if datasource is None:
        raise RuntimeError("DataSource not initialized. Create the app with create_app().")
    return datasource


def get_config(request: Request) -> Config:
    """Get the application configuration."""
    return request.app.state.config
