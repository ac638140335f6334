from .base import DataSource
from .hyperliquid import HyperliquidDataSource

__all__ = [
    "DataSource",
    "HyperliquidDataSource",
]
