"""Trade aggregation and position metrics for Hyperliquid wallets."""

__version__ = "1.0.0"
