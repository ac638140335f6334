"""Application configuration."""

import os
from dataclasses import dataclass


@dataclass
class Config:
    """Application configuration loaded from environment variables."""

    # API settings
    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "INFO"

    # Hyperliquid API
    hyperliquid_api_url: str = "https://api.hyperliquid.xyz"
    request_timeout: float = 30.0
    max_retries: int = 10
    retry_delay: float = 2.0
    # Let the exchange merge partial fills of one order into one record
    aggregate_fills_by_time: bool = False

    # Aggregation
    session_gap_ms: int = 300_000
    # How to resolve a fill side the exchange did not report: sign, buy or sell
    unknown_side_policy: str = "sign"

    @classmethod
    def from_env(cls) -> "Config":
        """Load configuration from environment variables."""
        return cls(
            host=os.getenv("HOST", "0.0.0.0"),
            port=int(os.getenv("PORT", "8000")),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            hyperliquid_api_url=os.getenv(
                "HYPERLIQUID_API_URL",
                "https://api.hyperliquid.xyz"
            ),
            request_timeout=float(os.getenv("REQUEST_TIMEOUT", "30")),
            max_retries=int(os.getenv("MAX_RETRIES", "10")),
            retry_delay=float(os.getenv("RETRY_DELAY", "2.0")),
            aggregate_fills_by_time=os.getenv(
                "AGGREGATE_FILLS_BY_TIME", "false"
            ).lower() in ("1", "true", "yes"),
            session_gap_ms=int(os.getenv("SESSION_GAP_MS", "300000")),
            unknown_side_policy=os.getenv("UNKNOWN_SIDE_POLICY", "sign").lower(),
        )
