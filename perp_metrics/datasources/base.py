"""Abstract base class for data sources."""

from abc import ABC, abstractmethod
from typing import Optional


class DataSource(ABC):
    """
    Source of raw exchange records for one wallet.

    Implementations hand back JSON exactly as received. Parsing into
    fills and positions is left to perp_metrics.metrics.
    """

    @abstractmethod
    async def get_user_fills(
        self,
        user: str,
        start_time_ms: Optional[int] = None,
        end_time_ms: Optional[int] = None,
    ) -> list[dict]:
        """
        Fetch every fill of a wallet between two times.

        Args:
            user: Wallet address
            start_time_ms: Earliest fill time in ms, None means from the first fill
            end_time_ms: Latest fill time in ms, None means up to now

        Returns:
            Raw fill objects ordered oldest first
        """

    @abstractmethod
    async def get_clearinghouse_state(self, user: str) -> dict:
        """
        Fetch the wallet's perpetuals account.

        Returns:
            Raw state holding assetPositions and marginSummary
        """

    async def close(self) -> None:
        """Release network resources held by the source."""
