"""Position service for current open positions."""

import logging

from perp_metrics.datasources import DataSource
from perp_metrics.metrics import (
    account_value_from_state,
    compute_wallet_snapshot,
    require_address,
)
from perp_metrics.models import WalletSnapshot

logger = logging.getLogger(__name__)


class PositionService:
    """Service for querying a user's open positions."""

    def __init__(self, datasource: DataSource):
        self.datasource = datasource

    async def get_wallet_snapshot(self, user: str) -> WalletSnapshot:
        """
        Get user's current open positions with portfolio risk figures.

        Args:
            user: User address

        Returns:
            WalletSnapshot with positions, notional totals, net delta and bias
        """
        user = require_address(user)
        data = await self.datasource.get_clearinghouse_state(user)

        asset_positions = data.get("assetPositions") or []
        snapshot = compute_wallet_snapshot(
            asset_positions,
            account_value_from_state(data),
        )
        logger.info(f"Computed wallet snapshot for {user}: {len(snapshot.positions)} positions")
        return snapshot
