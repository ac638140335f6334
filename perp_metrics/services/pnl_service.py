"""PnL service for windowed realized PnL, sessions and trade stats."""

import logging
import time
from typing import Optional

from perp_metrics.datasources import DataSource
from perp_metrics.metrics import (
    DEFAULT_SESSION_GAP_MS,
    compute_pnl_summary,
    compute_trade_stats_from_raw,
    require_address,
    side_from_size_sign,
)
from perp_metrics.metrics.normalizer import SidePolicy
from perp_metrics.models import PnLSummary, TradeStats

logger = logging.getLogger(__name__)


def current_time_ms() -> int:
    """Wall clock in epoch milliseconds."""
    return int(time.time() * 1000)


class PnLService:
    """Service for calculating PnL metrics from a user's fill history."""

    def __init__(
        self,
        datasource: DataSource,
        gap_ms: int = DEFAULT_SESSION_GAP_MS,
        side_policy: SidePolicy = side_from_size_sign,
    ):
        self.datasource = datasource
        self.gap_ms = gap_ms
        self.side_policy = side_policy

    async def get_pnl_summary(
        self,
        user: str,
        now_ms: Optional[int] = None,
    ) -> PnLSummary:
        """
        Calculate windowed PnL and trade sessions for a user.

        Args:
            user: User address
            now_ms: Reference time in milliseconds, defaults to the wall clock

        Returns:
            PnLSummary with total, 24h, 7d, 30d PnL and grouped trades
        """
        user = require_address(user)
        raw_fills = await self.datasource.get_user_fills(user=user)

        if now_ms is None:
            now_ms = current_time_ms()

        summary = compute_pnl_summary(
            raw_fills,
            now_ms=now_ms,
            gap_ms=self.gap_ms,
            side_policy=self.side_policy,
        )
        logger.info(
            f"Computed PnL summary for {user}: {len(raw_fills)} fills, "
            f"{len(summary.sessions)} sessions"
        )
        return summary

    async def get_trade_stats(
        self,
        user: str,
        now_ms: Optional[int] = None,
    ) -> TradeStats:
        """
        Calculate win rate, best/worst trade and volume for a user.

        Args:
            user: User address
            now_ms: Reference time in milliseconds, defaults to the wall clock

        Returns:
            TradeStats over the user's closing fills
        """
        user = require_address(user)
        raw_fills = await self.datasource.get_user_fills(user=user)

        if now_ms is None:
            now_ms = current_time_ms()

        return compute_trade_stats_from_raw(raw_fills, now_ms, self.side_policy)
