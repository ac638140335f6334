"""Trade statistics over closing fills."""

from collections.abc import Sequence

from perp_metrics.models import Fill, TradeStats
from .windows import WINDOW_30D_MS, sum_pnl_since


def compute_trade_stats(fills: Sequence[Fill], now_ms: int) -> TradeStats:
    """
    Calculate win rate, average and extreme trades for a wallet.

    Only closing fills count as trades. Best and worst trade are floored
    and capped at 0 so a wallet with no winners reports a best trade of 0.

    Args:
        fills: Normalized fills
        now_ms: Reference time in milliseconds for the 30 day window

    Returns:
        TradeStats
    """
    if now_ms < 0:
        raise ValueError(f"now_ms must be non-negative, got {now_ms}")

    all_time_pnl = sum(f.realizedPnl for f in fills)
    closing_pnls = [f.realizedPnl for f in fills if f.is_closing]
    closed_count = len(closing_pnls)
    profitable = sum(1 for pnl in closing_pnls if pnl > 0)

    return TradeStats(
        allTimePnl=all_time_pnl,
        thirtyDayPnl=sum_pnl_since(fills, now_ms - WINDOW_30D_MS),
        totalTrades=closed_count,
        winRate=profitable / (closed_count or 1) * 100,
        averageTrade=all_time_pnl / (closed_count or 1),
        bestTrade=max(closing_pnls + [0.0]),
        worstTrade=min(closing_pnls + [0.0]),
        feesPaid=sum(f.fee for f in fills),
        volume=sum(f.notional for f in fills),
    )
