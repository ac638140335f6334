"""Realized PnL over rolling time windows."""

from collections.abc import Sequence

from perp_metrics.models import Fill, PnLSummary
from .sessions import DEFAULT_SESSION_GAP_MS, group_sessions

HOUR_MS = 60 * 60 * 1000
DAY_MS = 24 * HOUR_MS

WINDOW_24H_MS = DAY_MS
WINDOW_7D_MS = 7 * DAY_MS
WINDOW_30D_MS = 30 * DAY_MS


def sum_pnl_since(fills: Sequence[Fill], since_ms: int) -> float:
    """Sum realized PnL of fills at or after ``since_ms``."""
    return sum(f.realizedPnl for f in fills if f.timestampMs >= since_ms)


def aggregate_windows(
    fills: Sequence[Fill],
    now_ms: int,
    gap_ms: int = DEFAULT_SESSION_GAP_MS,
) -> PnLSummary:
    """
    Compute realized PnL totals for the fixed windows.

    Args:
        fills: Normalized fills
        now_ms: Reference time in milliseconds; windows end here
        gap_ms: Session gap passed to the session grouper

    Returns:
        PnLSummary with all-time, 24h, 7d and 30d sums plus sessions
    """
    if now_ms < 0:
        raise ValueError(f"now_ms must be non-negative, got {now_ms}")

    return PnLSummary(
        totalPnl=sum(f.realizedPnl for f in fills),
        last24h=sum_pnl_since(fills, now_ms - WINDOW_24H_MS),
        last7d=sum_pnl_since(fills, now_ms - WINDOW_7D_MS),
        last30d=sum_pnl_since(fills, now_ms - WINDOW_30D_MS),
        sessions=group_sessions(fills, gap_ms),
    )
