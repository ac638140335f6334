"""Grouping of fills into trade sessions."""

from collections.abc import Iterable
from typing import Optional

from perp_metrics.models import Fill, FillSide, TradeSession

DEFAULT_SESSION_GAP_MS = 5 * 60 * 1000


class _OpenSession:
    """Mutable accumulator for the session currently being built."""

    def __init__(self, fill: Fill):
        self.asset = fill.asset
        self.side: FillSide = fill.side
        self.start_time = fill.timestampMs
        self.end_time = fill.timestampMs
        self.total_size = fill.size
        self.avg_price = fill.price
        self.total_pnl = fill.realizedPnl
        self.fill_count = 1

    def accepts(self, fill: Fill, gap_ms: int) -> bool:
        return (
            fill.timestampMs - self.start_time <= gap_ms
            and fill.asset == self.asset
            and fill.side == self.side
        )

    def add(self, fill: Fill) -> None:
        self.end_time = fill.timestampMs
        self.total_size += fill.size
        self.total_pnl += fill.realizedPnl
        # Unweighted mean of fill prices, not size-weighted
        self.avg_price = (self.avg_price * self.fill_count + fill.price) / (self.fill_count + 1)
        self.fill_count += 1

    def close(self) -> TradeSession:
        return TradeSession(
            asset=self.asset,
            side=self.side,
            startTime=self.start_time,
            endTime=self.end_time,
            totalSize=self.total_size,
            avgPrice=self.avg_price,
            totalPnl=self.total_pnl,
            fillCount=self.fill_count,
        )


def group_sessions(
    fills: Iterable[Fill],
    gap_ms: int = DEFAULT_SESSION_GAP_MS,
) -> list[TradeSession]:
    """
    Group fills into trade sessions.

    A fill joins the open session when it has the same asset and side and
    lands within ``gap_ms`` of the session's first fill. Anything else
    closes the open session and starts a new one.

    Args:
        fills: Fills in any order
        gap_ms: Maximum distance from the session start in milliseconds

    Returns:
        Sessions sorted by start time, most recent first
    """
    if gap_ms < 0:
        raise ValueError(f"gap_ms must be non-negative, got {gap_ms}")

    sessions: list[TradeSession] = []
    current: Optional[_OpenSession] = None

    for fill in sorted(fills, key=lambda f: f.timestampMs):
        if current is not None and current.accepts(fill, gap_ms):
            current.add(fill)
            continue
        if current is not None:
            sessions.append(current.close())
        current = _OpenSession(fill)

    if current is not None:
        sessions.append(current.close())

    sessions.sort(key=lambda s: s.startTime, reverse=True)
    return sessions
