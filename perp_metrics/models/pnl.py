"""PnL result models for API responses."""

from pydantic import BaseModel, Field, ConfigDict

from .session import TradeSession


class PnLSummary(BaseModel):
    """
    Realized PnL over rolling windows plus grouped trade sessions.

    Computed fresh on every request from the full fill history supplied.
    """
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    totalPnl: float = Field(description="Realized PnL over all fills")
    last24h: float = Field(description="Realized PnL in the last 24 hours")
    last7d: float = Field(description="Realized PnL in the last 7 days")
    last30d: float = Field(description="Realized PnL in the last 30 days")
    sessions: list[TradeSession] = Field(
        default_factory=list,
        alias="groupedTrades",
        description="Trade sessions, most recent first",
    )


class TradeStats(BaseModel):
    """Per-wallet trade statistics over closing fills."""
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    allTimePnl: float = Field(description="Realized PnL over all fills")
    thirtyDayPnl: float = Field(description="Realized PnL in the last 30 days")
    totalTrades: int = Field(description="Number of closing fills")
    winRate: float = Field(description="Share of profitable closing fills, 0-100")
    averageTrade: float = Field(description="All-time PnL per closing fill")
    bestTrade: float = Field(description="Largest closing PnL, floored at 0")
    worstTrade: float = Field(description="Smallest closing PnL, capped at 0")
    feesPaid: float = Field(default=0.0, description="Total fees paid")
    volume: float = Field(default=0.0, description="Total notional volume traded")
