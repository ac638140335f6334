"""Wallet snapshot model for API responses."""

from pydantic import BaseModel, Field, ConfigDict

from .position import Position, PositionBias


class WalletSnapshot(BaseModel):
    """Open positions of a wallet with portfolio-level risk figures."""
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    positions: list[Position] = Field(default_factory=list)
    totalUnrealizedPnl: float = Field(default=0.0, description="Sum of unrealized PnL")
    totalNotionalValue: float = Field(default=0.0, description="Long plus short notional")
    longNotional: float = Field(default=0.0, description="Notional of long positions")
    shortNotional: float = Field(default=0.0, description="Notional of short positions")
    netDelta: float = Field(default=0.0, description="Long minus short notional")
    positionBias: PositionBias = Field(
        default_factory=lambda: PositionBias(isLong=True, percentage=0)
    )
    accountValue: float = Field(default=0.0, description="Account value reported by the exchange")
    totalValue: float = Field(default=0.0, description="Account value plus unrealized PnL")
