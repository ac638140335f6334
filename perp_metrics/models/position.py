"""Position models for open exposure snapshots."""

from enum import Enum
from pydantic import BaseModel, Field, ConfigDict


class PositionSide(str, Enum):
    """Direction of an open position."""
    LONG = "Long"
    SHORT = "Short"


class CumulativeFunding(BaseModel):
    """Cumulative funding information."""
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    allTime: float = Field(default=0.0, description="All-time cumulative funding")
    sinceChange: float = Field(default=0.0, description="Funding since last change")
    sinceOpen: float = Field(default=0.0, description="Funding since position opened")


class Position(BaseModel):
    """
    Normalized open position.

    A snapshot of exchange state at fetch time. Replaced wholesale on every
    refresh.
    """
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    asset: str = Field(description="Asset symbol")
    side: PositionSide
    sizeUsd: float = Field(ge=0, description="Absolute notional value in USD")
    entryPrice: float = Field(ge=0, description="Entry price")
    markPrice: float = Field(ge=0, description="Mark price")
    liquidationPrice: float = Field(ge=0, description="Liquidation price, 0 if none")
    unrealizedPnl: float = Field(description="Unrealized PnL")
    leverage: float = Field(gt=0, description="Current leverage")
    maxLeverage: float = Field(gt=0, description="Maximum allowed leverage")
    marginUsd: float = Field(ge=0, description="Margin used for position")
    cumulativeFunding: CumulativeFunding = Field(default_factory=CumulativeFunding)
    returnOnEquity: float = Field(description="Unrealized PnL over margin")
    health: float = Field(ge=0, le=100, description="Remaining distance to liquidation, 0-100")

    @property
    def is_long(self) -> bool:
        """Check if position is long."""
        return self.side == PositionSide.LONG


class PositionBias(BaseModel):
    """Dominant side of the book and its share of total notional."""
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    isLong: bool = Field(description="True if long notional dominates (or book is empty)")
    percentage: int = Field(ge=0, le=100, description="Dominant side share, rounded")
