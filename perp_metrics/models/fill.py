"""Fill model representing a single executed trade."""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field, ConfigDict


class FillSide(str, Enum):
    """Side of the fill."""
    BUY = "Buy"
    SELL = "Sell"


class Fill(BaseModel):
    """
    Canonical fill.

    Built once from a raw exchange payload by the normalizer and never
    mutated afterwards.
    """
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    timestampMs: int = Field(ge=0, description="Timestamp in milliseconds")
    asset: str = Field(min_length=1, description="Asset ticker")
    side: FillSide
    size: float = Field(ge=0, description="Absolute size in asset units")
    price: float = Field(ge=0, description="Execution price")
    realizedPnl: float = Field(default=0.0, description="Realized PnL, 0 for opening fills")
    fee: float = Field(default=0.0, description="Total fee")
    direction: Optional[str] = Field(default=None, description="Raw direction, e.g. 'Close Long'")

    @property
    def notional(self) -> float:
        """Get notional value of the fill."""
        return self.price * self.size

    @property
    def is_closing(self) -> bool:
        """Check if this fill closed (part of) a position."""
        if self.direction and self.direction.startswith("Close"):
            return True
        return self.realizedPnl != 0
