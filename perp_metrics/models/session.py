"""Trade session model for grouped fills."""

from pydantic import BaseModel, Field, ConfigDict, model_validator

from .fill import FillSide


class TradeSession(BaseModel):
    """
    Consecutive same-asset, same-side fills folded into one row.

    Serialized with the field names the dashboard trade history reads
    (``coin`` and ``tradeCount``).
    """
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    asset: str = Field(alias="coin", description="Asset ticker")
    side: FillSide
    startTime: int = Field(description="First fill timestamp in milliseconds")
    endTime: int = Field(description="Last fill timestamp in milliseconds")
    totalSize: float = Field(description="Sum of member fill sizes")
    avgPrice: float = Field(description="Running mean of member fill prices")
    totalPnl: float = Field(description="Sum of member realized PnL")
    fillCount: int = Field(ge=1, alias="tradeCount", description="Number of fills")

    @model_validator(mode="after")
    def _check_bounds(self) -> "TradeSession":
        if self.startTime > self.endTime:
            raise ValueError("startTime must not be after endTime")
        return self
