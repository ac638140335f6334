from .fill import Fill, FillSide
from .session import TradeSession
from .position import (
    PositionSide,
    CumulativeFunding,
    Position,
    PositionBias,
)
from .pnl import PnLSummary, TradeStats
from .wallet import WalletSnapshot

__all__ = [
    "Fill",
    "FillSide",
    "TradeSession",
    "PositionSide",
    "CumulativeFunding",
    "Position",
    "PositionBias",
    "PnLSummary",
    "TradeStats",
    "WalletSnapshot",
]
