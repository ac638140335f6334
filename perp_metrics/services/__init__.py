from .pnl_service import PnLService
from .position_service import PositionService

__all__ = [
    "PnLService",
    "PositionService",
]
