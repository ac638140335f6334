"""
Public entry points of the metrics engine.

Every function here is pure: callers fetch the raw payloads and hand them
in, and the same input always yields the same output.
"""

from collections.abc import Iterable
from typing import Any, Optional

from perp_metrics.errors import MissingAddressError
from perp_metrics.models import PnLSummary, TradeStats, WalletSnapshot
from .normalizer import RawFill, SidePolicy, normalize_fills, side_from_size_sign
from .positions import analyze_positions
from .sessions import DEFAULT_SESSION_GAP_MS
from .stats import compute_trade_stats
from .windows import aggregate_windows


def require_address(address: Optional[str]) -> str:
    """Return the stripped wallet address or raise MissingAddressError."""
    if not isinstance(address, str) or not address.strip():
        raise MissingAddressError()
    return address.strip()


def compute_pnl_summary(
    raw_fills: Iterable[RawFill],
    now_ms: int,
    gap_ms: int = DEFAULT_SESSION_GAP_MS,
    side_policy: SidePolicy = side_from_size_sign,
) -> PnLSummary:
    """Normalize raw fills and compute windowed PnL with sessions."""
    fills = normalize_fills(raw_fills, side_policy)
    return aggregate_windows(fills, now_ms, gap_ms)


def compute_wallet_snapshot(
    raw_positions: Iterable[Any],
    account_value_usd: float,
) -> WalletSnapshot:
    """Normalize raw positions and compute the portfolio snapshot."""
    return analyze_positions(raw_positions, account_value_usd)


def compute_trade_stats_from_raw(
    raw_fills: Iterable[RawFill],
    now_ms: int,
    side_policy: SidePolicy = side_from_size_sign,
) -> TradeStats:
    """Normalize raw fills and compute trade statistics."""
    return compute_trade_stats(normalize_fills(raw_fills, side_policy), now_ms)
