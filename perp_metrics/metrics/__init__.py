from .normalizer import (
    normalize_fill,
    normalize_fills,
    get_side_policy,
    side_from_size_sign,
)
from .sessions import DEFAULT_SESSION_GAP_MS, group_sessions
from .windows import aggregate_windows
from .positions import (
    analyze_positions,
    normalize_position,
    position_bias,
    health_score,
    account_value_from_state,
)
from .stats import compute_trade_stats
from .facade import (
    require_address,
    compute_pnl_summary,
    compute_wallet_snapshot,
    compute_trade_stats_from_raw,
)

__all__ = [
    "normalize_fill",
    "normalize_fills",
    "get_side_policy",
    "side_from_size_sign",
    "DEFAULT_SESSION_GAP_MS",
    "group_sessions",
    "aggregate_windows",
    "analyze_positions",
    "normalize_position",
    "position_bias",
    "health_score",
    "account_value_from_state",
    "compute_trade_stats",
    "require_address",
    "compute_pnl_summary",
    "compute_wallet_snapshot",
    "compute_trade_stats_from_raw",
]
