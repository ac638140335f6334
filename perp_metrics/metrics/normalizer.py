"""
Fill normalization.

Raw fills arrive with loosely-typed fields whose names differ between
endpoints (``px`` or ``price``, ``closedPnl`` or ``pnl`` ...). Each canonical
field is resolved from a fixed alias list, first present and parseable
alias wins, and malformed values fall back to a default instead of failing
the batch.
"""

import logging
import math
from collections.abc import Iterable, Mapping
from typing import Any, Callable, Optional, Union

from perp_metrics.models import Fill, FillSide

logger = logging.getLogger(__name__)

TIMESTAMP_ALIASES = ("time", "timestamp", "timeMs")
ASSET_ALIASES = ("coin", "asset", "symbol")
SIZE_ALIASES = ("sz", "size")
PRICE_ALIASES = ("px", "price")
PNL_ALIASES = ("closedPnl", "realizedPnl", "pnl")
FEE_ALIASES = ("fee",)
DIRECTION_ALIASES = ("dir", "direction")

UNKNOWN_ASSET = "UNKNOWN"

_BUY_CODES = {"b", "buy", "bid", "long", "1"}
_SELL_CODES = {"s", "a", "sell", "ask", "short", "-1"}

SidePolicy = Callable[[float], FillSide]
RawFill = Union[Mapping[str, Any], Fill]


def to_float(value: Any) -> Optional[float]:
    """Coerce a JSON scalar to a finite float, None if not possible."""
    if value is None or isinstance(value, bool):
        return None
    try:
        result = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(result):
        return None
    return result


def first_float(raw: Mapping[str, Any], aliases: Iterable[str]) -> Optional[float]:
    """Return the first alias that holds a parseable number."""
    for key in aliases:
        value = to_float(raw.get(key))
        if value is not None:
            return value
    return None


def _first_str(raw: Mapping[str, Any], aliases: Iterable[str]) -> Optional[str]:
    for key in aliases:
        value = raw.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return None


def _timestamp(raw: Mapping[str, Any]) -> Optional[int]:
    value = first_float(raw, TIMESTAMP_ALIASES)
    if value is None or value < 0:
        return None
    return int(value)


def side_from_size_sign(raw_size: float) -> FillSide:
    """Fallback: Sell when the raw size is negative, else Buy."""
    return FillSide.SELL if raw_size < 0 else FillSide.BUY


SIDE_POLICIES: dict[str, SidePolicy] = {
    "sign": side_from_size_sign,
    "buy": lambda _raw_size: FillSide.BUY,
    "sell": lambda _raw_size: FillSide.SELL,
}


def get_side_policy(name: str) -> SidePolicy:
    """Look up a fallback policy for fills with no recognizable side."""
    try:
        return SIDE_POLICIES[name]
    except KeyError:
        raise ValueError(
            f"Unknown side policy {name!r}, expected one of {sorted(SIDE_POLICIES)}"
        ) from None


def parse_side(value: Any) -> Optional[FillSide]:
    """Map an exchange side code to FillSide, None if unrecognized."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        if value == 1:
            return FillSide.BUY
        if value == -1:
            return FillSide.SELL
        return None
    code = str(value).strip().lower()
    if code in _BUY_CODES:
        return FillSide.BUY
    if code in _SELL_CODES:
        return FillSide.SELL
    return None


def normalize_fill(
    raw: RawFill,
    side_policy: SidePolicy = side_from_size_sign,
) -> Optional[Fill]:
    """
    Convert one raw fill record into a Fill.

    Args:
        raw: Raw fill JSON object (or an already normalized Fill)
        side_policy: Fallback used when the side code is absent or unknown

    Returns:
        Fill, or None when neither asset nor timestamp can be recovered
    """
    if isinstance(raw, Fill):
        return raw
    if not isinstance(raw, Mapping):
        logger.debug(f"Skipping non-object fill record: {raw!r}")
        return None

    timestamp = _timestamp(raw)
    asset = _first_str(raw, ASSET_ALIASES)
    if timestamp is None and asset is None:
        logger.debug(f"Skipping fill with no asset and no timestamp: {raw!r}")
        return None

    raw_size = first_float(raw, SIZE_ALIASES)
    if raw_size is None:
        logger.debug(f"Coercing missing size to 0 for fill {raw!r}")
        raw_size = 0.0

    side = parse_side(raw.get("side"))
    if side is None:
        side = side_policy(raw_size)

    return Fill(
        timestampMs=timestamp if timestamp is not None else 0,
        asset=asset or UNKNOWN_ASSET,
        side=side,
        size=abs(raw_size),
        price=abs(first_float(raw, PRICE_ALIASES) or 0.0),
        realizedPnl=first_float(raw, PNL_ALIASES) or 0.0,
        fee=first_float(raw, FEE_ALIASES) or 0.0,
        direction=_first_str(raw, DIRECTION_ALIASES),
    )


def normalize_fills(
    raws: Iterable[RawFill],
    side_policy: SidePolicy = side_from_size_sign,
) -> list[Fill]:
    """Normalize a batch of raw fills, omitting unrecoverable records."""
    fills: list[Fill] = []
    skipped = 0
    for raw in raws:
        fill = normalize_fill(raw, side_policy)
        if fill is None:
            skipped += 1
            continue
        fills.append(fill)

    if skipped:
        logger.info(f"Skipped {skipped} unrecoverable fill records")
    return fills
