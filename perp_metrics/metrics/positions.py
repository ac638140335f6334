"""
Open position normalization and portfolio-level risk figures.

Raw records come from the clearinghouse state, either wrapped as
``{"type": "oneWay", "position": {...}}`` or flat. Unparseable numbers are
read as 0 so one bad record never rejects the batch.
"""

import logging
from collections.abc import Iterable, Mapping
from typing import Any, Optional

from perp_metrics.models import (
    CumulativeFunding,
    Position,
    PositionBias,
    PositionSide,
    WalletSnapshot,
)
from .normalizer import UNKNOWN_ASSET, first_float, to_float

logger = logging.getLogger(__name__)

# Floor for the margin denominator of returnOnEquity
MARGIN_EPSILON = 1.0

_LONG_CODES = {"long", "b", "buy"}
_SHORT_CODES = {"short", "a", "s", "sell"}


def _num(value: Any) -> float:
    result = to_float(value)
    return 0.0 if result is None else result


def _unwrap(raw: Mapping[str, Any]) -> tuple[Mapping[str, Any], Mapping[str, Any]]:
    inner = raw.get("position")
    if isinstance(inner, Mapping):
        return raw, inner
    return raw, raw


def _asset(wrapper: Mapping[str, Any], position: Mapping[str, Any]) -> str:
    for source in (wrapper, position):
        for key in ("coin", "asset"):
            value = source.get(key)
            if isinstance(value, str) and value.strip():
                return value.strip()
    return UNKNOWN_ASSET


def _side(position: Mapping[str, Any], szi: float) -> PositionSide:
    explicit = position.get("side")
    if isinstance(explicit, str):
        code = explicit.strip().lower()
        if code in _LONG_CODES:
            return PositionSide.LONG
        if code in _SHORT_CODES:
            return PositionSide.SHORT
    return PositionSide.LONG if szi > 0 else PositionSide.SHORT


def _leverage(position: Mapping[str, Any]) -> float:
    raw = position.get("leverage")
    if isinstance(raw, Mapping):
        raw = raw.get("value")
    value = to_float(raw)
    if value is None or value <= 0:
        return 1.0
    return value


def _mark_price(position: Mapping[str, Any], szi: float, entry_price: float) -> float:
    mark = first_float(position, ("markPrice", "markPx"))
    if mark is not None and mark > 0:
        return mark
    position_value = to_float(position.get("positionValue"))
    if position_value is not None and szi != 0:
        return abs(position_value / szi)
    return entry_price


def _cumulative_funding(position: Mapping[str, Any]) -> CumulativeFunding:
    raw = position.get("cumFunding") or position.get("cumulativeFunding") or {}
    if not isinstance(raw, Mapping):
        raw = {}
    return CumulativeFunding(
        allTime=_num(raw.get("allTime")),
        sinceChange=_num(raw.get("sinceChange")),
        sinceOpen=_num(raw.get("sinceOpen")),
    )


def health_score(
    side: PositionSide,
    entry_price: float,
    mark_price: float,
    liquidation_price: float,
) -> float:
    """
    Percentage of the entry-to-liquidation distance still remaining.

    Long: (mark - liq) / (entry - liq) * 100, short mirrored, clamped to
    [0, 100]. A position with no liquidation price scores 100.
    """
    if liquidation_price <= 0:
        return 100.0

    if side == PositionSide.LONG:
        distance = entry_price - liquidation_price
        remaining = mark_price - liquidation_price
    else:
        distance = liquidation_price - entry_price
        remaining = liquidation_price - mark_price

    if distance <= 0:
        return 0.0 if remaining <= 0 else 100.0

    return max(0.0, min(100.0, remaining / distance * 100))


def normalize_position(raw: Mapping[str, Any]) -> Position:
    """Convert one raw asset position into a Position."""
    wrapper, position = _unwrap(raw)

    szi = _num(position.get("szi"))
    entry_price = abs(first_float(position, ("entryPx", "entryPrice")) or 0.0)

    size_usd = first_float(position, ("sizeUsd", "positionValue"))
    if size_usd is None:
        size_usd = szi * entry_price

    unrealized_pnl = _num(position.get("unrealizedPnl"))
    margin = first_float(position, ("marginUsed", "margin"))
    margin = abs(margin) if margin is not None else 0.0
    leverage = _leverage(position)

    max_leverage = to_float(position.get("maxLeverage"))
    if max_leverage is None or max_leverage <= 0:
        max_leverage = leverage

    side = _side(position, szi)
    mark_price = _mark_price(position, szi, entry_price)
    liquidation_price = abs(first_float(position, ("liquidationPx", "liquidationPrice")) or 0.0)

    return Position(
        asset=_asset(wrapper, position),
        side=side,
        sizeUsd=abs(size_usd),
        entryPrice=entry_price,
        markPrice=mark_price,
        liquidationPrice=liquidation_price,
        unrealizedPnl=unrealized_pnl,
        leverage=leverage,
        maxLeverage=max_leverage,
        marginUsd=margin,
        cumulativeFunding=_cumulative_funding(position),
        returnOnEquity=unrealized_pnl / max(margin, MARGIN_EPSILON),
        health=health_score(side, entry_price, mark_price, liquidation_price),
    )


def position_bias(long_notional: float, short_notional: float) -> PositionBias:
    """
    Dominant side and its rounded share of total notional.

    An empty book reports ``isLong=True`` with 0 percent by convention.
    """
    total = long_notional + short_notional
    if total == 0:
        return PositionBias(isLong=True, percentage=0)

    is_long = long_notional >= short_notional
    dominant = max(long_notional, short_notional)
    # Half-up rounding
    percentage = int(dominant / total * 100 + 0.5)
    return PositionBias(isLong=is_long, percentage=min(100, percentage))


def analyze_positions(
    raws: Iterable[Any],
    account_value_usd: float,
) -> WalletSnapshot:
    """
    Normalize raw positions and derive portfolio metrics.

    Args:
        raws: Raw asset position records
        account_value_usd: Account value reported by the exchange

    Returns:
        WalletSnapshot with totals, net delta and position bias
    """
    positions: list[Position] = []
    for raw in raws:
        if not isinstance(raw, Mapping):
            logger.debug(f"Skipping non-object position record: {raw!r}")
            continue
        positions.append(normalize_position(raw))

    total_unrealized_pnl = sum(p.unrealizedPnl for p in positions)
    long_notional = sum(p.sizeUsd for p in positions if p.is_long)
    short_notional = sum(p.sizeUsd for p in positions if not p.is_long)

    return WalletSnapshot(
        positions=positions,
        totalUnrealizedPnl=total_unrealized_pnl,
        totalNotionalValue=long_notional + short_notional,
        longNotional=long_notional,
        shortNotional=short_notional,
        netDelta=long_notional - short_notional,
        positionBias=position_bias(long_notional, short_notional),
        accountValue=account_value_usd,
        totalValue=account_value_usd + total_unrealized_pnl,
    )


def account_value_from_state(state: Optional[Mapping[str, Any]]) -> float:
    """Read ``marginSummary.accountValue`` from a clearinghouse state."""
    if not state:
        return 0.0
    margin_summary = state.get("marginSummary") or {}
    if not isinstance(margin_summary, Mapping):
        return 0.0
    return _num(margin_summary.get("accountValue"))
