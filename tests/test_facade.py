import pytest

from perp_metrics.errors import MissingAddressError
from perp_metrics.metrics import (
    compute_pnl_summary,
    compute_trade_stats_from_raw,
    compute_wallet_snapshot,
    require_address,
)
from perp_metrics.models import FillSide, PositionBias


RAW_SCENARIO = [
    {"time": 0, "coin": "BTC", "side": "B", "sz": "1", "px": "100", "closedPnl": "0"},
    {"time": 60000, "coin": "BTC", "side": "B", "sz": "1", "px": "102", "closedPnl": "0"},
    {"time": 600000, "coin": "ETH", "side": "A", "sz": "2", "px": "3000", "closedPnl": "150"},
]


def test_end_to_end_scenario(scenario_fills):
    summary = compute_pnl_summary(scenario_fills, now_ms=600_000)

    assert summary.totalPnl == 150
    assert summary.last24h == 150
    assert summary.last7d == 150
    assert summary.last30d == 150

    eth, btc = summary.sessions
    assert (eth.asset, eth.side, eth.totalSize, eth.totalPnl) == ("ETH", FillSide.SELL, 2, 150)
    assert (btc.asset, btc.side, btc.totalSize, btc.totalPnl) == ("BTC", FillSide.BUY, 2, 0)
    assert btc.avgPrice == 101
    assert btc.fillCount == 2


def test_raw_and_normalized_inputs_agree(scenario_fills):
    assert compute_pnl_summary(RAW_SCENARIO, 600_000) == compute_pnl_summary(scenario_fills, 600_000)


def test_pnl_summary_is_deterministic():
    first = compute_pnl_summary(RAW_SCENARIO, 600_000)
    second = compute_pnl_summary(list(RAW_SCENARIO), 600_000)
    assert first == second


def test_wallet_snapshot_from_raw(clearinghouse_state):
    snapshot = compute_wallet_snapshot(clearinghouse_state["assetPositions"], 10000.0)
    assert len(snapshot.positions) == 2
    assert snapshot.netDelta == 19200.0


def test_zero_valued_results_for_empty_input():
    summary = compute_pnl_summary([], 1_000)
    assert (summary.totalPnl, summary.last24h, summary.sessions) == (0, 0, [])

    snapshot = compute_wallet_snapshot([], 0.0)
    assert snapshot.positionBias == PositionBias(isLong=True, percentage=0)
    assert snapshot.totalNotionalValue == 0


def test_trade_stats_from_raw():
    stats = compute_trade_stats_from_raw(RAW_SCENARIO, 600_000)
    assert stats.totalTrades == 1
    assert stats.bestTrade == 150
    assert stats.volume == 100 + 102 + 6000


@pytest.mark.parametrize("address", [None, "", "   ", 42])
def test_require_address_rejects_missing(address):
    with pytest.raises(MissingAddressError, match="Address is required"):
        require_address(address)


def test_require_address_strips():
    assert require_address(" 0xabc ") == "0xabc"
