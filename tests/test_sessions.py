import pytest

from perp_metrics.metrics import group_sessions
from perp_metrics.models import FillSide, TradeSession


def test_empty_input():
    assert group_sessions([]) == []


def test_single_fill(fill):
    sessions = group_sessions([fill(1000, price=50, pnl=2)])
    assert sessions == [
        TradeSession(
            asset="BTC",
            side=FillSide.BUY,
            startTime=1000,
            endTime=1000,
            totalSize=1.0,
            avgPrice=50.0,
            totalPnl=2.0,
            fillCount=1,
        )
    ]


def test_gap_beyond_default_splits(fill):
    sessions = group_sessions([fill(0), fill(400_001)])
    assert len(sessions) == 2


def test_gap_within_default_merges(fill):
    sessions = group_sessions([fill(0), fill(200_000)])
    assert len(sessions) == 1
    assert sessions[0].fillCount == 2
    assert sessions[0].endTime == 200_000


def test_gap_is_measured_from_session_start(fill):
    # Each step is 200s but the third fill is 400s after the session start
    sessions = group_sessions([fill(0), fill(200_000), fill(400_000)])
    assert [s.fillCount for s in sessions] == [1, 2]


def test_gap_boundary_is_inclusive(fill):
    assert len(group_sessions([fill(0), fill(300_000)])) == 1
    assert len(group_sessions([fill(0), fill(300_001)])) == 2


def test_custom_gap(fill):
    fills = [fill(0), fill(60_000)]
    assert len(group_sessions(fills, gap_ms=30_000)) == 2
    assert len(group_sessions(fills, gap_ms=60_000)) == 1


def test_negative_gap_rejected(fill):
    with pytest.raises(ValueError):
        group_sessions([fill(0)], gap_ms=-1)


def test_asset_or_side_change_splits(fill):
    sessions = group_sessions([
        fill(0, "BTC", FillSide.BUY),
        fill(1_000, "BTC", FillSide.SELL),
        fill(2_000, "ETH", FillSide.SELL),
        fill(3_000, "ETH", FillSide.SELL),
    ])
    assert [(s.asset, s.side, s.fillCount) for s in sessions] == [
        ("ETH", FillSide.SELL, 2),
        ("BTC", FillSide.SELL, 1),
        ("BTC", FillSide.BUY, 1),
    ]


def test_interleaved_assets_do_not_rejoin(fill):
    sessions = group_sessions([
        fill(0, "BTC"),
        fill(1_000, "ETH"),
        fill(2_000, "BTC"),
    ])
    assert len(sessions) == 3


def test_fold_sums_and_unweighted_mean(fill):
    sessions = group_sessions([
        fill(0, size=1, price=100, pnl=1.5),
        fill(10_000, size=3, price=110, pnl=-0.5),
        fill(20_000, size=4, price=120, pnl=2),
    ])
    (session,) = sessions
    assert session.totalSize == 8.0
    assert session.totalPnl == 3.0
    assert session.fillCount == 3
    # Plain mean of prices; a size-weighted mean would be 113.75
    assert session.avgPrice == pytest.approx(110.0)
    assert session.startTime == 0
    assert session.endTime == 20_000


def test_input_order_does_not_matter(fill):
    fills = [fill(0), fill(60_000), fill(900_000, "ETH")]
    assert group_sessions(fills) == group_sessions(list(reversed(fills)))


def test_output_most_recent_first(fill):
    sessions = group_sessions([fill(0, "BTC"), fill(1_000_000, "ETH"), fill(2_000_000, "SOL")])
    assert [s.startTime for s in sessions] == [2_000_000, 1_000_000, 0]


def test_regrouping_single_fill_sessions_is_stable(fill):
    fills = [
        fill(0, "BTC"),
        fill(1_000, "ETH"),
        fill(2_000, "BTC", FillSide.SELL),
        fill(1_000_000, "BTC"),
    ]
    sessions = group_sessions(fills)
    synthetic = [
        fill(s.startTime, s.asset, s.side, s.totalSize, s.avgPrice, s.totalPnl)
        for s in sessions
    ]
    assert len(group_sessions(synthetic)) == len(sessions)


def test_serializes_with_dashboard_field_names(fill):
    (session,) = group_sessions([fill(0)])
    data = session.model_dump(by_alias=True, mode="json")
    assert data["coin"] == "BTC"
    assert data["tradeCount"] == 1
    assert data["side"] == "Buy"
