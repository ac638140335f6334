import pytest

from perp_metrics.models import Fill, FillSide


def make_fill(t, asset="BTC", side=FillSide.BUY, size=1.0, price=100.0, pnl=0.0, **extra):
    return Fill(
        timestampMs=t,
        asset=asset,
        side=side,
        size=size,
        price=price,
        realizedPnl=pnl,
        **extra,
    )


@pytest.fixture
def scenario_fills():
    """Two BTC buys a minute apart and an ETH sell ten minutes in."""
    return [
        make_fill(0, "BTC", FillSide.BUY, 1, 100, 0),
        make_fill(60_000, "BTC", FillSide.BUY, 1, 102, 0),
        make_fill(600_000, "ETH", FillSide.SELL, 2, 3000, 150),
    ]


@pytest.fixture
def clearinghouse_state():
    """Clearinghouse state shaped like the Hyperliquid info endpoint reply."""
    return {
        "assetPositions": [
            {
                "type": "oneWay",
                "position": {
                    "coin": "BTC",
                    "szi": "0.5",
                    "entryPx": "60000.0",
                    "positionValue": "32000.0",
                    "unrealizedPnl": "2000.0",
                    "returnOnEquity": "0.5",
                    "liquidationPx": "40000.0",
                    "marginUsed": "4000.0",
                    "maxLeverage": 50,
                    "leverage": {"type": "cross", "value": 8},
                    "cumFunding": {"allTime": "-12.5", "sinceChange": "-2.0", "sinceOpen": "-3.0"},
                },
            },
            {
                "type": "oneWay",
                "position": {
                    "coin": "ETH",
                    "szi": "-4.0",
                    "entryPx": "3000.0",
                    "positionValue": "12800.0",
                    "unrealizedPnl": "-800.0",
                    "liquidationPx": "3500.0",
                    "marginUsed": "1200.0",
                    "maxLeverage": 25,
                    "leverage": {"type": "isolated", "value": 10},
                    "cumFunding": {"allTime": "4.0", "sinceChange": "1.0", "sinceOpen": "1.0"},
                },
            },
        ],
        "marginSummary": {
            "accountValue": "10000.0",
            "totalMarginUsed": "5200.0",
            "totalNtlPos": "44800.0",
            "totalRawUsd": "10000.0",
        },
        "withdrawable": "4800.0",
        "time": 1766449358096,
    }


@pytest.fixture
def fill():
    """Factory for normalized fills."""
    return make_fill
