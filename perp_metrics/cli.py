#!/usr/bin/env python3
"""
Hyperliquid wallet report.

Prints windowed PnL, trade statistics, recent trade sessions and open
positions for a wallet.

Usage:
    perp-metrics <user_address> [--gap-minutes=5] [--max-sessions=10]

Example:
    perp-metrics 0x123... --gap-minutes=15 --show-all
"""

import argparse
import asyncio
import sys
from datetime import datetime, timezone
from typing import Optional

from tabulate import tabulate

from perp_metrics.config import Config
from perp_metrics.main import configure_logging
from perp_metrics.datasources import HyperliquidDataSource
from perp_metrics.metrics import (
    account_value_from_state,
    compute_pnl_summary,
    compute_trade_stats_from_raw,
    compute_wallet_snapshot,
    get_side_policy,
)
from perp_metrics.models import PnLSummary, TradeSession, TradeStats, WalletSnapshot
from perp_metrics.services.pnl_service import current_time_ms


def format_timestamp(time_ms: int) -> str:
    """Format timestamp for display"""
    dt = datetime.fromtimestamp(time_ms / 1000, tz=timezone.utc)
    return dt.strftime('%Y-%m-%d %H:%M:%S')


def format_amount(amount: float) -> str:
    """Format signed USD amount"""
    if amount >= 0:
        return f"+${amount:,.2f}"
    else:
        return f"-${abs(amount):,.2f}"


def print_pnl(summary: PnLSummary, stats: TradeStats):
    """Print PnL windows and trade statistics"""
    print("=" * 80)
    print("PNL SUMMARY")
    print("=" * 80)
    print(f"  All time:  {format_amount(summary.totalPnl):>15}")
    print(f"  Last 24h:  {format_amount(summary.last24h):>15}")
    print(f"  Last 7d:   {format_amount(summary.last7d):>15}")
    print(f"  Last 30d:  {format_amount(summary.last30d):>15}")
    print()
    print(f"  Closed trades: {stats.totalTrades}")
    print(f"  Win rate:      {stats.winRate:.1f}%")
    print(f"  Average trade: {format_amount(stats.averageTrade)}")
    print(f"  Best trade:    {format_amount(stats.bestTrade)}")
    print(f"  Worst trade:   {format_amount(stats.worstTrade)}")
    print(f"  Fees paid:     ${stats.feesPaid:,.2f}")
    print(f"  Volume:        ${stats.volume:,.2f}")
    print()


def print_sessions(sessions: list[TradeSession], max_show: int = 10):
    """Print trade session table"""
    if not sessions:
        print("No trade history available")
        return

    print(f"\nTRADE SESSIONS ({len(sessions)} total, showing {min(len(sessions), max_show)}):")
    print("-" * 80)

    table_data = []
    for session in sessions[:max_show]:
        table_data.append([
            format_timestamp(session.startTime),
            session.asset,
            session.side.value,
            f"{session.totalSize:,.4f}",
            f"${session.avgPrice:,.2f}",
            format_amount(session.totalPnl),
            session.fillCount,
        ])

    print(tabulate(
        table_data,
        headers=["Start", "Asset", "Side", "Size", "Avg. Price", "PnL", "Count"],
        tablefmt="grid"
    ))


def print_positions(snapshot: WalletSnapshot):
    """Print open positions and portfolio figures"""
    print("\nOPEN POSITIONS")
    print("-" * 80)

    if snapshot.positions:
        table_data = [
            [
                p.asset,
                p.side.value,
                f"${p.sizeUsd:,.2f}",
                f"${p.entryPrice:,.2f}",
                f"${p.liquidationPrice:,.2f}",
                format_amount(p.unrealizedPnl),
                f"{p.returnOnEquity * 100:.1f}%",
                f"{p.leverage:g}x",
                f"{p.health:.0f}",
            ]
            for p in sorted(snapshot.positions, key=lambda p: p.sizeUsd, reverse=True)
        ]
        print(tabulate(
            table_data,
            headers=["Asset", "Side", "Size (USD)", "Entry", "Liq. Price", "uPnL", "ROE", "Lev", "Health"],
            tablefmt="grid"
        ))
    else:
        print("No open positions")

    bias = snapshot.positionBias
    print()
    print(f"  Account value:   ${snapshot.accountValue:,.2f}")
    print(f"  Unrealized PnL:  {format_amount(snapshot.totalUnrealizedPnl)}")
    print(f"  Total value:     ${snapshot.totalValue:,.2f}")
    print(f"  Notional:        ${snapshot.totalNotionalValue:,.2f}")
    print(f"  Net delta:       {format_amount(snapshot.netDelta)}")
    print(f"  Bias:            {bias.percentage}% {'Long' if bias.isLong else 'Short'}")
    print()


async def build_report(
    user: str,
    config: Config,
    gap_ms: int,
) -> tuple[PnLSummary, TradeStats, WalletSnapshot]:
    """Fetch raw data for a user and compute every report section."""
    datasource = HyperliquidDataSource(
        api_url=config.hyperliquid_api_url,
        timeout=config.request_timeout,
        max_retries=config.max_retries,
        retry_delay=config.retry_delay,
        aggregate_by_time=config.aggregate_fills_by_time,
    )
    try:
        raw_fills = await datasource.get_user_fills(user=user)
        state = await datasource.get_clearinghouse_state(user)
    finally:
        await datasource.close()

    now_ms = current_time_ms()
    side_policy = get_side_policy(config.unknown_side_policy)

    summary = compute_pnl_summary(raw_fills, now_ms, gap_ms, side_policy)
    stats = compute_trade_stats_from_raw(raw_fills, now_ms, side_policy)
    snapshot = compute_wallet_snapshot(
        state.get("assetPositions") or [],
        account_value_from_state(state),
    )
    return summary, stats, snapshot


def main(argv: Optional[list[str]] = None):
    """Main entry point"""
    parser = argparse.ArgumentParser(
        description="Report PnL, trade sessions and open positions for a Hyperliquid user"
    )
    parser.add_argument(
        "user",
        help="User address (0x...)"
    )
    parser.add_argument(
        "--gap-minutes",
        type=float,
        default=None,
        help="Session gap in minutes (default: SESSION_GAP_MS or 5)"
    )
    parser.add_argument(
        "--max-sessions",
        type=int,
        default=10,
        help="Number of trade sessions to show (default: 10)"
    )
    parser.add_argument(
        "--show-all",
        action="store_true",
        help="Show all trade sessions"
    )

    args = parser.parse_args(argv)

    # Validate address
    if not args.user.startswith('0x') or len(args.user) != 42:
        print(f"Error: Invalid address format: {args.user}")
        print("Address must be 42 characters starting with 0x")
        sys.exit(1)

    config = Config.from_env()
    configure_logging(config.log_level)

    gap_ms = config.session_gap_ms
    if args.gap_minutes is not None:
        gap_ms = int(args.gap_minutes * 60 * 1000)

    print(f"Fetching fills and positions for {args.user}...")
    summary, stats, snapshot = asyncio.run(build_report(args.user, config, gap_ms))

    print_pnl(summary, stats)

    max_show = len(summary.sessions) if args.show_all else args.max_sessions
    print_sessions(summary.sessions, max_show)

    print_positions(snapshot)
    print("=" * 80)


if __name__ == "__main__":
    main()
