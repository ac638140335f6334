"""API routes for the trade metrics service."""

from typing import Any, Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field

from perp_metrics.config import Config
from perp_metrics.datasources import DataSource
from perp_metrics.metrics import (
    compute_pnl_summary,
    compute_wallet_snapshot,
    get_side_policy,
    require_address,
)
from perp_metrics.models import PnLSummary, TradeStats, WalletSnapshot
from perp_metrics.services import PnLService, PositionService
from perp_metrics.services.pnl_service import current_time_ms
from .dependencies import get_config, get_datasource

router = APIRouter(prefix="/v1")

EXAMPLE_USER = "0x0e09b56ef137f417e424f1265425e93bfff77e17"


class PnLSummaryRequest(BaseModel):
    """Caller-supplied fill history."""

    address: Optional[str] = Field(default=None, description="Wallet address")
    fills: list[Any] = Field(default_factory=list, description="Raw fill objects, malformed entries are skipped")
    nowMs: Optional[int] = Field(default=None, ge=0, description="Reference time in milliseconds")


class WalletSnapshotRequest(BaseModel):
    """Caller-supplied clearinghouse positions."""

    address: Optional[str] = Field(default=None, description="Wallet address")
    rawPositions: list[Any] = Field(default_factory=list, description="Raw asset positions, malformed entries are skipped")
    accountValueUsd: float = Field(default=0.0, description="Account value in USD")


@router.post("/pnl/summary", response_model=PnLSummary)
async def post_pnl_summary(
    body: PnLSummaryRequest,
    config: Config = Depends(get_config),
) -> PnLSummary:
    """
    Compute windowed PnL and grouped trades from supplied fills.

    Returns: totalPnl, last24h, last7d, last30d, groupedTrades
    """
    require_address(body.address)
    return compute_pnl_summary(
        body.fills,
        now_ms=body.nowMs if body.nowMs is not None else current_time_ms(),
        gap_ms=config.session_gap_ms,
        side_policy=get_side_policy(config.unknown_side_policy),
    )


@router.post("/wallet/snapshot", response_model=WalletSnapshot)
async def post_wallet_snapshot(body: WalletSnapshotRequest) -> WalletSnapshot:
    """
    Compute a portfolio snapshot from supplied positions.

    Returns: positions, totalUnrealizedPnl, totalNotionalValue, positionBias, netDelta
    """
    require_address(body.address)
    return compute_wallet_snapshot(body.rawPositions, body.accountValueUsd)


@router.get("/pnl", response_model=PnLSummary)
async def get_pnl(
    user: str = Query(
        ...,
        description="User address",
        examples=[EXAMPLE_USER],
    ),
    nowMs: Optional[int] = Query(
        None,
        ge=0,
        description="Reference time in milliseconds, defaults to now",
    ),
    datasource: DataSource = Depends(get_datasource),
    config: Config = Depends(get_config),
) -> PnLSummary:
    """
    Fetch a user's fills and compute windowed PnL with grouped trades.
    """
    service = PnLService(
        datasource,
        gap_ms=config.session_gap_ms,
        side_policy=get_side_policy(config.unknown_side_policy),
    )
    return await service.get_pnl_summary(user=user, now_ms=nowMs)


@router.get("/stats", response_model=TradeStats)
async def get_stats(
    user: str = Query(
        ...,
        description="User address",
        examples=[EXAMPLE_USER],
    ),
    nowMs: Optional[int] = Query(
        None,
        ge=0,
        description="Reference time in milliseconds, defaults to now",
    ),
    datasource: DataSource = Depends(get_datasource),
    config: Config = Depends(get_config),
) -> TradeStats:
    """
    Get trade statistics for a user.

    Returns: allTimePnl, thirtyDayPnl, totalTrades, winRate, averageTrade,
    bestTrade, worstTrade, feesPaid, volume
    """
    service = PnLService(
        datasource,
        side_policy=get_side_policy(config.unknown_side_policy),
    )
    return await service.get_trade_stats(user=user, now_ms=nowMs)


@router.get("/wallet", response_model=WalletSnapshot)
async def get_wallet(
    user: str = Query(
        ...,
        description="User address",
        examples=[EXAMPLE_USER],
    ),
    datasource: DataSource = Depends(get_datasource),
) -> WalletSnapshot:
    """
    Get user's current open positions with portfolio risk figures.
    """
    service = PositionService(datasource)
    return await service.get_wallet_snapshot(user=user)
