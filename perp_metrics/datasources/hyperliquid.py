"""Hyperliquid info endpoint data source."""

import asyncio
import logging
from typing import Any, Optional

import httpx

from perp_metrics.metrics.normalizer import to_float
from .base import DataSource

logger = logging.getLogger(__name__)

MAINNET_API_URL = "https://api.hyperliquid.xyz"
INFO_ENDPOINT = "/info"

# The endpoint caps one reply at 2000 fills and keeps the latest 10000
FILLS_PAGE_SIZE = 2000
FILLS_HISTORY_LIMIT = 10000

REQUEST_TIMEOUT = 30.0
MAX_RETRIES = 10
RETRY_DELAY = 2.0
RATE_LIMIT_DELAY = 0.5


class HyperliquidDataSource(DataSource):
    """
    Reads fills and account state from the public Hyperliquid API.

    Timeouts and 429 replies are retried up to max_retries times. Any
    other HTTP error is raised to the caller.
    """

    def __init__(
        self,
        api_url: str = MAINNET_API_URL,
        timeout: float = REQUEST_TIMEOUT,
        max_retries: int = MAX_RETRIES,
        retry_delay: float = RETRY_DELAY,
        aggregate_by_time: bool = False,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Args:
            api_url: API base URL, mainnet by default
            timeout: Seconds before a request times out
            max_retries: How often a timed out or rate limited request is repeated
            retry_delay: Seconds to wait after a timeout
            aggregate_by_time: Ask the exchange to merge partial fills of one order
            transport: httpx transport override, used by tests
        """
        self.api_url = api_url
        self.timeout = timeout
        self.max_retries = max_retries
        self.retry_delay = retry_delay
        self.aggregate_by_time = aggregate_by_time
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.api_url,
                headers={"Content-Type": "application/json"},
                timeout=self.timeout,
                transport=self._transport,
            )
        return self._client

    async def _info(self, payload: dict) -> Any:
        """POST an info query and return the decoded reply."""
        query = payload["type"]
        attempt = 0
        while True:
            try:
                response = await self.client.post(INFO_ENDPOINT, json=payload)
                response.raise_for_status()
                return response.json()
            except httpx.TimeoutException as e:
                if attempt >= self.max_retries:
                    logger.error(f"{query} timed out {attempt + 1} times, giving up: {e}")
                    raise
                delay = self.retry_delay
                logger.warning(f"{query} timed out, retry {attempt + 1}/{self.max_retries} in {delay}s")
            except httpx.HTTPStatusError as e:
                status = e.response.status_code
                if status != 429 or attempt >= self.max_retries:
                    logger.error(f"{query} failed with HTTP {status}: {e}")
                    raise
                delay = RATE_LIMIT_DELAY
                logger.warning(f"{query} rate limited, retry {attempt + 1}/{self.max_retries} in {delay}s")
            attempt += 1
            await asyncio.sleep(delay)

    async def _fills_page(
        self,
        user: str,
        start_time_ms: int,
        end_time_ms: Optional[int],
    ) -> list:
        payload = {
            "type": "userFillsByTime",
            "user": user,
            "startTime": start_time_ms,
        }
        if self.aggregate_by_time:
            payload["aggregateByTime"] = True
        if end_time_ms is not None:
            payload["endTime"] = end_time_ms
        return await self._info(payload) or []

    async def get_user_fills(
        self,
        user: str,
        start_time_ms: Optional[int] = None,
        end_time_ms: Optional[int] = None,
    ) -> list[dict]:
        """
        Page through userFillsByTime until the history is exhausted.

        Each page starts one millisecond after the newest fill of the
        previous page. Paging stops on a short page, on a page that does
        not move forward, or once the history limit is reached.
        """
        fills: list[dict] = []
        cursor = start_time_ms or 0

        while True:
            page = await self._fills_page(user, cursor, end_time_ms)
            records = [f for f in page if isinstance(f, dict)]
            fills.extend(records)

            if len(page) < FILLS_PAGE_SIZE:
                break
            if len(fills) >= FILLS_HISTORY_LIMIT:
                logger.warning(f"Stopped at {FILLS_HISTORY_LIMIT} fills for {user}")
                break

            newest = max(
                (f["time"] for f in records if isinstance(f.get("time"), int)),
                default=None,
            )
            if newest is None or newest < cursor:
                break
            cursor = newest + 1

        fills.sort(key=lambda f: to_float(f.get("time")) or 0.0)
        logger.info(f"Fetched {len(fills)} fills for {user}")
        return fills

    async def get_clearinghouse_state(self, user: str) -> dict:
        """Fetch the clearinghouseState reply for a wallet."""
        state = await self._info({"type": "clearinghouseState", "user": user})
        return state or {}

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None
