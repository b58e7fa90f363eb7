"""
CoinGecko Price Source - Public simple/price API adapter.

No authentication required.

Example response for ids=telos:
    {"telos": {"usd": 0.02797187, "usd_24h_change": -1.93}}
"""

import logging
from typing import Any, Optional

import aiohttp

from core.clock import ClockFactory
from core.exceptions import FetchError

from price_feeds.base import BasePriceSource
from price_feeds.models import PriceQuote


logger = logging.getLogger(__name__)


class CoinGeckoPriceSource(BasePriceSource):
    """USD price and 24h change of one coin from CoinGecko."""

    BASE_URL = "https://api.coingecko.com/api/v3"

    def __init__(
        self,
        coin_id: str = "telos",
        base_url: str = BASE_URL,
        timeout: float = BasePriceSource.DEFAULT_TIMEOUT,
        session: Optional[aiohttp.ClientSession] = None,
    ) -> None:
        super().__init__(timeout, session)
        self._coin_id = coin_id
        self._base_url = base_url.rstrip("/")

    @property
    def name(self) -> str:
        return f"coingecko:{self._coin_id}"

    async def fetch(self) -> PriceQuote:
        url = f"{self._base_url}/simple/price"
        params = {
            "ids": self._coin_id,
            "vs_currencies": "usd",
            "include_24hr_change": "true",
        }
        data = await self._get_json(url, params=params)
        return self.parse(data)

    def parse(self, data: Any) -> PriceQuote:
        """Build a quote from a simple/price response."""
        try:
            entry = data[self._coin_id]
            usd_price = float(entry["usd"])
            change = entry.get("usd_24h_change")
            percent_change_24h = float(change) if change is not None else None
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise FetchError(
                message=f"Unexpected response for {self._coin_id}: {str(data)[:200]}",
                source_name=self.name,
                cause=e,
            ) from e

        quote = PriceQuote(
            usd_price=usd_price,
            percent_change_24h=percent_change_24h,
            source_name=self.name,
            fetched_at=ClockFactory.get_clock().now(),
        )

        if not quote.is_valid():
            raise FetchError(
                message=f"Non-positive USD price for {self._coin_id}: {usd_price}",
                source_name=self.name,
            )
        return quote


__all__ = [
    "CoinGeckoPriceSource",
]
