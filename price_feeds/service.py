"""
Price Feeds - USD price service.

============================================================
RESPONSIBILITY
============================================================
Serves the home currency's USD price and its 24h percent change.

- Both quantities live in one TTLCache under the same policy
- A refresh races every configured source; the first one that reports
  the requested quantity wins
- Nothing cached and every source down: AllSourcesFailedError

============================================================
"""

import logging
from typing import List, Optional, Sequence

from core.clock import ClockProtocol
from core.config import SwapCoreConfig, get_config
from core.exceptions import AllSourcesFailedError, FetchError

from price_feeds.base import BasePriceSource
from price_feeds.cache import TTLCache
from price_feeds.models import PriceQuantity, PriceQuote
from price_feeds.providers import CoinGeckoPriceSource
from price_feeds.race import first_success


logger = logging.getLogger(__name__)


class UsdPriceService:
    """
    Cached USD quotes for the home currency.

    Usage:
        service = UsdPriceService([CoinGeckoPriceSource("telos")])
        price = await service.fetch_usd_price()
        move = await service.fetch_usd_24h_price_move()
    """

    def __init__(
        self,
        sources: Sequence[BasePriceSource],
        config: Optional[SwapCoreConfig] = None,
        clock: Optional[ClockProtocol] = None,
    ) -> None:
        if not sources:
            raise ValueError("At least one price source is required")
        self._config = config or get_config()
        self._sources: List[BasePriceSource] = list(sources)
        self._cache: TTLCache[PriceQuantity, float] = TTLCache(
            refresh=self._refresh,
            window_seconds=self._config.price_cache_window_seconds,
            clock=clock,
        )

    @classmethod
    def from_config(cls, config: Optional[SwapCoreConfig] = None) -> "UsdPriceService":
        """Service backed by CoinGecko as configured."""
        config = config or get_config()
        source = CoinGeckoPriceSource(
            coin_id=config.coingecko_coin_id,
            base_url=config.coingecko_base_url,
            timeout=config.http_timeout_seconds,
        )
        return cls([source], config=config)

    @property
    def home_currency(self) -> str:
        return self._config.home_currency

    @property
    def cache(self) -> TTLCache[PriceQuantity, float]:
        return self._cache

    async def _fetch_quantity(self, source: BasePriceSource, quantity: PriceQuantity) -> float:
        quote: PriceQuote = await source.fetch()
        value = quote.value_of(quantity)
        if value is None:
            raise FetchError(
                message=f"{quote.source_name} did not report {quantity.value}",
                source_name=quote.source_name,
            )
        logger.debug(f"{quote.source_name} reported {quantity.value} = {value}")
        return value

    async def _race(self, quantity: PriceQuantity) -> float:
        try:
            return await first_success(
                [
                    lambda source=source: self._fetch_quantity(source, quantity)
                    for source in self._sources
                ],
                description="price sources",
            )
        except AllSourcesFailedError as e:
            raise AllSourcesFailedError(
                f"Failed to find USD price of {self.home_currency} "
                f"from {len(self._sources)} external sources: {e.last_error}",
                errors=e.errors,
            ) from e

    async def _refresh(self, quantity: PriceQuantity) -> float:
        value = await self._race(quantity)
        logger.info(f"{self.home_currency} {quantity.value} = {value}")
        return value

    async def fetch_usd_price(self) -> float:
        """USD price of the home currency, cached."""
        return await self._cache.fetch(PriceQuantity.USD_PRICE)

    async def fetch_usd_24h_price_move(self) -> float:
        """24h USD percent change of the home currency, cached."""
        return await self._cache.fetch(PriceQuantity.PERCENT_CHANGE_24H)

    async def get_usd_price(self) -> float:
        """USD price of the home currency, bypassing freshness."""
        return await self._cache.fetch(PriceQuantity.USD_PRICE, force=True)

    async def close(self) -> None:
        for source in self._sources:
            await source.close()


__all__ = [
    "UsdPriceService",
]
