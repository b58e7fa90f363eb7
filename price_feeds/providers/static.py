"""
Static Price Source - Fixed quote.

For pegged home currencies (stable-coin networks) and offline use.
"""

from typing import Optional

from core.clock import ClockFactory

from price_feeds.base import BasePriceSource
from price_feeds.models import PriceQuote


class StaticPriceSource(BasePriceSource):
    """Always returns the configured price."""

    def __init__(
        self,
        usd_price: float,
        percent_change_24h: Optional[float] = 0.0,
        name: str = "static",
    ) -> None:
        super().__init__()
        if usd_price <= 0:
            raise ValueError("usd_price must be > 0")
        self._usd_price = usd_price
        self._percent_change_24h = percent_change_24h
        self._name = name

    @property
    def name(self) -> str:
        return self._name

    async def fetch(self) -> PriceQuote:
        return PriceQuote(
            usd_price=self._usd_price,
            percent_change_24h=self._percent_change_24h,
            source_name=self._name,
            fetched_at=ClockFactory.get_clock().now(),
        )


__all__ = [
    "StaticPriceSource",
]
