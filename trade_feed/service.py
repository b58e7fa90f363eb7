"""
Trade Feed - Service.

Glues the chain table source, the cached USD quotes and the
aggregator into one call.
"""

import logging
from typing import Optional, Protocol, Sequence

from trade_feed.aggregator import TradeFeedAggregator
from trade_feed.models import TradeFeedSummary, TradeRow


logger = logging.getLogger(__name__)


class TradeRowSource(Protocol):
    async def fetch_rows(self) -> Sequence[TradeRow]: ...


class HomePriceProvider(Protocol):
    @property
    def home_currency(self) -> str: ...

    async def fetch_usd_price(self) -> float: ...

    async def fetch_usd_24h_price_move(self) -> float: ...


async def fetch_trade_data(
    source: TradeRowSource,
    prices: HomePriceProvider,
    home_currency: Optional[str] = None,
) -> TradeFeedSummary:
    """
    Read the trade table and return USD metrics per pair plus the home row.

    Raises:
        NotFoundError: The table is empty
        AllSourcesFailedError: No USD price available
        MissingFieldInFeedRowError: A row lacks a pair currency
        UnexpectedCurrencyInFeedRowError: A row holds a third or repeated currency
    """
    rows = await source.fetch_rows()
    usd_price = await prices.fetch_usd_price()
    usd_change = await prices.fetch_usd_24h_price_move()

    aggregator = TradeFeedAggregator(
        usd_price=usd_price,
        usd_change_24h_percent=usd_change,
        home_currency=home_currency or prices.home_currency,
    )
    summary = aggregator.aggregate(rows)
    logger.info(
        f"Trade data: {len(summary.pairs)} pairs, "
        f"{aggregator.home_currency} @ ${usd_price}"
    )
    return summary


__all__ = [
    "TradeRowSource",
    "HomePriceProvider",
    "fetch_trade_data",
]
