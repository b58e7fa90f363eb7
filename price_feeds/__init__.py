"""
Price Feeds Package - Cached USD quotes of the home currency.

Features:
- Pluggable price sources (CoinGecko, static peg)
- First-success race across sources
- 15 minute TTL cache with shared in-flight refresh
- Stale values kept during upstream outages

Quick Start:
    from price_feeds import UsdPriceService, CoinGeckoPriceSource

    service = UsdPriceService([CoinGeckoPriceSource("telos")])
    usd_price = await service.fetch_usd_price()
"""

from price_feeds.base import BasePriceSource
from price_feeds.cache import DEFAULT_WINDOW_SECONDS, TTLCache
from price_feeds.models import PriceQuantity, PriceQuote, PriceSnapshot
from price_feeds.providers import CoinGeckoPriceSource, StaticPriceSource
from price_feeds.race import first_success
from price_feeds.service import UsdPriceService


__all__ = [
    # Base
    "BasePriceSource",

    # Models
    "PriceQuantity",
    "PriceQuote",
    "PriceSnapshot",

    # Providers
    "CoinGeckoPriceSource",
    "StaticPriceSource",

    # Primitives
    "first_success",
    "TTLCache",
    "DEFAULT_WINDOW_SECONDS",

    # Service
    "UsdPriceService",
]
