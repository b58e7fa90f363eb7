"""
Price source implementations.
"""

from price_feeds.providers.coingecko import CoinGeckoPriceSource
from price_feeds.providers.static import StaticPriceSource


__all__ = [
    "CoinGeckoPriceSource",
    "StaticPriceSource",
]
