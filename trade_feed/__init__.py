"""
Trade Feed Package - USD metrics of every pair in the trade data table.

Quick Start:
    from price_feeds import UsdPriceService
    from trade_feed import ChainTradeDataSource, fetch_trade_data

    prices = UsdPriceService.from_config()
    async with ChainTradeDataSource() as source:
        summary = await fetch_trade_data(source, prices)

    for row in summary.rows():
        print(row.code, row.price_usd, row.change_24h_percent)
"""

from trade_feed.aggregator import (
    TradeFeedAggregator,
    corrected_change_percent,
    smart_price_apr,
)
from trade_feed.models import (
    AggregateRow,
    IndeterminateChange,
    KeyedValue,
    NormalizedPair,
    TradeFeedSummary,
    TradeRow,
)
from trade_feed.service import fetch_trade_data
from trade_feed.source import ChainTradeDataSource


__all__ = [
    # Models
    "KeyedValue",
    "TradeRow",
    "NormalizedPair",
    "AggregateRow",
    "IndeterminateChange",
    "TradeFeedSummary",

    # Aggregation
    "TradeFeedAggregator",
    "corrected_change_percent",
    "smart_price_apr",

    # Source
    "ChainTradeDataSource",
    "fetch_trade_data",
]
