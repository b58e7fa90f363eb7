"""
Price Feeds - Models.

Quotes returned by price sources and the snapshots the cache keeps.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Generic, Optional, TypeVar


T = TypeVar("T")


class PriceQuantity(Enum):
    """Quantities tracked for the home currency."""

    USD_PRICE = "usd_price"
    PERCENT_CHANGE_24H = "percent_change_24h"


@dataclass(frozen=True)
class PriceQuote:
    """USD quote of the home currency from one upstream source."""

    usd_price: float
    source_name: str
    fetched_at: datetime
    percent_change_24h: Optional[float] = None

    def is_valid(self) -> bool:
        return self.usd_price is not None and self.usd_price > 0

    def value_of(self, quantity: PriceQuantity) -> Optional[float]:
        if quantity == PriceQuantity.USD_PRICE:
            return self.usd_price
        return self.percent_change_24h

    def to_dict(self) -> Dict[str, Any]:
        return {
            "usd_price": self.usd_price,
            "percent_change_24h": self.percent_change_24h,
            "source_name": self.source_name,
            "fetched_at": self.fetched_at.isoformat(),
        }


@dataclass(frozen=True)
class PriceSnapshot(Generic[T]):
    """Last successfully refreshed value of a cached quantity."""

    value: T
    last_checked: datetime


__all__ = [
    "PriceQuantity",
    "PriceQuote",
    "PriceSnapshot",
]
