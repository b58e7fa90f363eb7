"""
Trade Feed - Models.

============================================================
RESPONSIBILITY
============================================================
Input rows of the on-chain trade data table and the USD
denominated output of the aggregator.

Each row carries keyed arrays holding one entry per currency of
the pair, e.g.:

    "liquidity_depth": [
        {"key": "SEEDS", "value": "1000.0000 SEEDS"},
        {"key": "TLOS", "value": "100.0000 TLOS"},
    ]

============================================================
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Mapping, Optional, Union

from core.exceptions import InvalidFeedValueError, MissingFieldInFeedRowError


@dataclass(frozen=True)
class KeyedValue:
    """One currency's entry in a keyed array."""

    key: str
    value: str

    @classmethod
    def from_dict(
        cls,
        raw: Mapping[str, Any],
        row_index: int = 0,
        field_name: str = "",
    ) -> "KeyedValue":
        """Build from a raw {"key": ..., "value": ...} entry of a keyed array."""
        try:
            key = raw["key"]
        except (KeyError, TypeError) as e:
            raise MissingFieldInFeedRowError(row_index, field_name, "key") from e
        try:
            value = raw["value"]
        except (KeyError, TypeError) as e:
            raise MissingFieldInFeedRowError(row_index, field_name, str(key)) from e
        return cls(key=str(key), value=str(value))


REQUIRED_FIELDS = ("liquidity_depth", "price", "price_change_24h", "volume_24h")
SMART_FIELDS = ("smart_price", "smart_price_change_30d")


@dataclass(frozen=True)
class TradeRow:
    """Per-pair entry of the trade data table."""

    liquidity_depth: List[KeyedValue]
    price: List[KeyedValue]
    price_change_24h: List[KeyedValue]
    volume_24h: List[KeyedValue]
    smart_price: Optional[List[KeyedValue]] = None
    smart_price_change_30d: Optional[List[KeyedValue]] = None

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any], row_index: int = 0) -> "TradeRow":
        """
        Build from a raw table row; absent arrays become empty (required) or None (smart).

        Raises:
            MissingFieldInFeedRowError: An entry lacks its key or value
            InvalidFeedValueError: The row or one of its arrays has the wrong shape
        """
        if not isinstance(raw, Mapping):
            raise InvalidFeedValueError(row_index, "<row>", raw)

        def keyed(name: str) -> Optional[List[KeyedValue]]:
            entries = raw.get(name)
            if entries is None:
                return None
            if not isinstance(entries, list):
                raise InvalidFeedValueError(row_index, name, entries)
            return [KeyedValue.from_dict(entry, row_index, name) for entry in entries]

        return cls(
            liquidity_depth=keyed("liquidity_depth") or [],
            price=keyed("price") or [],
            price_change_24h=keyed("price_change_24h") or [],
            volume_24h=keyed("volume_24h") or [],
            smart_price=keyed("smart_price"),
            smart_price_change_30d=keyed("smart_price_change_30d"),
        )

    @property
    def has_smart_pricing(self) -> bool:
        return self.smart_price is not None and self.smart_price_change_30d is not None

    def keyed_arrays(self) -> Iterator[tuple]:
        """(field name, entries) for every array present on the row."""
        for name in REQUIRED_FIELDS + SMART_FIELDS:
            entries = getattr(self, name)
            if entries is not None:
                yield name, entries


@dataclass(frozen=True)
class IndeterminateChange:
    """A percent change whose denominator is zero."""

    reason: str = "zero denominator"

    def __str__(self) -> str:
        return "indeterminate"


Change = Union[float, IndeterminateChange]


@dataclass(frozen=True)
class NormalizedPair:
    """USD metrics of one pair (or of the home currency for the aggregate row)."""

    id: int
    code: str
    name: str
    liquidity_depth_usd: float
    price_usd: float
    change_24h_percent: Change
    volume_24h_usd: float
    smart_price: Optional[float] = None
    smart_price_apr: Optional[Change] = None

    def to_dict(self) -> Dict[str, Any]:
        def plain(value):
            return None if isinstance(value, IndeterminateChange) else value

        return {
            "id": self.id,
            "code": self.code,
            "name": self.name,
            "liquidity_depth_usd": self.liquidity_depth_usd,
            "price_usd": self.price_usd,
            "change_24h_percent": plain(self.change_24h_percent),
            "volume_24h_usd": self.volume_24h_usd,
            "smart_price": self.smart_price,
            "smart_price_apr": plain(self.smart_price_apr),
        }


AggregateRow = NormalizedPair


@dataclass(frozen=True)
class TradeFeedSummary:
    """Aggregator output: per-pair rows plus the home currency row."""

    pairs: List[NormalizedPair] = field(default_factory=list)
    aggregate: Optional[AggregateRow] = None

    def rows(self) -> List[NormalizedPair]:
        """Pairs in feed order followed by the aggregate row."""
        rows = list(self.pairs)
        if self.aggregate is not None:
            rows.append(self.aggregate)
        return rows


__all__ = [
    "KeyedValue",
    "TradeRow",
    "REQUIRED_FIELDS",
    "SMART_FIELDS",
    "IndeterminateChange",
    "Change",
    "NormalizedPair",
    "AggregateRow",
    "TradeFeedSummary",
]
