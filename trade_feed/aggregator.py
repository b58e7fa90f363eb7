"""
Trade Feed - Aggregator.

============================================================
RESPONSIBILITY
============================================================
Converts trade data rows quoted in the home currency (TLOS) into
USD metrics that can be compared across pairs.

For each pair, with ``usd`` the home currency's USD price and
``move`` its 24h USD change as a fraction:

    liquidity_depth_usd = home(liquidity_depth) * usd * 2
    price_usd           = home(price) * usd
    raw_delta_usd       = home(price_change_24h) * usd
    change_24h_percent  = 100 * (price_usd / (a * (price_usd - raw_delta_usd)) - 1)
                          where a = 1 / (1 + move)
    volume_24h_usd      = home(volume_24h) * usd
    smart_price_apr     = delta_30d / (smart_price - delta_30d) * 100

Depth counts both legs of the pool through the home leg. The change
formula removes the home currency's own USD move from the pair's
change. The smart price APR is not annualised.

The aggregate row describes the home currency: summed depth and
volume, its USD price, and 100 * move as its change.

============================================================
"""

import logging
from typing import Iterable, List, Optional, Sequence

from core.exceptions import (
    InvalidFeedValueError,
    MissingFieldInFeedRowError,
    UnexpectedCurrencyInFeedRowError,
)
from core.assets import parse_asset_amount
from core.helpers import compare_string

from trade_feed.models import (
    AggregateRow,
    Change,
    IndeterminateChange,
    KeyedValue,
    NormalizedPair,
    TradeFeedSummary,
    TradeRow,
)


logger = logging.getLogger(__name__)

AGGREGATE_ID = 1
FIRST_PAIR_ID = 2


def corrected_change_percent(
    price_usd: float,
    raw_delta_usd: float,
    usd_move: float,
) -> Change:
    """24h change of a pair net of the home currency's own USD move."""
    if usd_move == -1:
        return IndeterminateChange("home currency USD move of -100%")
    a = 1.0 / (1.0 + usd_move)
    denominator = a * (price_usd - raw_delta_usd)
    if denominator == 0:
        return IndeterminateChange("price equals its 24h delta")
    return 100.0 * (price_usd / denominator - 1.0)


def smart_price_apr(smart_price: float, delta_30d: float) -> Change:
    """Return over the 30 day window, in percent."""
    denominator = smart_price - delta_30d
    if denominator == 0:
        return IndeterminateChange("smart price equals its 30d delta")
    return delta_30d / denominator * 100.0


class TradeFeedAggregator:
    """
    Accumulates trade rows into NormalizedPairs and a running aggregate.

    A row is validated in full before it touches the running sums, so a
    rejected row leaves the aggregate unchanged. A batch passed to
    aggregate() is accepted or rejected as a whole.

    Usage:
        aggregator = TradeFeedAggregator(usd_price=0.03, usd_change_24h_percent=-2.0)
        summary = aggregator.aggregate(rows)
    """

    def __init__(
        self,
        usd_price: float,
        usd_change_24h_percent: float = 0.0,
        home_currency: str = "TLOS",
    ) -> None:
        self._usd_price = float(usd_price)
        self._usd_move = float(usd_change_24h_percent) / 100.0
        self._home = home_currency

        self._pairs: List[NormalizedPair] = []
        self._liquidity_depth_usd = 0.0
        self._volume_24h_usd = 0.0
        self._rows_seen = 0

    @property
    def home_currency(self) -> str:
        return self._home

    @property
    def usd_move(self) -> float:
        return self._usd_move

    @property
    def pairs(self) -> List[NormalizedPair]:
        return list(self._pairs)

    @property
    def aggregate_row(self) -> AggregateRow:
        """The home currency row built from the rows accepted so far."""
        return NormalizedPair(
            id=AGGREGATE_ID,
            code=self._home,
            name=self._home,
            liquidity_depth_usd=self._liquidity_depth_usd,
            price_usd=self._usd_price,
            change_24h_percent=100.0 * self._usd_move,
            volume_24h_usd=self._volume_24h_usd,
        )

    def summary(self) -> TradeFeedSummary:
        return TradeFeedSummary(pairs=self.pairs, aggregate=self.aggregate_row)

    # --------------------------------------------------------
    # Row handling
    # --------------------------------------------------------

    def _other_currency(self, row: TradeRow, row_index: int) -> str:
        for entry in row.liquidity_depth:
            if not compare_string(entry.key, self._home):
                return entry.key
        raise MissingFieldInFeedRowError(row_index, "liquidity_depth", "<counter currency>")

    def _leg(
        self,
        entries: Sequence[KeyedValue],
        key: str,
        field_name: str,
        row_index: int,
    ) -> KeyedValue:
        for entry in entries:
            if compare_string(entry.key, key):
                return entry
        raise MissingFieldInFeedRowError(row_index, field_name, key)

    def _home_amount(self, row: TradeRow, field_name: str, row_index: int) -> float:
        entry = self._leg(getattr(row, field_name), self._home, field_name, row_index)
        try:
            return parse_asset_amount(entry.value)
        except ValueError as e:
            raise InvalidFeedValueError(row_index, field_name, entry.value) from e

    def _validate(self, row: TradeRow, row_index: int) -> str:
        other = self._other_currency(row, row_index)
        for field_name, entries in row.keyed_arrays():
            self._leg(entries, self._home, field_name, row_index)
            self._leg(entries, other, field_name, row_index)
            seen = set()
            for entry in entries:
                folded = entry.key.lower()
                known = compare_string(entry.key, self._home) or compare_string(entry.key, other)
                if not known or folded in seen:
                    raise UnexpectedCurrencyInFeedRowError(row_index, field_name, entry.key)
                seen.add(folded)
        return other

    def _normalize(self, row: TradeRow, row_index: int, pair_id: int) -> NormalizedPair:
        other = self._validate(row, row_index)
        usd = self._usd_price

        liquidity_depth_usd = self._home_amount(row, "liquidity_depth", row_index) * usd * 2.0
        price_usd = self._home_amount(row, "price", row_index) * usd
        raw_delta_usd = self._home_amount(row, "price_change_24h", row_index) * usd
        volume_24h_usd = self._home_amount(row, "volume_24h", row_index) * usd

        smart_price: Optional[float] = None
        apr: Optional[Change] = None
        if row.has_smart_pricing:
            smart_price = self._home_amount(row, "smart_price", row_index)
            delta_30d = self._home_amount(row, "smart_price_change_30d", row_index)
            apr = smart_price_apr(smart_price, delta_30d)

        return NormalizedPair(
            id=pair_id,
            code=other,
            name=other,
            liquidity_depth_usd=liquidity_depth_usd,
            price_usd=price_usd,
            change_24h_percent=corrected_change_percent(price_usd, raw_delta_usd, self._usd_move),
            volume_24h_usd=volume_24h_usd,
            smart_price=smart_price,
            smart_price_apr=apr,
        )

    def _commit(self, pairs: Sequence[NormalizedPair]) -> None:
        for pair in pairs:
            self._pairs.append(pair)
            self._liquidity_depth_usd += pair.liquidity_depth_usd
            self._volume_24h_usd += pair.volume_24h_usd
        self._rows_seen += len(pairs)

    def accumulate(self, row: TradeRow) -> NormalizedPair:
        """
        Normalize one row and add it to the running aggregate.

        Raises:
            MissingFieldInFeedRowError: An array lacks the home or counter currency
            UnexpectedCurrencyInFeedRowError: An array holds a third or repeated currency
            InvalidFeedValueError: A home leg value is not numeric
        """
        pair = self._normalize(row, self._rows_seen, FIRST_PAIR_ID + len(self._pairs))
        self._commit([pair])
        return pair

    def aggregate(self, rows: Iterable[TradeRow]) -> TradeFeedSummary:
        """
        Normalize every row, then add them all and return the summary.

        All or nothing: when any row is rejected the error propagates and
        none of the batch reaches the running aggregate.
        """
        batch: List[NormalizedPair] = []
        for row in rows:
            batch.append(self._normalize(
                row,
                self._rows_seen + len(batch),
                FIRST_PAIR_ID + len(self._pairs) + len(batch),
            ))
        self._commit(batch)

        summary = self.summary()
        logger.debug(
            f"Aggregated {len(summary.pairs)} pairs: "
            f"depth=${summary.aggregate.liquidity_depth_usd:.2f} "
            f"volume=${summary.aggregate.volume_24h_usd:.2f}"
        )
        return summary


__all__ = [
    "AGGREGATE_ID",
    "FIRST_PAIR_ID",
    "corrected_change_percent",
    "smart_price_apr",
    "TradeFeedAggregator",
]
