"""
Tests for the USD price service and its sources.
"""

import asyncio
from datetime import datetime, timezone

import pytest
from unittest.mock import AsyncMock, patch

from core.clock import ClockFactory, MockClock
from core.config import SwapCoreConfig
from core.exceptions import AllSourcesFailedError, FetchError
from price_feeds import (
    BasePriceSource,
    CoinGeckoPriceSource,
    PriceQuantity,
    PriceQuote,
    StaticPriceSource,
    UsdPriceService,
)


# ============================================================
# FIXTURES
# ============================================================

class FakeSource(BasePriceSource):
    """Price source returning a scripted quote."""

    def __init__(self, name, usd_price=None, change=None, error=None, delay=0.0):
        super().__init__()
        self._name = name
        self.delay = delay
        self.usd_price = usd_price
        self.change = change
        self.error = error
        self.calls = 0

    @property
    def name(self):
        return self._name

    async def fetch(self):
        self.calls += 1
        await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return PriceQuote(
            usd_price=self.usd_price,
            percent_change_24h=self.change,
            source_name=self._name,
            fetched_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
        )


@pytest.fixture
def clock():
    return MockClock(datetime(2024, 1, 1, tzinfo=timezone.utc))


@pytest.fixture
def config():
    return SwapCoreConfig(home_currency="TLOS", price_cache_window_seconds=900)


# ============================================================
# SERVICE TESTS
# ============================================================

class TestUsdPriceService:
    """Tests for UsdPriceService."""

    @pytest.mark.asyncio
    async def test_both_quantities(self, config, clock):
        """Test price and 24h move come from the quote."""
        source = FakeSource("fake", usd_price=0.03, change=-2.5)
        service = UsdPriceService([source], config=config, clock=clock)

        assert await service.fetch_usd_price() == 0.03
        assert await service.fetch_usd_24h_price_move() == -2.5

    @pytest.mark.asyncio
    async def test_cached_within_window(self, config, clock):
        """Test repeated reads inside the window hit the source once."""
        source = FakeSource("fake", usd_price=0.03, change=1.0)
        service = UsdPriceService([source], config=config, clock=clock)

        await service.fetch_usd_price()
        clock.advance(300)
        await service.fetch_usd_price()
        assert source.calls == 1

        clock.advance(601)
        await service.fetch_usd_price()
        assert source.calls == 2

    @pytest.mark.asyncio
    async def test_failing_source_falls_back(self, config, clock):
        """Test one failing source does not hide a working one."""
        service = UsdPriceService(
            [
                FakeSource("down", error=ConnectionError("timeout")),
                FakeSource("up", usd_price=0.05, change=0.0),
            ],
            config=config,
            clock=clock,
        )

        assert await service.fetch_usd_price() == 0.05

    @pytest.mark.asyncio
    async def test_all_sources_fail(self, config, clock):
        """Test the error names the home currency."""
        service = UsdPriceService(
            [
                FakeSource("a", error=ConnectionError("timeout")),
                FakeSource("b", error=ConnectionError("503")),
            ],
            config=config,
            clock=clock,
        )

        with pytest.raises(AllSourcesFailedError, match="TLOS") as exc_info:
            await service.fetch_usd_price()

        assert len(exc_info.value.errors) == 2

    @pytest.mark.asyncio
    async def test_missing_change(self, config, clock):
        """Test a quote without 24h change fails that quantity only."""
        service = UsdPriceService(
            [FakeSource("fake", usd_price=0.03, change=None)],
            config=config,
            clock=clock,
        )

        assert await service.fetch_usd_price() == 0.03
        with pytest.raises(AllSourcesFailedError) as exc_info:
            await service.fetch_usd_24h_price_move()

        assert isinstance(exc_info.value.errors[0], FetchError)

    @pytest.mark.asyncio
    async def test_quote_without_quantity_does_not_win(self, config, clock):
        """Test a fast source lacking the 24h change loses to a slower complete one."""
        fast = FakeSource("fast", usd_price=0.04, change=None)
        slow = FakeSource("slow", usd_price=0.05, change=-2.0, delay=0.05)
        service = UsdPriceService([fast, slow], config=config, clock=clock)

        assert await service.fetch_usd_24h_price_move() == -2.0
        assert slow.calls == 1

    @pytest.mark.asyncio
    async def test_static_source_without_change(self, config, clock):
        """Test a pegged source without 24h change still serves the price."""
        service = UsdPriceService(
            [
                StaticPriceSource(1.0, percent_change_24h=None, name="peg"),
                FakeSource("feed", usd_price=1.01, change=0.3, delay=0.05),
            ],
            config=config,
            clock=clock,
        )

        assert await service.fetch_usd_price() == 1.0
        assert await service.fetch_usd_24h_price_move() == 0.3

    @pytest.mark.asyncio
    async def test_get_usd_price_forces_refresh(self, config, clock):
        """Test get_usd_price bypasses freshness."""
        source = FakeSource("fake", usd_price=0.03, change=0.0)
        service = UsdPriceService([source], config=config, clock=clock)

        await service.fetch_usd_price()
        source.usd_price = 0.04

        assert await service.get_usd_price() == 0.04
        assert service.cache.peek(PriceQuantity.USD_PRICE) == 0.04

    def test_requires_sources(self, config):
        """Test an empty source list is rejected."""
        with pytest.raises(ValueError):
            UsdPriceService([], config=config)


# ============================================================
# PROVIDER TESTS
# ============================================================

class TestCoinGeckoPriceSource:
    """Tests for CoinGeckoPriceSource."""

    def test_parse(self):
        """Test a simple/price response is parsed."""
        source = CoinGeckoPriceSource("telos")
        moment = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)

        with ClockFactory.use_mock(moment):
            quote = source.parse({"telos": {"usd": 0.0279, "usd_24h_change": -1.93}})

        assert quote.fetched_at == moment
        assert quote.usd_price == 0.0279
        assert quote.percent_change_24h == -1.93
        assert quote.source_name == "coingecko:telos"

    def test_parse_malformed(self):
        """Test a response without the coin raises FetchError."""
        source = CoinGeckoPriceSource("telos")

        with pytest.raises(FetchError):
            source.parse({"bitcoin": {"usd": 60000}})

    def test_parse_non_positive_price(self):
        """Test a zero price is rejected."""
        source = CoinGeckoPriceSource("telos")

        with pytest.raises(FetchError):
            source.parse({"telos": {"usd": 0}})

    def test_parse_malformed_change(self):
        """Test a non-numeric 24h change raises FetchError."""
        source = CoinGeckoPriceSource("telos")

        with pytest.raises(FetchError, match="Unexpected response"):
            source.parse({"telos": {"usd": 0.03, "usd_24h_change": "n/a"}})

    def test_parse_null_change(self):
        """Test a null 24h change leaves the quantity unreported."""
        source = CoinGeckoPriceSource("telos")

        quote = source.parse({"telos": {"usd": 0.03, "usd_24h_change": None}})

        assert quote.percent_change_24h is None

    @pytest.mark.asyncio
    async def test_fetch(self):
        """Test fetch requests simple/price with the 24h change."""
        source = CoinGeckoPriceSource("telos", base_url="https://example.test/api/v3/")
        response = {"telos": {"usd": 0.03, "usd_24h_change": 4.2}}

        with patch.object(source, "_get_json", AsyncMock(return_value=response)) as mock_get:
            quote = await source.fetch()

        assert quote.usd_price == 0.03
        url = mock_get.call_args.args[0]
        params = mock_get.call_args.kwargs["params"]
        assert url == "https://example.test/api/v3/simple/price"
        assert params["ids"] == "telos"
        assert params["include_24hr_change"] == "true"


class TestStaticPriceSource:
    """Tests for StaticPriceSource."""

    @pytest.mark.asyncio
    async def test_fetch(self):
        quote = await StaticPriceSource(1.0, name="usd-peg").fetch()

        assert quote.usd_price == 1.0
        assert quote.percent_change_24h == 0.0
        assert quote.source_name == "usd-peg"

    def test_invalid_price(self):
        with pytest.raises(ValueError):
            StaticPriceSource(0)
