"""
Base Price Source - Abstract interface for USD price providers.

All providers MUST implement this interface so the price service can
race them without depending on any single one.
"""

import logging
import time
from abc import ABC, abstractmethod
from typing import Any, Optional

import aiohttp

from core.exceptions import FetchError

from price_feeds.models import PriceQuote


logger = logging.getLogger(__name__)


class BasePriceSource(ABC):
    """
    Abstract base class for USD price sources.

    Each implementation must:
    1. Provide name
    2. Implement fetch() returning a PriceQuote

    HTTP helpers map non-2xx responses and connection errors to FetchError.
    """

    DEFAULT_TIMEOUT = 30.0

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        session: Optional[aiohttp.ClientSession] = None,
    ) -> None:
        self._timeout = timeout
        self._session = session
        self._owns_session = session is None

    @property
    @abstractmethod
    def name(self) -> str:
        """Unique identifier for this source."""
        pass

    @abstractmethod
    async def fetch(self) -> PriceQuote:
        """
        Fetch the current USD quote.

        Raises:
            FetchError: Upstream unavailable or response unusable
        """
        pass

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create HTTP session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self._timeout),
                headers={"Accept": "application/json"},
            )
            self._owns_session = True
        return self._session

    async def _get_json(
        self,
        url: str,
        params: Optional[dict[str, Any]] = None,
    ) -> Any:
        """GET a JSON document."""
        session = await self._get_session()

        start_time = time.time()
        try:
            async with session.get(url, params=params) as response:
                if response.status >= 400:
                    body = await response.text()
                    raise FetchError(
                        message=f"HTTP {response.status}: {body[:200]}",
                        source_name=self.name,
                        status_code=response.status,
                        request_url=url,
                    )
                data = await response.json()
                latency_ms = (time.time() - start_time) * 1000
                logger.debug(f"[{self.name}] Request completed in {latency_ms:.1f}ms")
                return data

        except aiohttp.ClientError as e:
            raise FetchError(
                message=f"Connection error: {e}",
                source_name=self.name,
                request_url=url,
                cause=e,
            ) from e

    async def close(self) -> None:
        """Close resources."""
        if self._owns_session and self._session and not self._session.closed:
            await self._session.close()

    async def __aenter__(self) -> "BasePriceSource":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}(name={self.name})>"


__all__ = [
    "BasePriceSource",
]
