"""
Trade Feed - Chain table source.

Reads the trade data table through the chain's ``get_table_rows``
RPC endpoint. Calls are retried with the core retry executor.
"""

import logging
from typing import Any, Dict, List, Optional

import aiohttp

from core.config import SwapCoreConfig, get_config
from core.exceptions import FetchError, NotFoundError
from core.retry import retry_async

from trade_feed.models import TradeRow


logger = logging.getLogger(__name__)


class ChainTradeDataSource:
    """
    Trade data rows from the chain RPC.

    Usage:
        async with ChainTradeDataSource() as source:
            rows = await source.fetch_rows()
    """

    TABLE_ROWS_PATH = "/v1/chain/get_table_rows"

    def __init__(
        self,
        config: Optional[SwapCoreConfig] = None,
        session: Optional[aiohttp.ClientSession] = None,
    ) -> None:
        self._config = config or get_config()
        self._session = session
        self._owns_session = session is None

    @property
    def name(self) -> str:
        return f"chain:{self._config.trade_data_contract}"

    def _request_body(self) -> Dict[str, Any]:
        contract = self._config.trade_data_contract
        return {
            "code": contract,
            "scope": contract,
            "table": self._config.trade_data_table,
            "limit": self._config.trade_data_limit,
            "json": True,
        }

    async def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self._config.http_timeout_seconds),
                headers={"Accept": "application/json"},
            )
            self._owns_session = True
        return self._session

    async def _post_table_rows(self) -> Dict[str, Any]:
        url = self._config.chain_rpc_url.rstrip("/") + self.TABLE_ROWS_PATH
        session = await self._get_session()
        try:
            async with session.post(url, json=self._request_body()) as response:
                if response.status >= 400:
                    body = await response.text()
                    raise FetchError(
                        message=f"HTTP {response.status}: {body[:200]}",
                        source_name=self.name,
                        status_code=response.status,
                        request_url=url,
                    )
                return await response.json()
        except aiohttp.ClientError as e:
            raise FetchError(
                message=f"Connection error: {e}",
                source_name=self.name,
                request_url=url,
                cause=e,
            ) from e

    async def fetch_raw_rows(self) -> List[Dict[str, Any]]:
        """
        Raw table rows.

        Raises:
            RetryExhaustedError: The RPC kept failing
            NotFoundError: The table is empty
        """
        data = await retry_async(
            self._post_table_rows,
            max_attempts=self._config.retry_max_attempts,
            interval_seconds=self._config.retry_interval_seconds,
            operation_name=f"{self.name}.get_table_rows",
        )
        rows = data.get("rows") or []
        if not rows:
            raise NotFoundError(
                "Trade data not found",
                context={"table": self._config.trade_data_table},
            )
        logger.debug(f"[{self.name}] Read {len(rows)} trade rows")
        return rows

    async def fetch_rows(self) -> List[TradeRow]:
        """Table rows parsed into TradeRows."""
        raw_rows = await self.fetch_raw_rows()
        return [TradeRow.from_dict(raw, row_index=index) for index, raw in enumerate(raw_rows)]

    async def close(self) -> None:
        if self._owns_session and self._session and not self._session.closed:
            await self._session.close()

    async def __aenter__(self) -> "ChainTradeDataSource":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()


__all__ = [
    "ChainTradeDataSource",
]
