"""
Core Module - Configuration.

============================================================
CONFIGURABLE PARAMETERS
============================================================

- Home currency and default network
- Price cache freshness window
- Retry attempts and interval for chain RPC
- Upstream endpoints (price API, chain RPC)

Configuration can be loaded from:
- Default values
- Environment variables (SWAPCORE_*), after reading a .env file

============================================================
"""

import os
import logging
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from dotenv import load_dotenv

from .exceptions import InvalidConfigError


logger = logging.getLogger(__name__)

ENV_PREFIX = "SWAPCORE_"


# =============================================================
# MAIN CONFIGURATION
# =============================================================


@dataclass
class SwapCoreConfig:
    """Configuration for the swap network core."""

    # Networks
    home_currency: str = "TLOS"
    default_network: str = "tlos"

    # Price cache
    price_cache_window_seconds: float = 900.0

    # Retry
    retry_max_attempts: int = 10
    retry_interval_seconds: float = 1.0

    # Upstream endpoints
    http_timeout_seconds: float = 30.0
    coingecko_base_url: str = "https://api.coingecko.com/api/v3"
    coingecko_coin_id: str = "telos"
    chain_rpc_url: str = "https://mainnet.telos.net"
    trade_data_contract: str = "data.tbn"
    trade_data_table: str = "tradedata"
    trade_data_limit: int = 100

    def __post_init__(self) -> None:
        """Validate values."""
        if self.price_cache_window_seconds <= 0:
            raise InvalidConfigError(
                "price_cache_window_seconds", self.price_cache_window_seconds, "must be > 0"
            )
        if self.retry_max_attempts < 1:
            raise InvalidConfigError(
                "retry_max_attempts", self.retry_max_attempts, "must be >= 1"
            )
        if self.retry_interval_seconds < 0:
            raise InvalidConfigError(
                "retry_interval_seconds", self.retry_interval_seconds, "must be >= 0"
            )
        if not self.default_network:
            raise InvalidConfigError(
                "default_network", self.default_network, "must not be empty"
            )

    @classmethod
    def from_env(cls, dotenv: bool = True) -> "SwapCoreConfig":
        """
        Load configuration from environment variables.

        Environment variables:
        - SWAPCORE_HOME_CURRENCY
        - SWAPCORE_DEFAULT_NETWORK
        - SWAPCORE_PRICE_CACHE_WINDOW_SECONDS
        - SWAPCORE_RETRY_MAX_ATTEMPTS
        - SWAPCORE_RETRY_INTERVAL_SECONDS
        - SWAPCORE_HTTP_TIMEOUT_SECONDS
        - SWAPCORE_COINGECKO_BASE_URL
        - SWAPCORE_COINGECKO_COIN_ID
        - SWAPCORE_CHAIN_RPC_URL
        - SWAPCORE_TRADE_DATA_CONTRACT
        - SWAPCORE_TRADE_DATA_TABLE
        - SWAPCORE_TRADE_DATA_LIMIT
        """
        if dotenv:
            load_dotenv()

        casts: Dict[str, Callable[[str], object]] = {
            "home_currency": str,
            "default_network": str,
            "price_cache_window_seconds": float,
            "retry_max_attempts": int,
            "retry_interval_seconds": float,
            "http_timeout_seconds": float,
            "coingecko_base_url": str,
            "coingecko_coin_id": str,
            "chain_rpc_url": str,
            "trade_data_contract": str,
            "trade_data_table": str,
            "trade_data_limit": int,
        }

        values = {}
        for name, cast in casts.items():
            raw = os.getenv(ENV_PREFIX + name.upper())
            if raw is None or raw == "":
                continue
            try:
                values[name] = cast(raw)
            except ValueError as e:
                raise InvalidConfigError(ENV_PREFIX + name.upper(), raw, str(e)) from e

        return cls(**values)

    def to_dict(self) -> Dict:
        """Convert to dictionary."""
        return {
            "home_currency": self.home_currency,
            "default_network": self.default_network,
            "price_cache_window_seconds": self.price_cache_window_seconds,
            "retry_max_attempts": self.retry_max_attempts,
            "retry_interval_seconds": self.retry_interval_seconds,
            "chain_rpc_url": self.chain_rpc_url,
        }


# =============================================================
# GLOBAL CONFIG SINGLETON
# =============================================================


_default_config: Optional[SwapCoreConfig] = None


def get_config() -> SwapCoreConfig:
    """Get the global configuration."""
    global _default_config
    if _default_config is None:
        _default_config = SwapCoreConfig.from_env()
        logger.debug(f"Loaded configuration: {_default_config.to_dict()}")
    return _default_config


def set_config(config: Optional[SwapCoreConfig]) -> None:
    """Set (or clear, with None) the global configuration."""
    global _default_config
    _default_config = config
