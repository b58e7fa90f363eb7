"""
Network Modules - Base Module.

============================================================
RESPONSIBILITY
============================================================
Defines the capability set every network module exposes.

- init() is mandatory
- Every business action is an explicit coroutine method
- Actions a network does not support raise OperationNotSupportedError

============================================================
"""

from abc import ABC, abstractmethod
from typing import Any, List, Optional, Sequence

from core.exceptions import OperationNotSupportedError

from .models import (
    ConvertTransaction,
    Feature,
    FeeParams,
    HistoryRow,
    LiquidityParams,
    ModuleParam,
    NewOwnerParams,
    OpposingLiquidParams,
    ProposedFromTransaction,
    ProposedToTransaction,
    features_for,
)


class NetworkModule(ABC):
    """
    Integration with one blockchain network.

    Subclasses implement init() and override the actions they support.
    """

    def __init__(self, module_id: str, label: str = ""):
        self.module_id = module_id
        self.label = label

    @property
    def supported_features(self) -> List[Feature]:
        """Features this network exposes, from the service table by default."""
        return features_for(self.module_id)

    @abstractmethod
    async def init(self, params: Optional[ModuleParam] = None) -> None:
        """Load tokens, relays and balances for this network."""
        pass

    def _unsupported(self, action: str) -> OperationNotSupportedError:
        return OperationNotSupportedError(
            f"Network '{self.module_id}' does not support {action}",
            module_id=self.module_id,
            context={"action": action},
        )

    # --------------------------------------------------------
    # Tokens and pools
    # --------------------------------------------------------

    async def load_more_tokens(self, token_ids: Optional[Sequence[str]] = None) -> Any:
        raise self._unsupported("load_more_tokens")

    async def load_more_pools(self) -> Any:
        raise self._unsupported("load_more_pools")

    async def focus_symbol(self, symbol_name: str) -> Any:
        raise self._unsupported("focus_symbol")

    async def fetch_history_data(self, relay_id: str) -> List[HistoryRow]:
        raise self._unsupported("fetch_history_data")

    # --------------------------------------------------------
    # Trading
    # --------------------------------------------------------

    async def convert(self, tx: ConvertTransaction) -> Any:
        raise self._unsupported("convert")

    async def get_return(self, proposed: ProposedFromTransaction) -> Any:
        raise self._unsupported("get_return")

    async def get_cost(self, proposed: ProposedToTransaction) -> Any:
        raise self._unsupported("get_cost")

    # --------------------------------------------------------
    # Liquidity
    # --------------------------------------------------------

    async def add_liquidity(self, params: LiquidityParams) -> Any:
        raise self._unsupported("add_liquidity")

    async def remove_liquidity(self, params: LiquidityParams) -> Any:
        raise self._unsupported("remove_liquidity")

    async def calculate_opposing_deposit(self, params: OpposingLiquidParams) -> Any:
        raise self._unsupported("calculate_opposing_deposit")

    async def calculate_opposing_withdraw(self, params: OpposingLiquidParams) -> Any:
        raise self._unsupported("calculate_opposing_withdraw")

    # --------------------------------------------------------
    # Relay administration
    # --------------------------------------------------------

    async def create_pool(self, params: Any) -> str:
        raise self._unsupported("create_pool")

    async def remove_relay(self, symbol_name: str) -> Any:
        raise self._unsupported("remove_relay")

    async def update_fee(self, params: FeeParams) -> Any:
        raise self._unsupported("update_fee")

    async def update_owner(self, params: NewOwnerParams) -> Any:
        raise self._unsupported("update_owner")

    # --------------------------------------------------------
    # Balances
    # --------------------------------------------------------

    async def get_user_balances(self, symbol_name: str) -> Any:
        raise self._unsupported("get_user_balances")

    async def refresh_balances(self, symbols: Optional[Sequence[str]] = None) -> Any:
        raise self._unsupported("refresh_balances")

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}(id={self.module_id})>"


__all__ = [
    "NetworkModule",
]
