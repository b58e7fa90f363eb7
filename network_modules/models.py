"""
Network Modules - Models.

============================================================
RESPONSIBILITY
============================================================
Defines data models for the network module layer.

- Module lifecycle states and descriptors
- Init parameters (deep link into one network)
- Actions every network module exposes
- Parameter objects for swap and liquidity actions
- Per-network feature table

============================================================
"""

from enum import Enum
from dataclasses import dataclass, field, replace
from decimal import Decimal
from typing import Any, Dict, List, Optional


# ============================================================
# MODULE LIFECYCLE
# ============================================================

class ModuleState(Enum):
    """Lifecycle state of a network module."""

    IDLE = "idle"
    """Registered, init never requested."""

    LOADING = "loading"
    """Init in progress."""

    LOADED = "loaded"
    """Init succeeded."""

    ERROR = "error"
    """Init failed."""

    @property
    def is_terminal(self) -> bool:
        return self in (ModuleState.LOADED, ModuleState.ERROR)


@dataclass(frozen=True)
class ModuleDescriptor:
    """
    Observable state of one registered network.

    Replaced wholesale on every lifecycle transition.
    """

    id: str
    label: str = ""
    loading: bool = False
    loaded: bool = False
    error: bool = False

    def __post_init__(self) -> None:
        if self.loaded and self.error:
            raise ValueError(f"Module {self.id} cannot be both loaded and errored")

    @property
    def state(self) -> ModuleState:
        if self.loading:
            return ModuleState.LOADING
        if self.loaded:
            return ModuleState.LOADED
        if self.error:
            return ModuleState.ERROR
        return ModuleState.IDLE

    def initialising(self) -> "ModuleDescriptor":
        return replace(self, loading=True, loaded=False, error=False)

    def initialised(self) -> "ModuleDescriptor":
        return replace(self, loading=False, loaded=True, error=False)

    def thrown(self) -> "ModuleDescriptor":
        return replace(self, loading=False, loaded=False, error=True)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "label": self.label,
            "loading": self.loading,
            "loaded": self.loaded,
            "error": self.error,
            "state": self.state.value,
        }


# ============================================================
# INIT PARAMETERS
# ============================================================

@dataclass(frozen=True)
class ModuleParam:
    """Deep-link parameters handed to a module's init."""

    trade: Optional[Dict[str, str]] = None
    """e.g. {"base": "SEEDS", "quote": "TLOS"}"""

    pool: Optional[str] = None
    """Smart token symbol of a pool to focus."""


@dataclass(frozen=True)
class RootParam:
    """Parameters of the registry-wide init."""

    initial_chain: Optional[str] = None
    initial_module_param: Optional[ModuleParam] = None

    @property
    def targets_single_module(self) -> bool:
        return bool(self.initial_chain) and self.initial_module_param is not None


# ============================================================
# ACTIONS
# ============================================================

class NetworkAction(Enum):
    """Business actions routed to the current network module."""

    LOAD_MORE_TOKENS = "load_more_tokens"
    FETCH_HISTORY_DATA = "fetch_history_data"
    CONVERT = "convert"
    UPDATE_FEE = "update_fee"
    LOAD_MORE_POOLS = "load_more_pools"
    REMOVE_RELAY = "remove_relay"
    UPDATE_OWNER = "update_owner"
    GET_USER_BALANCES = "get_user_balances"
    CREATE_POOL = "create_pool"
    GET_COST = "get_cost"
    GET_RETURN = "get_return"
    ADD_LIQUIDITY = "add_liquidity"
    REMOVE_LIQUIDITY = "remove_liquidity"
    CALCULATE_OPPOSING_DEPOSIT = "calculate_opposing_deposit"
    CALCULATE_OPPOSING_WITHDRAW = "calculate_opposing_withdraw"
    FOCUS_SYMBOL = "focus_symbol"
    REFRESH_BALANCES = "refresh_balances"

    @classmethod
    def parse(cls, name: str) -> Optional["NetworkAction"]:
        """Resolve an action by value, None if unknown."""
        try:
            return cls(name)
        except ValueError:
            return None


# ============================================================
# ACTION PARAMETERS
# ============================================================

@dataclass(frozen=True)
class TokenAmount:
    """Amount of one token, by token id."""

    id: str
    amount: Decimal


@dataclass(frozen=True)
class ConvertTransaction:
    """Swap ``from_token`` into ``to_token``."""

    from_token: TokenAmount
    to_token: TokenAmount
    on_update: Optional[Any] = None


@dataclass(frozen=True)
class ProposedFromTransaction:
    """Quote the return of selling ``from_token``."""

    from_token: TokenAmount
    to_token_id: str


@dataclass(frozen=True)
class ProposedToTransaction:
    """Quote the cost of buying ``to_token``."""

    to_token: TokenAmount
    from_token_id: str


@dataclass(frozen=True)
class LiquidityParams:
    """Add or remove liquidity from a relay."""

    id: str
    reserves: List[TokenAmount] = field(default_factory=list)
    on_update: Optional[Any] = None


@dataclass(frozen=True)
class OpposingLiquidParams:
    """Compute the counterpart amount of a deposit or withdrawal."""

    id: str
    reserve: TokenAmount


@dataclass(frozen=True)
class FeeParams:
    """Change the conversion fee of a relay."""

    id: str
    fee: Decimal


@dataclass(frozen=True)
class NewOwnerParams:
    """Transfer relay ownership."""

    id: str
    new_owner: str


@dataclass(frozen=True)
class HistoryRow:
    """One entry of a relay's trade history."""

    id: str
    timestamp: int
    from_symbol: str
    to_symbol: str
    from_amount: Decimal
    to_amount: Decimal


# ============================================================
# FEATURES
# ============================================================

class Feature(Enum):
    """Capabilities a network can expose to the UI."""

    TRADE = "trade"
    WALLET = "wallet"
    LIQUIDITY = "liquidity"
    CREATE_POOL = "create_pool"


@dataclass(frozen=True)
class Service:
    """Feature set of one network namespace."""

    namespace: str
    features: List[Feature] = field(default_factory=list)


SERVICES: List[Service] = [
    Service(namespace="tlos", features=[Feature.TRADE, Feature.LIQUIDITY, Feature.WALLET]),
    Service(namespace="usds", features=[Feature.TRADE, Feature.WALLET]),
]


def features_for(namespace: str) -> List[Feature]:
    """Features of a namespace, empty if unknown."""
    for service in SERVICES:
        if service.namespace.lower() == namespace.lower():
            return list(service.features)
    return []


# ============================================================
# EXPORTS
# ============================================================

__all__ = [
    "ModuleState",
    "ModuleDescriptor",
    "ModuleParam",
    "RootParam",
    "NetworkAction",
    "TokenAmount",
    "ConvertTransaction",
    "ProposedFromTransaction",
    "ProposedToTransaction",
    "LiquidityParams",
    "OpposingLiquidParams",
    "FeeParams",
    "NewOwnerParams",
    "HistoryRow",
    "Feature",
    "Service",
    "SERVICES",
    "features_for",
]
