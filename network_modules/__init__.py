"""
Network Modules Package - One facade over many blockchain networks.

Each network ("tlos", "usds", ...) is a NetworkModule that initialises
and fails independently. The ModuleRegistry tracks their lifecycle and
routes swap and liquidity actions to the current network.

Quick Start:
    from network_modules import ModuleRegistry, StaticNetworkSelector

    registry = ModuleRegistry([TlosModule("tlos"), UsdsModule("usds")])
    await registry.init()

    for module in registry.modules:
        print(module.id, module.state.value)

    await registry.convert(tx)
"""

from network_modules.base import NetworkModule
from network_modules.models import (
    ConvertTransaction,
    Feature,
    FeeParams,
    HistoryRow,
    LiquidityParams,
    ModuleDescriptor,
    ModuleParam,
    ModuleState,
    NetworkAction,
    NewOwnerParams,
    OpposingLiquidParams,
    ProposedFromTransaction,
    ProposedToTransaction,
    RootParam,
    SERVICES,
    Service,
    TokenAmount,
    features_for,
)
from network_modules.registry import ModuleRegistry
from network_modules.selector import CurrentNetworkSelector, StaticNetworkSelector
from network_modules.static_relays import DryRelay, RelayToken, get_hard_coded_relays


__all__ = [
    # Base
    "NetworkModule",

    # Registry
    "ModuleRegistry",
    "CurrentNetworkSelector",
    "StaticNetworkSelector",

    # Models
    "ModuleDescriptor",
    "ModuleState",
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

    # Relays
    "DryRelay",
    "RelayToken",
    "get_hard_coded_relays",
]
