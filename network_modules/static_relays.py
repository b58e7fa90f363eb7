"""
Network Modules - Hard-coded relays.

Legacy SEEDS relays that predate the on-chain relay registry.
Network modules merge these into the relays they read from chain.
"""

from dataclasses import dataclass, field
from typing import List

from core.assets import TokenSymbol


@dataclass(frozen=True)
class RelayToken:
    contract: str
    symbol: TokenSymbol


@dataclass(frozen=True)
class DryRelay:
    """Relay definition without balances."""

    contract: str
    smart_token: RelayToken
    reserves: List[RelayToken] = field(default_factory=list)
    is_multi_contract: bool = False

    @property
    def id(self) -> str:
        return self.smart_token.symbol.code


_SEEDS_TOKEN = {"contract": "token.seeds", "symbol": "4,SEEDS"}

_OLD_RELAYS = [
    {
        "contract": "hypha.seedsx",
        "smart_token": {"contract": "relay.seedsx", "symbol": "8,HYPHAR"},
        "reserves": [{"contract": "token.hypha", "symbol": "2,HYPHA"}, _SEEDS_TOKEN],
    },
    {
        "contract": "husd.seedsx",
        "smart_token": {"contract": "relay.seedsx", "symbol": "8,HUSDR"},
        "reserves": [{"contract": "husd.hypha", "symbol": "2,HUSD"}, _SEEDS_TOKEN],
    },
    {
        "contract": "tlos.seedsx",
        "smart_token": {"contract": "relay.seedsx", "symbol": "8,TLOSR"},
        "reserves": [{"contract": "eosio.token", "symbol": "4,TLOS"}, _SEEDS_TOKEN],
    },
]


def _token(raw: dict) -> RelayToken:
    return RelayToken(contract=raw["contract"], symbol=TokenSymbol.parse(raw["symbol"]))


def get_hard_coded_relays() -> List[DryRelay]:
    """Legacy relays with parsed symbols."""
    return [
        DryRelay(
            contract=relay["contract"],
            smart_token=_token(relay["smart_token"]),
            reserves=[_token(reserve) for reserve in relay["reserves"]],
            is_multi_contract=False,
        )
        for relay in _OLD_RELAYS
    ]


__all__ = [
    "RelayToken",
    "DryRelay",
    "get_hard_coded_relays",
]
