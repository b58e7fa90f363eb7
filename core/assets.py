"""
Core Module - Asset strings.

Parses the EOSIO-style strings found in chain tables:
assets such as ``"100.0000 SEEDS"`` and symbols such as ``"4,SEEDS"``.
"""

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class TokenSymbol:
    """Token symbol code with its decimal precision."""

    precision: int
    code: str

    @classmethod
    def parse(cls, raw: str) -> "TokenSymbol":
        """Parse ``"<precision>,<CODE>"``."""
        precision, sep, code = raw.partition(",")
        if not sep or not code or not precision.strip().isdigit():
            raise ValueError(f"Invalid symbol string: {raw!r}")
        return cls(precision=int(precision), code=code.strip().upper())

    def __str__(self) -> str:
        return f"{self.precision},{self.code}"


def parse_asset_amount(raw: Union[str, int, float]) -> float:
    """
    Read the numeric part of an asset string.

    ``"100.0000 SEEDS"`` -> 100.0, ``"0.03"`` -> 0.03. Numbers pass through.

    Raises:
        ValueError: The amount is not a number
    """
    if isinstance(raw, bool):
        raise ValueError(f"Invalid asset amount: {raw!r}")
    if isinstance(raw, (int, float)):
        return float(raw)
    parts = str(raw).strip().split(" ")
    return float(parts[0])


def build_token_id(contract: str, symbol: str) -> str:
    """Token id as used by the token metadata list: ``contract-SYMBOL``."""
    return f"{contract}-{symbol}"


__all__ = [
    "TokenSymbol",
    "parse_asset_amount",
    "build_token_id",
]
