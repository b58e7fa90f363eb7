"""
Network Modules - Current network selection.

The registry routes business actions to whichever network the
selector reports. The UI layer owns the real selection (route params);
StaticNetworkSelector covers the default and tests.
"""

from typing import Optional, Protocol, runtime_checkable


@runtime_checkable
class CurrentNetworkSelector(Protocol):
    """Reports the id of the active network module."""

    @property
    def current_network(self) -> str: ...


class StaticNetworkSelector:
    """Selector holding the active network in memory."""

    def __init__(self, default_network: str, selected: Optional[str] = None):
        self._default = default_network
        self._selected = selected

    @property
    def current_network(self) -> str:
        return self._selected or self._default

    def select(self, network_id: Optional[str]) -> None:
        """Switch network; None falls back to the default."""
        self._selected = network_id


__all__ = [
    "CurrentNetworkSelector",
    "StaticNetworkSelector",
]
