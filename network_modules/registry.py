"""
Network Modules - Module Registry.

============================================================
RESPONSIBILITY
============================================================
Owns every registered network module behind one facade.

- Track each module's lifecycle (idle -> loading -> loaded | error)
- Initialise modules concurrently, isolating failures
- Route business actions to the current network

============================================================
FAILURE ISOLATION
============================================================
A module whose init fails is marked ERROR and its failure is
recorded, never raised. init() returns once every module has
reached a terminal state, so the networks that did load stay
usable.

============================================================
"""

import asyncio
import logging
from typing import Any, Dict, Iterable, List, Optional, Sequence, Set, Union

from core.config import SwapCoreConfig, get_config
from core.exceptions import (
    ModuleInitFailedError,
    ModuleNotRegisteredError,
    UnsupportedActionError,
)
from core.helpers import update_array
from core.retry import retry_async

from .base import NetworkModule
from .models import (
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
)
from .selector import CurrentNetworkSelector, StaticNetworkSelector


class ModuleRegistry:
    """
    Central registry for all network modules.

    Handles:
    - Module registration (at construction)
    - Lifecycle management (init, retry, failure isolation)
    - Action dispatch to the current network
    """

    def __init__(
        self,
        modules: Iterable[NetworkModule],
        selector: Optional[CurrentNetworkSelector] = None,
        config: Optional[SwapCoreConfig] = None,
        retry_max_attempts: Optional[int] = None,
        retry_interval_seconds: Optional[float] = None,
    ):
        """
        Initialize registry.

        Args:
            modules: Network module instances, one per network id
            selector: Reports the current network (defaults to the configured default)
            config: Configuration (defaults to the global one)
            retry_max_attempts: Override of config.retry_max_attempts for init
            retry_interval_seconds: Override of config.retry_interval_seconds for init
        """
        self._config = config or get_config()
        self._logger = logging.getLogger(__name__)

        self._modules: Dict[str, NetworkModule] = {}
        for module in modules:
            if module.module_id in self._modules:
                raise ValueError(f"Duplicate network module id: {module.module_id}")
            self._modules[module.module_id] = module

        if not self._modules:
            raise ValueError("At least one network module is required")

        self._descriptors: List[ModuleDescriptor] = [
            ModuleDescriptor(id=module.module_id, label=module.label)
            for module in self._modules.values()
        ]
        self._errors: Dict[str, ModuleInitFailedError] = {}
        self._pending: Set[asyncio.Task] = set()
        # Bumped on every initialise_module; only the latest init may settle the state
        self._generations: Dict[str, int] = {module_id: 0 for module_id in self._modules}

        if selector is None:
            default = self._config.default_network
            if default not in self._modules:
                default = next(iter(self._modules))
            selector = StaticNetworkSelector(default)
        self._selector = selector

        self._retry_max_attempts = (
            retry_max_attempts if retry_max_attempts is not None
            else self._config.retry_max_attempts
        )
        self._retry_interval_seconds = (
            retry_interval_seconds if retry_interval_seconds is not None
            else self._config.retry_interval_seconds
        )

    # --------------------------------------------------------
    # State
    # --------------------------------------------------------

    @property
    def module_ids(self) -> List[str]:
        return [descriptor.id for descriptor in self._descriptors]

    @property
    def modules(self) -> List[ModuleDescriptor]:
        """Snapshot of all module descriptors."""
        return list(self._descriptors)

    def get_module(self, module_id: str) -> ModuleDescriptor:
        """Get the descriptor of one module."""
        self._require(module_id)
        for descriptor in self._descriptors:
            if descriptor.id == module_id:
                return descriptor
        raise ModuleNotRegisteredError(module_id, self.module_ids)

    def last_error(self, module_id: str) -> Optional[ModuleInitFailedError]:
        """The failure recorded by the last init of a module, if it failed."""
        self._require(module_id)
        return self._errors.get(module_id)

    def get_status_summary(self) -> Dict[str, Any]:
        """Get summary of all module states."""
        state_counts = {state.value: 0 for state in ModuleState}
        for descriptor in self._descriptors:
            state_counts[descriptor.state.value] += 1

        return {
            "total_registered": len(self._descriptors),
            "state_counts": state_counts,
            "errored": [d.id for d in self._descriptors if d.state == ModuleState.ERROR],
        }

    def _require(self, module_id: str) -> NetworkModule:
        module = self._modules.get(module_id)
        if module is None:
            raise ModuleNotRegisteredError(module_id, self.module_ids)
        return module

    def _update_module(self, module_id: str, transition: str) -> None:
        self._descriptors = update_array(
            self._descriptors,
            lambda descriptor: descriptor.id == module_id,
            lambda descriptor: getattr(descriptor, transition)(),
        )

    # --------------------------------------------------------
    # Lifecycle
    # --------------------------------------------------------

    async def initialise_module(
        self,
        module_id: str,
        params: Optional[ModuleParam] = None,
        resolve_when_finished: bool = False,
    ) -> None:
        """
        Initialise a single module.

        Args:
            module_id: Network id
            params: Deep-link parameters for the module's init
            resolve_when_finished: Await the outcome instead of scheduling it

        Raises:
            ModuleNotRegisteredError: Unknown module id
        """
        module = self._require(module_id)

        self._generations[module_id] += 1
        generation = self._generations[module_id]

        self._update_module(module_id, "initialising")
        self._logger.info(f"Initialising network module: {module_id} (run #{generation})")

        if resolve_when_finished:
            await self._run_init(module, params, generation)
            return

        task = asyncio.create_task(
            self._run_init(module, params, generation),
            name=f"init-{module_id}",
        )
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _run_init(
        self,
        module: NetworkModule,
        params: Optional[ModuleParam],
        generation: int,
    ) -> None:
        module_id = module.module_id
        try:
            await retry_async(
                lambda: module.init(params),
                max_attempts=self._retry_max_attempts,
                interval_seconds=self._retry_interval_seconds,
                operation_name=f"{module_id}.init",
            )
        except asyncio.CancelledError:
            if self._is_current(module_id, generation):
                self._record_failure(module_id, "Init cancelled", None)
            raise
        except Exception as e:
            if self._is_current(module_id, generation):
                self._record_failure(module_id, f"Init failed: {e}", e)
            else:
                self._logger.info(f"Ignoring failure of superseded init of {module_id}: {e}")
        else:
            if not self._is_current(module_id, generation):
                self._logger.info(f"Ignoring result of superseded init of {module_id}")
                return
            self._errors.pop(module_id, None)
            self._update_module(module_id, "initialised")
            self._logger.info(f"Network module loaded: {module_id}")

    def _is_current(self, module_id: str, generation: int) -> bool:
        return self._generations[module_id] == generation

    def _record_failure(
        self,
        module_id: str,
        message: str,
        cause: Optional[BaseException],
    ) -> None:
        self._errors[module_id] = ModuleInitFailedError(
            message=message,
            module_id=module_id,
            cause=cause,
        )
        self._update_module(module_id, "thrown")
        self._logger.error(f"Network module {module_id} failed: {message}")

    async def init(self, param: Optional[RootParam] = None) -> List[ModuleDescriptor]:
        """
        Initialise one targeted module, or every module concurrently.

        Returns:
            Descriptor snapshot once the requested modules are terminal
        """
        if param is not None and param.targets_single_module:
            await self.initialise_module(
                param.initial_chain,
                param.initial_module_param,
                resolve_when_finished=True,
            )
            return self.modules

        await asyncio.gather(
            *(
                self.initialise_module(module_id, resolve_when_finished=True)
                for module_id in self.module_ids
            )
        )

        summary = self.get_status_summary()
        self._logger.info(f"Network modules initialised: {summary['state_counts']}")
        return self.modules

    async def wait_pending(self) -> None:
        """Wait for fire-and-forget initialisations to settle."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    # --------------------------------------------------------
    # Current network
    # --------------------------------------------------------

    @property
    def current_network(self) -> str:
        return self._selector.current_network

    @property
    def current_module(self) -> NetworkModule:
        return self._require(self.current_network)

    @property
    def supported_features(self) -> List[Feature]:
        return self.current_module.supported_features

    # --------------------------------------------------------
    # Dispatch
    # --------------------------------------------------------

    async def dispatch(
        self,
        method_name: Union[str, NetworkAction],
        params: Any = None,
    ) -> Any:
        """
        Route an action to the current network module.

        No retry and no caching: errors of the module propagate unchanged.

        Raises:
            UnsupportedActionError: Name is not a NetworkAction
            ModuleNotRegisteredError: Current network is not registered
        """
        if isinstance(method_name, NetworkAction):
            action = method_name
        else:
            action = NetworkAction.parse(method_name)
        if action is None:
            raise UnsupportedActionError(
                f"Unknown network action: {method_name}",
                module_id=self.current_network,
            )

        module = self.current_module
        handler = getattr(module, action.value)
        self._logger.debug(f"Dispatching {action.value} to {module.module_id}")

        if params is None:
            return await handler()
        return await handler(params)

    async def load_more_tokens(self, token_ids: Optional[Sequence[str]] = None) -> Any:
        return await self.dispatch(NetworkAction.LOAD_MORE_TOKENS, token_ids)

    async def fetch_history_data(self, relay_id: str) -> List[HistoryRow]:
        return await self.dispatch(NetworkAction.FETCH_HISTORY_DATA, relay_id)

    async def convert(self, tx: ConvertTransaction) -> Any:
        return await self.dispatch(NetworkAction.CONVERT, tx)

    async def update_fee(self, fee: FeeParams) -> Any:
        return await self.dispatch(NetworkAction.UPDATE_FEE, fee)

    async def load_more_pools(self) -> Any:
        return await self.dispatch(NetworkAction.LOAD_MORE_POOLS)

    async def remove_relay(self, symbol_name: str) -> Any:
        return await self.dispatch(NetworkAction.REMOVE_RELAY, symbol_name)

    async def update_owner(self, owner: NewOwnerParams) -> Any:
        return await self.dispatch(NetworkAction.UPDATE_OWNER, owner)

    async def get_user_balances(self, symbol_name: str) -> Any:
        return await self.dispatch(NetworkAction.GET_USER_BALANCES, symbol_name)

    async def create_pool(self, new_pool_params: Any) -> str:
        return await self.dispatch(NetworkAction.CREATE_POOL, new_pool_params)

    async def get_cost(self, proposed: ProposedToTransaction) -> Any:
        return await self.dispatch(NetworkAction.GET_COST, proposed)

    async def get_return(self, proposed: ProposedFromTransaction) -> Any:
        return await self.dispatch(NetworkAction.GET_RETURN, proposed)

    async def add_liquidity(self, params: LiquidityParams) -> Any:
        return await self.dispatch(NetworkAction.ADD_LIQUIDITY, params)

    async def remove_liquidity(self, params: LiquidityParams) -> Any:
        return await self.dispatch(NetworkAction.REMOVE_LIQUIDITY, params)

    async def calculate_opposing_deposit(self, params: OpposingLiquidParams) -> Any:
        return await self.dispatch(NetworkAction.CALCULATE_OPPOSING_DEPOSIT, params)

    async def calculate_opposing_withdraw(self, params: OpposingLiquidParams) -> Any:
        return await self.dispatch(NetworkAction.CALCULATE_OPPOSING_WITHDRAW, params)

    async def focus_symbol(self, symbol_name: str) -> Any:
        return await self.dispatch(NetworkAction.FOCUS_SYMBOL, symbol_name)

    async def refresh_balances(
        self,
        symbols: Optional[Sequence[str]] = None,
        authenticated: bool = True,
    ) -> Any:
        """Refresh balances on the current network; skipped when logged out."""
        if not authenticated:
            self._logger.debug("Skipping balance refresh, wallet not authenticated")
            return None
        return await self.dispatch(NetworkAction.REFRESH_BALANCES, list(symbols or []))


__all__ = [
    "ModuleRegistry",
]
