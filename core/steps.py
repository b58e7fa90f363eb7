"""
Core Module - Sequential Steps.

============================================================
RESPONSIBILITY
============================================================
Runs multi-step flows (staged liquidity operations and the like)
strictly in order.

- Thread an accumulating state object through the steps
- Tell an optional observer the full plan before every step
- Fail fast on an invalid observer, before any step runs

============================================================
"""

import inspect
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, List, Optional, Sequence, Union

from .exceptions import InvalidObserverArgumentError


logger = logging.getLogger(__name__)


# ============================================================
# TYPES
# ============================================================

StepTask = Callable[[Any], Union[Any, Awaitable[Any]]]


@dataclass(frozen=True)
class TaskItem:
    """One unit of work and its human readable description."""

    description: str
    task: StepTask


@dataclass(frozen=True)
class Step:
    """Descriptor handed to the progress observer."""

    name: str
    description: str


ProgressObserver = Callable[[int, List[Step]], None]


# ============================================================
# RUNNER
# ============================================================

class SequentialTaskRunner:
    """
    Executes task items one after another.

    The accumulator starts as an empty dict. Each task receives the
    current accumulator; a non-None return value replaces it.
    """

    def __init__(
        self,
        items: Sequence[TaskItem],
        on_update: Optional[ProgressObserver] = None,
    ):
        if on_update is not None and not callable(on_update):
            raise InvalidObserverArgumentError(on_update)

        self._items = list(items)
        self._on_update = on_update

    @property
    def steps(self) -> List[Step]:
        """Snapshot of the full plan."""
        return [
            Step(name=str(index), description=item.description)
            for index, item in enumerate(self._items)
        ]

    async def run(self) -> Any:
        """
        Run all tasks in order.

        Returns:
            The final accumulator
        """
        state: Any = {}
        total = len(self._items)

        for index, item in enumerate(self._items):
            if self._on_update is not None:
                self._on_update(index, self.steps)

            logger.info(f"Step [{index + 1:02d}/{total:02d}] START: {item.description}")

            result = item.task(state)
            if inspect.isawaitable(result):
                result = await result

            if result is not None:
                state = result

            logger.debug(f"Step [{index + 1:02d}/{total:02d}] COMPLETE: {item.description}")

        return state


async def run_steps(
    items: Sequence[TaskItem],
    on_update: Optional[ProgressObserver] = None,
) -> Any:
    """Convenience wrapper around SequentialTaskRunner."""
    return await SequentialTaskRunner(items, on_update).run()


__all__ = [
    "TaskItem",
    "Step",
    "ProgressObserver",
    "SequentialTaskRunner",
    "run_steps",
]
