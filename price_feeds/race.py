"""
Price Feeds - First success race.

Runs several fallible coroutines concurrently and returns the first
successful result. An early failure never decides the race; only when
every operation has failed does the race fail.
"""

import asyncio
import logging
from typing import Awaitable, Callable, Dict, List, Sequence, TypeVar

from core.exceptions import AllSourcesFailedError


logger = logging.getLogger(__name__)

T = TypeVar("T")


async def first_success(
    operations: Sequence[Callable[[], Awaitable[T]]],
    description: str = "operations",
) -> T:
    """
    Resolve with the first operation that succeeds.

    Operations still running once a winner is known are cancelled.

    Args:
        operations: Zero-argument callables returning awaitables
        description: Name of the race for errors and logs

    Raises:
        AllSourcesFailedError: Every operation failed (errors in submission order)
    """
    if not operations:
        raise AllSourcesFailedError(f"No {description} to race")

    tasks: List[asyncio.Future] = [asyncio.ensure_future(op()) for op in operations]
    order: Dict[asyncio.Future, int] = {task: index for index, task in enumerate(tasks)}
    errors: Dict[int, BaseException] = {}
    pending = set(tasks)

    try:
        while pending:
            done, pending = await asyncio.wait(pending, return_when=asyncio.FIRST_COMPLETED)

            for task in sorted(done, key=order.__getitem__):
                if task.cancelled():
                    errors[order[task]] = asyncio.CancelledError()
                    continue
                error = task.exception()
                if error is None:
                    return task.result()
                logger.debug(f"{description} #{order[task]} failed: {error}")
                errors[order[task]] = error
    finally:
        for task in pending:
            task.cancel()
        # Finished losers of the same round have their exceptions read here
        for task in tasks:
            if task.done() and not task.cancelled():
                task.exception()

    ordered = [errors[index] for index in sorted(errors)]
    raise AllSourcesFailedError(
        f"All {len(tasks)} {description} failed: {ordered[-1]}",
        errors=ordered,
    )


__all__ = [
    "first_success",
]
