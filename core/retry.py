"""
Core Module - Retry.

Retries a fallible coroutine with a fixed interval and an attempt cap.
Used around chain RPC calls and network module initialisation.
"""

import asyncio
import logging
from typing import Awaitable, Callable, Optional, TypeVar

from .exceptions import RetryExhaustedError


logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_MAX_ATTEMPTS = 10
DEFAULT_INTERVAL_SECONDS = 1.0


async def retry_async(
    operation: Callable[[], Awaitable[T]],
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    interval_seconds: float = DEFAULT_INTERVAL_SECONDS,
    operation_name: Optional[str] = None,
) -> T:
    """
    Await ``operation()`` until it succeeds or attempts run out.

    Args:
        operation: Zero-argument callable returning an awaitable
        max_attempts: Maximum number of calls
        interval_seconds: Pause after each failed attempt that is followed by another
        operation_name: Name for logging

    Returns:
        The first successful result

    Raises:
        RetryExhaustedError: Every attempt failed; chained from the last error
    """
    if max_attempts < 1:
        raise ValueError("max_attempts must be >= 1")

    name = operation_name or getattr(operation, "__qualname__", repr(operation))
    last_error: Optional[Exception] = None

    for attempt in range(1, max_attempts + 1):
        try:
            result = await operation()
            if attempt > 1:
                logger.info(f"[{name}] Succeeded after {attempt} attempts")
            return result
        except Exception as e:
            last_error = e
            if attempt < max_attempts:
                logger.warning(
                    f"[{name}] Attempt {attempt}/{max_attempts} failed: {e}, "
                    f"retrying in {interval_seconds}s"
                )
                await asyncio.sleep(interval_seconds)

    logger.error(f"[{name}] Failed after {max_attempts} attempts: {last_error}")
    raise RetryExhaustedError(name, max_attempts, last_error) from last_error


__all__ = [
    "DEFAULT_MAX_ATTEMPTS",
    "DEFAULT_INTERVAL_SECONDS",
    "retry_async",
]
