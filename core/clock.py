"""
Core Module - Clock.

============================================================
RESPONSIBILITY
============================================================
Provides a testable clock abstraction for cache freshness checks.

- Price snapshots are stamped with this clock
- Enables deterministic tests of freshness windows
- UTC only

============================================================
"""

from abc import ABC, abstractmethod
from contextlib import contextmanager
from datetime import datetime, timedelta, timezone
from typing import Generator, Optional
import threading
import time


# ============================================================
# CLOCK PROTOCOL
# ============================================================

class ClockProtocol(ABC):
    """Abstract interface for the clock."""

    @abstractmethod
    def now(self) -> datetime:
        """Get current UTC datetime."""
        pass

    @abstractmethod
    def timestamp(self) -> float:
        """Get current Unix timestamp."""
        pass

    def elapsed_since(self, moment: datetime) -> float:
        """Seconds between ``moment`` and now."""
        return (self.now() - moment).total_seconds()


# ============================================================
# SYSTEM CLOCK (PRODUCTION)
# ============================================================

class SystemClock(ClockProtocol):
    """Production clock using actual system time."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)

    def timestamp(self) -> float:
        return time.time()


# ============================================================
# MOCK CLOCK (TESTING)
# ============================================================

class MockClock(ClockProtocol):
    """
    Mock clock for testing.

    Allows time manipulation for deterministic tests.
    """

    def __init__(self, initial_time: Optional[datetime] = None):
        self._time = initial_time or datetime.now(timezone.utc)
        self._lock = threading.Lock()

    def now(self) -> datetime:
        with self._lock:
            return self._time

    def timestamp(self) -> float:
        with self._lock:
            return self._time.timestamp()

    def set_time(self, new_time: datetime) -> None:
        """Set the current time."""
        with self._lock:
            if new_time.tzinfo is None:
                new_time = new_time.replace(tzinfo=timezone.utc)
            self._time = new_time

    def advance(self, seconds: float = 0, **kwargs) -> None:
        """
        Advance time by the specified amount.

        Args:
            seconds: Number of seconds to advance
            **kwargs: Passed to timedelta (minutes, hours, ...)
        """
        with self._lock:
            self._time = self._time + timedelta(seconds=seconds, **kwargs)


# ============================================================
# CLOCK FACTORY
# ============================================================

class ClockFactory:
    """Holds the process-wide default clock."""

    _instance: Optional[ClockProtocol] = None
    _lock = threading.Lock()

    @classmethod
    def get_clock(cls) -> ClockProtocol:
        """Get the global clock instance."""
        with cls._lock:
            if cls._instance is None:
                cls._instance = SystemClock()
            return cls._instance

    @classmethod
    def set_clock(cls, clock: ClockProtocol) -> None:
        """Set the global clock instance."""
        with cls._lock:
            cls._instance = clock

    @classmethod
    def reset(cls) -> None:
        """Reset to default system clock."""
        with cls._lock:
            cls._instance = SystemClock()

    @classmethod
    @contextmanager
    def use_mock(
        cls,
        initial_time: Optional[datetime] = None,
    ) -> Generator[MockClock, None, None]:
        """Context manager to use a mock clock temporarily."""
        original = cls._instance
        mock = MockClock(initial_time)
        cls.set_clock(mock)
        try:
            yield mock
        finally:
            cls._instance = original


# ============================================================
# EXPORTS
# ============================================================

__all__ = [
    "ClockProtocol",
    "SystemClock",
    "MockClock",
    "ClockFactory",
]
