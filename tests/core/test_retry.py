"""
Tests for the retry executor.

============================================================
PURPOSE
============================================================
- First success is returned, attempts stop there
- Attempts are spaced by at least the interval
- Exhaustion always raises, never hangs

============================================================
"""

import asyncio
import time

import pytest

from core.exceptions import RetryExhaustedError
from core.retry import retry_async


# ============================================================
# FIXTURES
# ============================================================

class Flaky:
    """Fails a fixed number of times, then returns a value."""

    def __init__(self, failures: int, value="ok"):
        self.failures = failures
        self.value = value
        self.calls = []

    async def __call__(self):
        self.calls.append(time.monotonic())
        if len(self.calls) <= self.failures:
            raise ConnectionError(f"rpc down #{len(self.calls)}")
        return self.value


# ============================================================
# TESTS
# ============================================================

class TestRetryAsync:
    """Tests for retry_async."""

    @pytest.mark.asyncio
    async def test_success_first_attempt(self):
        """Test no retry when the first call succeeds."""
        op = Flaky(failures=0, value=42)

        result = await retry_async(op, max_attempts=3, interval_seconds=0.01)

        assert result == 42
        assert len(op.calls) == 1

    @pytest.mark.asyncio
    async def test_fails_twice_then_succeeds(self):
        """Test success on the third of three attempts, spaced by the interval."""
        interval = 0.05
        op = Flaky(failures=2, value="done")

        result = await retry_async(op, max_attempts=3, interval_seconds=interval)

        assert result == "done"
        assert len(op.calls) == 3
        gaps = [b - a for a, b in zip(op.calls, op.calls[1:])]
        assert all(gap >= interval * 0.9 for gap in gaps)

    @pytest.mark.asyncio
    async def test_always_failing_raises_after_cap(self):
        """Test exhaustion raises RetryExhaustedError carrying the last error."""
        op = Flaky(failures=100)

        with pytest.raises(RetryExhaustedError) as exc_info:
            await asyncio.wait_for(
                retry_async(op, max_attempts=3, interval_seconds=0.01),
                timeout=5,
            )

        assert len(op.calls) == 3
        error = exc_info.value
        assert error.attempts == 3
        assert isinstance(error.last_error, ConnectionError)
        assert "rpc down #3" in str(error.last_error)
        assert error.__cause__ is error.last_error

    @pytest.mark.asyncio
    async def test_single_attempt_does_not_sleep(self):
        """Test no trailing sleep after the final attempt."""
        op = Flaky(failures=100)
        started = time.monotonic()

        with pytest.raises(RetryExhaustedError):
            await retry_async(op, max_attempts=1, interval_seconds=5)

        assert time.monotonic() - started < 1
        assert len(op.calls) == 1

    @pytest.mark.asyncio
    async def test_invalid_max_attempts(self):
        """Test zero attempts is rejected."""
        with pytest.raises(ValueError):
            await retry_async(Flaky(0), max_attempts=0)

    @pytest.mark.asyncio
    async def test_operation_name_in_error(self):
        """Test the operation name is reported."""
        with pytest.raises(RetryExhaustedError, match="tlos.init"):
            await retry_async(
                Flaky(failures=5),
                max_attempts=2,
                interval_seconds=0,
                operation_name="tlos.init",
            )
