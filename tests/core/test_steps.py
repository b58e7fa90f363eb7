"""
Tests for the sequential step runner.

============================================================
PURPOSE
============================================================
- Observer sees the whole plan on every step
- Accumulator threads through the tasks
- Invalid observers fail before any task runs

============================================================
"""

import pytest
from unittest.mock import AsyncMock

from core.exceptions import InvalidObserverArgumentError
from core.steps import SequentialTaskRunner, Step, TaskItem, run_steps


# ============================================================
# TESTS
# ============================================================

class TestSequentialTaskRunner:
    """Tests for SequentialTaskRunner and run_steps."""

    @pytest.mark.asyncio
    async def test_observer_receives_full_plan(self):
        """Test three steps produce three observer calls with indices 0, 1, 2."""
        calls = []
        items = [
            TaskItem(description="Approve token", task=AsyncMock(return_value=None)),
            TaskItem(description="Fund converter", task=AsyncMock(return_value=None)),
            TaskItem(description="Add liquidity", task=AsyncMock(return_value=None)),
        ]

        await run_steps(items, on_update=lambda index, steps: calls.append((index, steps)))

        assert [index for index, _ in calls] == [0, 1, 2]
        expected = [
            Step(name="0", description="Approve token"),
            Step(name="1", description="Fund converter"),
            Step(name="2", description="Add liquidity"),
        ]
        for _, steps in calls:
            assert steps == expected

    @pytest.mark.asyncio
    async def test_observer_called_before_each_task(self):
        """Test the observer for step N fires before task N runs."""
        events = []

        def make_task(name):
            async def task(state):
                events.append(f"task:{name}")
            return task

        items = [TaskItem(description=n, task=make_task(n)) for n in ("a", "b")]

        await run_steps(items, on_update=lambda index, steps: events.append(f"update:{index}"))

        assert events == ["update:0", "task:a", "update:1", "task:b"]

    @pytest.mark.asyncio
    async def test_accumulator_threading(self):
        """Test each task receives the previous state and None keeps it."""
        seen = []

        async def first(state):
            seen.append(state)
            return {"tx": "abc"}

        async def second(state):
            seen.append(state)
            return None

        def third(state):
            seen.append(state)
            return {**state, "confirmed": True}

        result = await run_steps([
            TaskItem("send", first),
            TaskItem("wait", second),
            TaskItem("confirm", third),
        ])

        assert seen == [{}, {"tx": "abc"}, {"tx": "abc"}]
        assert result == {"tx": "abc", "confirmed": True}

    @pytest.mark.asyncio
    async def test_invalid_observer_fails_fast(self):
        """Test a non-callable observer raises before any task runs."""
        task = AsyncMock(return_value={"x": 1})

        with pytest.raises(InvalidObserverArgumentError):
            await run_steps([TaskItem("only", task)], on_update="not callable")

        task.assert_not_called()

    def test_invalid_observer_is_type_error(self):
        """Test the observer error is also a TypeError."""
        with pytest.raises(TypeError):
            SequentialTaskRunner([], on_update=123)

    @pytest.mark.asyncio
    async def test_no_observer(self):
        """Test running without an observer."""
        result = await SequentialTaskRunner(
            [TaskItem("one", AsyncMock(return_value={"n": 1}))]
        ).run()

        assert result == {"n": 1}

    @pytest.mark.asyncio
    async def test_task_error_stops_sequence(self):
        """Test a failing task propagates and later tasks do not run."""
        later = AsyncMock()

        with pytest.raises(RuntimeError, match="boom"):
            await run_steps([
                TaskItem("fail", AsyncMock(side_effect=RuntimeError("boom"))),
                TaskItem("later", later),
            ])

        later.assert_not_called()
