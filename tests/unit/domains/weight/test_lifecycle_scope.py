"""Tests for LifecycleScope."""

from __future__ import annotations

import asyncio

import pytest

from weightview.domains.weight.domain_logic.lifecycle import LifecycleScope, ScopeClosedError


def _run(coro):
    loop = asyncio.new_event_loop()
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


class TestLaunch:
    def test_launched_task_result(self):
        async def scenario():
            scope = LifecycleScope()

            async def work():
                return 42

            return await scope.launch(work())

        assert _run(scenario()) == 42

    def test_finished_tasks_are_forgotten(self):
        async def scenario():
            scope = LifecycleScope()

            async def work():
                return None

            await scope.launch(work())
            await asyncio.sleep(0)
            return scope.pending

        assert _run(scenario()) == 0

    def test_tasks_run_concurrently(self):
        async def scenario():
            scope = LifecycleScope()
            order = []

            async def work(name, delay):
                await asyncio.sleep(delay)
                order.append(name)

            scope.launch(work("slow", 0.02))
            scope.launch(work("fast", 0))
            await scope.join()
            return order

        assert _run(scenario()) == ["fast", "slow"]


class TestCancel:
    def test_cancel_stops_pending_work(self):
        async def scenario():
            scope = LifecycleScope()
            finished = []

            async def work():
                await asyncio.sleep(10)
                finished.append(True)

            task = scope.launch(work())
            await asyncio.sleep(0)
            await scope.close()
            return task, finished

        task, finished = _run(scenario())
        assert task.cancelled()
        assert finished == []

    def test_launch_after_cancel_refused(self):
        async def scenario():
            scope = LifecycleScope()
            scope.cancel()

            async def work():
                return None

            with pytest.raises(ScopeClosedError):
                scope.launch(work())
            return scope.is_cancelled

        assert _run(scenario()) is True
