"""Cancellation scope bound to a screen's lifecycle."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Coroutine
from typing import Any

logger = logging.getLogger(__name__)


class ScopeClosedError(RuntimeError):
    """Raised when launching work into a scope that was already cancelled."""


class LifecycleScope:
    """Owns the tasks launched for one screen instance.

    Commands are launched concurrently and never serialized. Cancelling the
    scope (screen teardown) cancels every task still pending.

    Usage::

        scope = LifecycleScope()
        scope.launch(controller.add_reading(72.4))
        ...
        scope.cancel()
    """

    def __init__(self) -> None:
        self._tasks: set[asyncio.Task[Any]] = set()
        self._cancelled = False

    @property
    def is_cancelled(self) -> bool:
        return self._cancelled

    @property
    def pending(self) -> int:
        return len(self._tasks)

    def launch(self, coro: Coroutine[Any, Any, Any]) -> asyncio.Task[Any]:
        """Schedule ``coro`` on the running loop as a task owned by this scope.

        Raises:
            ScopeClosedError: If the scope has been cancelled.
        """
        if self._cancelled:
            coro.close()
            raise ScopeClosedError("Cannot launch into a cancelled lifecycle scope")
        task = asyncio.get_running_loop().create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    def cancel(self) -> None:
        """Cancel all pending tasks and refuse further launches."""
        self._cancelled = True
        if self._tasks:
            logger.debug("Cancelling %d pending command(s)", len(self._tasks))
        for task in list(self._tasks):
            task.cancel()

    async def join(self) -> None:
        """Wait until every launched task has finished or been cancelled."""
        while True:
            pending = [task for task in self._tasks if not task.done()]
            if not pending:
                return
            await asyncio.gather(*pending, return_exceptions=True)

    async def close(self) -> None:
        """Cancel and wait for pending tasks to unwind."""
        self.cancel()
        await self.join()
