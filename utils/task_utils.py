from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any

from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    import logging
    from collections.abc import Coroutine

__all__: list[str] = ["BackgroundTasks"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)


class BackgroundTasks:
    """Holder for fire-and-forget tasks.

    References are kept until each task finishes so that tasks are not garbage collected early.
    Failures are logged where they happen and never reach the caller.
    """

    def __init__(self) -> None:
        self._tasks: set[asyncio.Task[Any]] = set()

    def __len__(self) -> int:
        return len(self._tasks)

    def spawn(self, coro: Coroutine[Any, Any, Any], *, name: str) -> asyncio.Task[Any]:
        """Schedule a coroutine without awaiting it.

        Args:
            coro (Coroutine[Any, Any, Any]): The side effect to run.
            name (str): Task name used in failure logs.

        Returns:
            asyncio.Task[Any]: The scheduled task.
        """
        task: asyncio.Task[Any] = asyncio.create_task(coro, name=name)
        self._tasks.add(task)
        task.add_done_callback(self._on_done)
        return task

    def _on_done(self, task: asyncio.Task[Any]) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            logger.debug("Background task '%s' cancelled", task.get_name())
            return
        err: BaseException | None = task.exception()
        if err is not None:
            logger.warning("Background task '%s' failed: %s", task.get_name(), err)

    async def wait_all(self) -> None:
        """Wait until every pending task has finished."""
        while self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)

    async def cancel_all(self) -> None:
        """Cancel every pending task and wait for the cancellations to settle."""
        for task in list(self._tasks):
            task.cancel()
        await self.wait_all()
