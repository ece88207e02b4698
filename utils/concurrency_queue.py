from __future__ import annotations

import asyncio
from collections import deque
from typing import TYPE_CHECKING, Final, Generic, TypeVar

from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    import logging
    from collections.abc import Awaitable, Callable

__all__: list[str] = ["ConcurrencyQueue"]

T = TypeVar("T")

logger: logging.Logger = LoggerUtils.get_logger(__name__)

DEFAULT_CONCURRENCY_LIMIT: Final[int] = 3


class ConcurrencyQueue(Generic[T]):
    """Admission control that runs at most `limit` tasks at once.

    Submitted tasks start immediately while capacity is available, otherwise they wait in FIFO order.
    Tasks therefore start in submission order, although they may finish in any order.
    The outcome of each task, result or exception, is delivered only to its own submitter.
    """

    def __init__(self, limit: int = DEFAULT_CONCURRENCY_LIMIT) -> None:
        if limit < 1:
            msg: str = f"Concurrency limit must be positive: {limit}"
            raise ValueError(msg)
        self._limit: int = limit
        self._active: int = 0
        self._waiting: deque[tuple[Callable[[], Awaitable[T]], asyncio.Future[T]]] = deque()
        self._running_tasks: set[asyncio.Task[None]] = set()

    @property
    def limit(self) -> int:
        return self._limit

    @property
    def active_count(self) -> int:
        """Number of tasks currently running."""
        return self._active

    @property
    def waiting_count(self) -> int:
        """Number of tasks waiting for a free slot."""
        return len(self._waiting)

    async def submit(self, task_factory: Callable[[], Awaitable[T]]) -> T:
        """Run a task under the concurrency limit and return its result.

        Args:
            task_factory (Callable[[], Awaitable[T]]): Zero-argument callable producing the awaitable to run.
                It is called only when the task is admitted.

        Returns:
            T: The value produced by the task.

        Raises:
            Exception: Whatever the task raised.
        """
        future: asyncio.Future[T] = asyncio.get_running_loop().create_future()
        if self._active < self._limit:
            self._start(task_factory, future)
        else:
            self._waiting.append((task_factory, future))
            logger.debug("Task queued (active: %d, waiting: %d)", self._active, len(self._waiting))
        return await future

    def _start(self, task_factory: Callable[[], Awaitable[T]], future: asyncio.Future[T]) -> None:
        self._active += 1
        task: asyncio.Task[None] = asyncio.create_task(self._run(task_factory, future))
        self._running_tasks.add(task)
        task.add_done_callback(self._running_tasks.discard)

    async def _run(self, task_factory: Callable[[], Awaitable[T]], future: asyncio.Future[T]) -> None:
        try:
            result: T = await task_factory()
        except asyncio.CancelledError:
            if not future.done():
                future.cancel()
            raise
        except Exception as err:  # noqa: BLE001 - delivered to the submitter
            if not future.done():
                future.set_exception(err)
        else:
            if not future.done():
                future.set_result(result)
        finally:
            self._active -= 1
            self._dispatch_next()

    def _dispatch_next(self) -> None:
        while self._waiting and self._active < self._limit:
            task_factory, future = self._waiting.popleft()
            if future.done():
                # The submitter went away while waiting.
                continue
            self._start(task_factory, future)
