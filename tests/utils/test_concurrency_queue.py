from __future__ import annotations

import asyncio

import pytest

from utils.concurrency_queue import ConcurrencyQueue


def test_limit_must_be_positive() -> None:
    with pytest.raises(ValueError, match="must be positive"):
        ConcurrencyQueue(0)


@pytest.mark.asyncio
async def test_never_runs_more_than_limit() -> None:
    queue: ConcurrencyQueue[int] = ConcurrencyQueue(2)
    running: int = 0
    peak: int = 0

    async def _work(value: int) -> int:
        nonlocal running, peak
        running += 1
        peak = max(peak, running)
        await asyncio.sleep(0.01)
        running -= 1
        return value

    results: list[int] = await asyncio.gather(*(queue.submit(lambda v=i: _work(v)) for i in range(6)))

    assert results == [0, 1, 2, 3, 4, 5]
    assert peak == 2
    assert queue.active_count == 0
    assert queue.waiting_count == 0


@pytest.mark.asyncio
async def test_tasks_start_in_submission_order() -> None:
    queue: ConcurrencyQueue[None] = ConcurrencyQueue(1)
    started: list[int] = []

    async def _work(value: int) -> None:
        started.append(value)
        await asyncio.sleep(0)

    await asyncio.gather(*(queue.submit(lambda v=i: _work(v)) for i in range(5)))

    assert started == [0, 1, 2, 3, 4]


@pytest.mark.asyncio
async def test_failure_is_delivered_only_to_its_submitter() -> None:
    queue: ConcurrencyQueue[str] = ConcurrencyQueue(1)

    async def _fail() -> str:
        msg = "boom"
        raise RuntimeError(msg)

    async def _succeed() -> str:
        return "ok"

    results: list[str | BaseException] = await asyncio.gather(
        queue.submit(_fail), queue.submit(_succeed), return_exceptions=True
    )

    assert isinstance(results[0], RuntimeError)
    assert results[1] == "ok"
    assert queue.active_count == 0


@pytest.mark.asyncio
async def test_factory_is_called_only_when_admitted() -> None:
    queue: ConcurrencyQueue[None] = ConcurrencyQueue(1)
    release = asyncio.Event()
    calls: list[str] = []

    async def _blocker() -> None:
        calls.append("blocker")
        await release.wait()

    async def _second() -> None:
        calls.append("second")

    first_task = asyncio.ensure_future(queue.submit(_blocker))
    await asyncio.sleep(0)
    second_task = asyncio.ensure_future(queue.submit(_second))
    await asyncio.sleep(0.01)

    assert calls == ["blocker"]
    assert queue.waiting_count == 1

    release.set()
    await asyncio.gather(first_task, second_task)

    assert calls == ["blocker", "second"]
