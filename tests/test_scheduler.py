import asyncio

import pytest

from responder import scheduler
from responder.models import TerminationReason
from responder.scheduler import run_loop


def _recorder():
    ticks = []

    async def on_tick(index):
        ticks.append(index)

    return ticks, on_tick


@pytest.mark.asyncio
async def test_runs_until_budget(instant_wait):
    ticks, on_tick = _recorder()
    reason = await run_loop(1, 3, on_tick)
    assert reason is TerminationReason.COMPLETED
    assert ticks == [0, 1, 2]
    assert instant_wait == [1, 1, 1]


@pytest.mark.asyncio
async def test_budget_smaller_than_interval_fires_once(instant_wait):
    ticks, on_tick = _recorder()
    reason = await run_loop(5, 2, on_tick)
    assert reason is TerminationReason.COMPLETED
    assert ticks == [0]


@pytest.mark.asyncio
async def test_budget_not_multiple_of_interval_rounds_up(instant_wait):
    ticks, on_tick = _recorder()
    await run_loop(2, 5, on_tick)
    assert ticks == [0, 1, 2]


@pytest.mark.asyncio
async def test_cancel_before_start_fires_nothing(instant_wait):
    ticks, on_tick = _recorder()
    cancel = asyncio.Event()
    cancel.set()
    reason = await run_loop(1, 10, on_tick, cancel)
    assert reason is TerminationReason.CANCELLED
    assert ticks == []


@pytest.mark.asyncio
async def test_cancel_during_tick_lets_tick_finish(instant_wait):
    cancel = asyncio.Event()
    ticks = []

    async def on_tick(index):
        ticks.append(index)
        if index == 1:
            cancel.set()
            await asyncio.sleep(0)
        ticks.append(f"done-{index}")

    reason = await run_loop(1, 10, on_tick, cancel)
    assert reason is TerminationReason.CANCELLED
    assert ticks == [0, "done-0", 1, "done-1"]
    # No wait after the cancelled tick.
    assert len(instant_wait) == 1


@pytest.mark.asyncio
async def test_tick_exceptions_do_not_stop_the_loop(instant_wait):
    ticks = []

    async def on_tick(index):
        ticks.append(index)
        if index == 0:
            raise RuntimeError("boom")

    reason = await run_loop(1, 2, on_tick)
    assert reason is TerminationReason.COMPLETED
    assert ticks == [0, 1]


@pytest.mark.asyncio
async def test_real_wait_is_interrupted_by_cancel():
    cancel = asyncio.Event()
    ticks, on_tick = _recorder()
    loop = asyncio.get_running_loop()
    loop.call_later(0.05, cancel.set)

    started = loop.time()
    reason = await run_loop(30, 300, on_tick, cancel)

    assert reason is TerminationReason.CANCELLED
    assert ticks == [0]
    assert loop.time() - started < 5


@pytest.mark.asyncio
async def test_real_wait_times_out_without_cancel():
    cancel = asyncio.Event()
    assert await scheduler._wait_or_cancel(cancel, 0.01) is False
    cancel.set()
    assert await scheduler._wait_or_cancel(cancel, 10) is True


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("interval", "budget", "expected"),
    [
        (0.1, 1, 10),
        (0.7, 2.1, 3),
        (0.25, 1, 4),
    ],
)
async def test_fractional_interval_stops_on_budget(instant_wait, interval, budget, expected):
    ticks, on_tick = _recorder()
    reason = await run_loop(interval, budget, on_tick)
    assert reason is TerminationReason.COMPLETED
    assert len(ticks) == expected
