"""Tick scheduler for probing runs.

The loop fires one tick, waits ``interval`` seconds and repeats until the
nominal elapsed time reaches the running budget.  The budget check happens
after each wait, so at least one tick always fires.  Cancellation is
observed at tick boundaries and during the wait; a tick that is already
running is allowed to finish.
"""

from __future__ import annotations

import asyncio
import logging
import math
from typing import Awaitable, Callable

from responder.models import TerminationReason

logger = logging.getLogger(__name__)

# Signature: (tick_index) -> awaitable
TickCallback = Callable[[int], Awaitable[None]]


def _budget_spent(elapsed: float, total_budget: float) -> bool:
    # Fractional intervals can land a hair under the budget (0.1 * 10 style sums).
    return elapsed >= total_budget or math.isclose(elapsed, total_budget)


async def _wait_or_cancel(cancel: asyncio.Event, seconds: float) -> bool:
    """Sleep for *seconds*; return True if *cancel* was set before then."""
    try:
        await asyncio.wait_for(cancel.wait(), timeout=seconds)
    except asyncio.TimeoutError:
        return False
    return True


async def run_loop(
    interval: float,
    total_budget: float,
    on_tick: TickCallback,
    cancel: asyncio.Event | None = None,
) -> TerminationReason:
    """Drive *on_tick* every *interval* seconds for *total_budget* seconds.

    Returns :attr:`TerminationReason.COMPLETED` once the budget is used up,
    or :attr:`TerminationReason.CANCELLED` as soon as *cancel* is set.
    Exceptions from *on_tick* are logged and do not stop the loop.
    """
    if cancel is None:
        cancel = asyncio.Event()

    index = 0

    while True:
        if cancel.is_set():
            return TerminationReason.CANCELLED

        try:
            await on_tick(index)
        except Exception:
            logger.exception("Tick %d failed", index)

        if cancel.is_set():
            return TerminationReason.CANCELLED

        if await _wait_or_cancel(cancel, interval):
            logger.debug("Cancelled during wait after tick %d", index)
            return TerminationReason.CANCELLED

        index += 1
        if _budget_spent(index * interval, total_budget):
            logger.debug("Budget of %ss used after %d ticks", total_budget, index)
            return TerminationReason.COMPLETED
