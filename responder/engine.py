"""Probe engine for responder.

Each probe opens a fresh connection, sends one request and times the full
round trip with time.perf_counter() for monotonic, high-resolution
measurements.  Transport and protocol failures are folded into the
returned :class:`ProbeOutcome`; nothing else escapes a probe.

Public API:
    probe           -- run one timed request against the target
    measure_target  -- run probes on the scheduler until done or cancelled
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Awaitable, Callable, Optional

import httpx

from responder.config import READ_TIMEOUT, USER_AGENT
from responder.models import ProbeConfig, ProbeOutcome, RunResult
from responder.scheduler import run_loop
from responder.stats import StatsAggregator

logger = logging.getLogger(__name__)

# Type alias for the per-outcome callback (console narration).
OutcomeCallback = Callable[[ProbeOutcome], None]

# Signature: (config, sequence_index) -> outcome
ProbeFunction = Callable[[ProbeConfig, int], Awaitable[ProbeOutcome]]


# ---------------------------------------------------------------------------
# Single probe
# ---------------------------------------------------------------------------

def _describe_error(exc: Exception) -> str:
    message = str(exc) or exc.__class__.__doc__ or ""
    return f"{exc.__class__.__name__}: {message.strip()}"


async def probe(
    config: ProbeConfig,
    sequence_index: int,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> ProbeOutcome:
    """Execute one timed request of ``config.http_method`` against the target.

    A new client (and therefore a new connection) is used for every probe
    so each latency includes connection setup, as a first visit would.
    The clock starts once the client is built, so loading the SSL context
    is not counted.  Any response counts as a sample regardless of status
    code.

    Parameters
    ----------
    config:
        Run configuration supplying host, port and method.
    sequence_index:
        Tick index this probe belongs to.
    transport:
        Optional transport override, mainly for tests.
    """
    async with httpx.AsyncClient(
        transport=transport,
        timeout=httpx.Timeout(READ_TIMEOUT),
        headers={"User-Agent": USER_AGENT},
    ) as client:
        t0 = time.perf_counter()
        try:
            response = await client.request(config.http_method, config.url)
        except httpx.RequestError as exc:
            elapsed_ms = (time.perf_counter() - t0) * 1000.0
            logger.debug(
                "Probe %d failed after %.3fms: %r", sequence_index, elapsed_ms, exc,
            )
            return ProbeOutcome.failure(_describe_error(exc), sequence_index)
        elapsed_ms = (time.perf_counter() - t0) * 1000.0

    logger.debug(
        "Probe %d: %s %s -> %d in %.3fms",
        sequence_index, config.http_method, config.url, response.status_code, elapsed_ms,
    )
    return ProbeOutcome.success(elapsed_ms, sequence_index)


# ---------------------------------------------------------------------------
# Run orchestration
# ---------------------------------------------------------------------------

async def measure_target(
    config: ProbeConfig,
    aggregator: StatsAggregator,
    cancel: asyncio.Event | None = None,
    on_outcome: OutcomeCallback | None = None,
    probe_fn: ProbeFunction = probe,
) -> RunResult:
    """Probe the target every ``config.interval`` seconds for the run budget.

    Each probe is awaited before the scheduler moves on, so probes never
    overlap.  Samples go to *aggregator*; error outcomes only bump its
    error counter.

    Parameters
    ----------
    config:
        Run configuration.
    aggregator:
        Receives every successful sample.  Its snapshot is returned in the
        result and stays valid if the run is cancelled part way.
    cancel:
        Event that stops the run at the next tick boundary or during the
        inter-tick wait.
    on_outcome:
        Optional callable invoked after each probe has been recorded.
    probe_fn:
        Probe implementation; defaults to :func:`probe`.
    """
    ticks = 0

    async def on_tick(index: int) -> None:
        nonlocal ticks
        ticks += 1
        outcome = await probe_fn(config, index)
        if outcome.is_error:
            aggregator.record_error()
        else:
            aggregator.append(outcome.sample)
        if on_outcome:
            on_outcome(outcome)

    reason = await run_loop(config.interval, config.running_time, on_tick, cancel)
    logger.debug("Run finished: %s after %d ticks", reason.value, ticks)

    return RunResult(reason=reason, stats=aggregator.snapshot(), ticks=ticks)
