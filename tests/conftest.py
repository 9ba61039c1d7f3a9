"""Shared fixtures for the responder test suite."""

from __future__ import annotations

import asyncio
from typing import Sequence, Union

import pytest

from responder import scheduler
from responder.models import ProbeConfig, ProbeOutcome


@pytest.fixture
def instant_wait(monkeypatch: pytest.MonkeyPatch) -> list[float]:
    """Replace the inter-tick sleep with a no-op; records requested waits."""
    waits: list[float] = []

    async def fake_wait(cancel: asyncio.Event, seconds: float) -> bool:
        waits.append(seconds)
        await asyncio.sleep(0)
        return cancel.is_set()

    monkeypatch.setattr(scheduler, "_wait_or_cancel", fake_wait)
    return waits


@pytest.fixture
def scripted_probe():
    """Build a fake probe that replays latencies (floats) or errors (strings) by tick."""

    def factory(script: Sequence[Union[float, str]]):
        calls: list[int] = []

        async def fake_probe(config: ProbeConfig, index: int) -> ProbeOutcome:
            calls.append(index)
            value = script[index % len(script)]
            if isinstance(value, str):
                return ProbeOutcome.failure(value, index)
            return ProbeOutcome.success(value, index)

        fake_probe.calls = calls
        return fake_probe

    return factory
