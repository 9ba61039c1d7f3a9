"""Running latency statistics."""

from __future__ import annotations

import threading
from typing import Optional

from responder.models import RunningStats, Sample


class StatsAggregator:
    """Accumulates samples in arrival order along with running min/max.

    ``append`` and ``snapshot`` share one lock, so a snapshot taken while
    a probe is being recorded never sees a half-updated state.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._samples: list[Sample] = []
        self._minimum: Optional[float] = None
        self._maximum: Optional[float] = None
        self._errors = 0

    def append(self, sample: Sample) -> None:
        value = sample.latency_ms
        with self._lock:
            self._samples.append(sample)
            if self._maximum is None or value > self._maximum:
                self._maximum = value
            if self._minimum is None or value < self._minimum:
                self._minimum = value

    def record_error(self) -> None:
        with self._lock:
            self._errors += 1

    @property
    def count(self) -> int:
        with self._lock:
            return len(self._samples)

    def snapshot(self) -> RunningStats:
        with self._lock:
            return RunningStats(
                count=len(self._samples),
                samples=tuple(self._samples),
                minimum=self._minimum,
                maximum=self._maximum,
                errors=self._errors,
            )
