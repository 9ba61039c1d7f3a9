"""Data models for responder."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, Optional, Sequence

from responder.config import (
    DEFAULT_HTTP_METHOD,
    DEFAULT_INTERVAL,
    DEFAULT_RUNNING_TIME,
    HOSTNAME,
    HTTP_METHODS,
    PORT,
)


def compute_average(values: Sequence[float]) -> Optional[float]:
    """Arithmetic mean of *values*, or None when there is nothing to average."""
    if not values:
        return None
    return sum(values) / len(values)


class ConfigError(ValueError):
    """Raised when the run configuration is invalid."""


class TerminationReason(enum.Enum):
    """Why the scheduling loop stopped."""

    COMPLETED = "completed"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class ProbeConfig:
    """Configuration for a probing run. Immutable once built."""

    host: str = HOSTNAME
    port: str = PORT
    http_method: str = DEFAULT_HTTP_METHOD
    interval: float = DEFAULT_INTERVAL
    running_time: int = DEFAULT_RUNNING_TIME
    outfile: Optional[str] = None  # None = standard output
    debug: bool = False
    silent: bool = False
    verbose: bool = False
    no_header: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "http_method", str(self.http_method).upper())

    @property
    def url(self) -> str:
        return f"https://{self.host}:{self.port}/"

    def validate(self) -> "ProbeConfig":
        """Check invariants, raising :class:`ConfigError` on the first violation."""
        if self.http_method not in HTTP_METHODS:
            raise ConfigError(
                f"Unsupported HTTP method {self.http_method!r}; expected one of {', '.join(HTTP_METHODS)}"
            )
        if not self.interval > 0:
            raise ConfigError(f"Interval must be positive, got {self.interval}")
        if not self.running_time > 0:
            raise ConfigError(f"Running time must be positive, got {self.running_time}")
        return self

    def to_dict(self) -> dict[str, Any]:
        return {
            "debug": self.debug,
            "http_method": self.http_method,
            "interval": self.interval,
            "no_header": self.no_header,
            "outfile": self.outfile or "STDOUT",
            "running_time": self.running_time,
            "silent": self.silent,
            "verbose": self.verbose,
        }


@dataclass(frozen=True)
class Sample:
    """Latency of one successful probe."""

    latency_ms: float
    sequence_index: int


@dataclass(frozen=True)
class ProbeOutcome:
    """Result of a single probe: either a sample or an error description."""

    sequence_index: int
    sample: Optional[Sample] = None
    error: Optional[str] = None

    @classmethod
    def success(cls, latency_ms: float, sequence_index: int) -> "ProbeOutcome":
        return cls(sequence_index=sequence_index, sample=Sample(latency_ms, sequence_index))

    @classmethod
    def failure(cls, description: str, sequence_index: int) -> "ProbeOutcome":
        return cls(sequence_index=sequence_index, error=description)

    @property
    def is_error(self) -> bool:
        return self.sample is None


@dataclass(frozen=True)
class RunningStats:
    """Read-only view of the aggregated latency statistics."""

    count: int = 0
    samples: tuple[Sample, ...] = ()
    minimum: Optional[float] = None  # None until the first sample
    maximum: Optional[float] = None
    errors: int = 0

    @property
    def latencies(self) -> list[float]:
        return [s.latency_ms for s in self.samples]

    @property
    def average(self) -> Optional[float]:
        return compute_average(self.latencies)


@dataclass
class RunResult:
    """Outcome of a complete run."""

    reason: TerminationReason
    stats: RunningStats = field(default_factory=RunningStats)
    ticks: int = 0

    @property
    def cancelled(self) -> bool:
        return self.reason is TerminationReason.CANCELLED
