"""Rich terminal output for responder."""

from __future__ import annotations

import json
from typing import Optional

from rich.console import Console
from rich.markup import escape

from responder.config import NO_DATA
from responder.models import ProbeConfig, ProbeOutcome, RunningStats

console = Console()
err_console = Console(stderr=True)


def _fmt_ms(value: Optional[float]) -> str:
    """Format a millisecond value with three decimals, or the no-data marker."""
    if value is None:
        return NO_DATA
    return f"{value:.3f}"


def _plain(text: str, end: str = "\n") -> None:
    console.print(text, end=end, markup=False, highlight=False, soft_wrap=True)


# ── Header ────────────────────────────────────────────────────────────


def build_header(config: ProbeConfig) -> str:
    """Return the startup banner describing the run."""
    return "\n".join([
        f"[INFO] Testing endpoint `{config.host}:{config.port}`.",
        f"[INFO] HTTP method is {config.http_method}.",
        f"[INFO] Calling `run_interval` every {config.interval:g} seconds.",
        f"[INFO] Total running time is {config.running_time} seconds.",
    ])


def render_header(config: ProbeConfig) -> None:
    _plain(build_header(config))


def render_config(config: ProbeConfig) -> None:
    """Echo the effective configuration as pretty JSON (``--debug``)."""
    _plain(json.dumps(config.to_dict(), indent=2))


# ── Per-probe narration ───────────────────────────────────────────────


def format_tick(outcome: ProbeOutcome, verbose: bool = False) -> str:
    """Progress fragment for a successful probe: ``3..`` or ``3..42.125ms``."""
    n = outcome.sequence_index + 1
    if verbose and outcome.sample is not None:
        return f"{n}..{_fmt_ms(outcome.sample.latency_ms)}ms\n"
    return f"{n}.."


def render_tick(outcome: ProbeOutcome, verbose: bool = False) -> None:
    if outcome.is_error:
        return
    _plain(format_tick(outcome, verbose), end="")


def render_probe_error(outcome: ProbeOutcome) -> None:
    """Surface a failed probe on stderr without interrupting the run."""
    err_console.print(
        f"[red]\\[ERROR][/red] {escape(outcome.error or '')}", highlight=False, soft_wrap=True,
    )


# ── Summary ───────────────────────────────────────────────────────────


def build_console_summary(stats: RunningStats) -> str:
    """Return the human-readable min/max/average block for a finished run."""
    return "\n".join([
        "",
        "===============",
        "RESPONSE TIMES:",
        "===============",
        f"Average: {_fmt_ms(stats.average)}",
        f"Maximum: {_fmt_ms(stats.maximum)}",
        f"Minimum: {_fmt_ms(stats.minimum)}",
    ])


def render_summary(stats: RunningStats) -> None:
    _plain(build_console_summary(stats))


def render_warning(message: str) -> None:
    """Display a warning message."""
    err_console.print(f"[yellow]Warning:[/yellow] {escape(message)}", highlight=False, soft_wrap=True)
