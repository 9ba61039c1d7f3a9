"""CLI entry point and orchestration for responder."""

from __future__ import annotations

import asyncio
import logging
import os
import signal
from typing import Callable

import click

from responder import __version__
from responder.config import DEFAULT_HTTP_METHOD, DEFAULT_INTERVAL, DEFAULT_RUNNING_TIME, HTTP_METHODS
from responder.models import ConfigError, ProbeConfig, ProbeOutcome, RunResult

logger = logging.getLogger(__name__)


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.option("-d", "--debug", is_flag=True, help="Print the effective configuration and debug logs")
@click.option(
    "-i", "--interval",
    default=DEFAULT_INTERVAL,
    type=click.FloatRange(min=0, min_open=True),
    metavar="SECONDS",
    help="Seconds between probes",
    show_default=True,
)
@click.option(
    "-m", "--http_method",
    default=DEFAULT_HTTP_METHOD,
    type=click.Choice(HTTP_METHODS, case_sensitive=False),
    help="HTTP method to probe with",
    show_default=True,
)
@click.option("--no-header", is_flag=True, help="Don't print the header")
@click.option("-o", "--outfile", default=None, metavar="FILE", help="Write the JSON report to FILE [default: stdout]")
@click.option("-s", "--silent", is_flag=True, help="No per-probe output; print the JSON report")
@click.option(
    "-t", "--running_time",
    default=DEFAULT_RUNNING_TIME,
    type=click.IntRange(min=1),
    metavar="SECONDS",
    help="Total time of the test",
    show_default=True,
)
@click.option("-v", "--verbose", is_flag=True, help="Print every response time in ms")
@click.version_option(version=__version__)
def main(
    debug: bool,
    interval: float,
    http_method: str,
    no_header: bool,
    outfile: str | None,
    silent: bool,
    running_time: int,
    verbose: bool,
) -> None:
    """Periodic HTTP latency prober.

    Sends one request to the target every interval for the running time
    and reports minimum, maximum and average response times.  Ctrl-C stops
    the run early and prints the JSON report of what was collected.
    """
    config = ProbeConfig(
        http_method=http_method,
        interval=interval,
        running_time=running_time,
        outfile=outfile,
        debug=debug,
        silent=silent,
        verbose=verbose,
        no_header=no_header,
    )
    try:
        config.validate()
    except ConfigError as exc:
        raise click.UsageError(str(exc)) from exc

    _configure_logging(debug)

    if debug:
        from responder.display import render_config
        render_config(config)

    if not silent:
        # Check for proxy warnings
        for var in ("HTTPS_PROXY", "https_proxy", "ALL_PROXY", "all_proxy"):
            if os.environ.get(var):
                from responder.display import render_warning
                render_warning(f"Proxy detected ({var}={os.environ[var]}); response times include the proxy hop")
                break

        if not no_header:
            from responder.display import render_header
            render_header(config)

    result = asyncio.run(_run(config))

    _handle_output(result, config)


def _configure_logging(debug: bool) -> None:
    """Route log records through rich on stderr.

    ``--debug`` only lowers the ``responder`` loggers; httpx and httpcore
    stay at WARNING.
    """
    from rich.logging import RichHandler

    from responder.display import err_console

    logging.basicConfig(
        level=logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False)],
    )
    logging.getLogger("responder").setLevel(logging.DEBUG if debug else logging.WARNING)


def _install_signal_handlers(
    loop: asyncio.AbstractEventLoop,
    cancel: asyncio.Event,
) -> Callable[[], None]:
    """Make SIGINT/SIGTERM set *cancel*; return a function that undoes it."""
    via_loop: list[signal.Signals] = []
    previous: dict[signal.Signals, object] = {}

    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, cancel.set)
            via_loop.append(sig)
        except (NotImplementedError, RuntimeError):
            # No loop-level handlers (e.g. Windows); fall back to signal.signal.
            try:
                previous[sig] = signal.signal(
                    sig, lambda *_: loop.call_soon_threadsafe(cancel.set),
                )
            except ValueError:
                # Not the main thread: signals cannot be hooked here at all.
                logger.debug("Cannot install handler for %s outside the main thread", sig.name)

    def restore() -> None:
        for sig in via_loop:
            loop.remove_signal_handler(sig)
        for sig, handler in previous.items():
            signal.signal(sig, handler)

    return restore


async def _run(config: ProbeConfig) -> RunResult:
    """Main async orchestration."""
    from responder import engine
    from responder.display import render_probe_error, render_tick
    from responder.stats import StatsAggregator

    cancel = asyncio.Event()
    restore = _install_signal_handlers(asyncio.get_running_loop(), cancel)

    def on_outcome(outcome: ProbeOutcome) -> None:
        if outcome.is_error:
            render_probe_error(outcome)
        elif not config.silent:
            render_tick(outcome, verbose=config.verbose)

    try:
        return await engine.measure_target(
            config,
            StatsAggregator(),
            cancel=cancel,
            on_outcome=on_outcome,
            probe_fn=engine.probe,
        )
    finally:
        restore()


def _handle_output(result: RunResult, config: ProbeConfig) -> None:
    """Pick the console summary or the JSON report and emit it."""
    from responder.display import console, render_summary
    from responder.export import build_report, export_json, write_to_file

    json_str = export_json(build_report(config, result.stats))

    if result.cancelled and not config.silent:
        console.print("\n[yellow]Interrupted.[/yellow]")

    # JSON report
    if config.silent or result.cancelled:
        if config.outfile:
            write_to_file(json_str, config.outfile)
            if not config.silent:
                console.print(f"[dim]Results written to {config.outfile}[/dim]")
        else:
            click.echo(json_str)
        return

    # Console summary
    render_summary(result.stats)

    # Also write the JSON report if -o specified
    if config.outfile:
        write_to_file(json_str, config.outfile)
        console.print(f"\n[dim]Results written to {config.outfile}[/dim]")


if __name__ == "__main__":
    main()
