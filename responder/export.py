"""JSON export of the structured run report."""

from __future__ import annotations

import json

from responder.models import ProbeConfig, RunningStats


def build_report(config: ProbeConfig, stats: RunningStats) -> dict:
    """Build the structured report for a run.

    ``maximum_response_time`` and ``minimum_response_time`` are None (JSON
    null) when no probe succeeded.
    """
    return {
        "domain": config.host,
        "port": str(config.port),
        "running_time": int(config.running_time),
        "response_times": stats.latencies,
        "maximum_response_time": stats.maximum,
        "minimum_response_time": stats.minimum,
    }


def export_json(report: dict, indent: int = 2) -> str:
    """Render a report as a pretty-printed JSON string."""
    return json.dumps(report, indent=indent)


def write_to_file(content: str, filepath: str) -> None:
    """Write export content to a file."""
    with open(filepath, "w") as f:
        f.write(content)
        if not content.endswith("\n"):
            f.write("\n")
