"""Periodic HTTP latency prober."""

__version__ = "0.1.0"
