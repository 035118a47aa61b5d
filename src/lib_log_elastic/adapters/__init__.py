"""Concrete adapters for the routing core's ports."""

from __future__ import annotations

from .config_reducer import reduce_config
from .console.rich_report import RichReportAdapter
from .dry_run_worker import DryRunWorker, DryRunWorkerFactory
from .event_bus import InMemoryEventBus
from .scheduler import AsyncioScheduler, InlineScheduler
from .stats import InMemoryStats, StatsSnapshot
from .tls import load_transport_options
from .token_mapper import LogSourceToIndexMapper

__all__ = [
    "AsyncioScheduler",
    "DryRunWorker",
    "DryRunWorkerFactory",
    "InMemoryEventBus",
    "InMemoryStats",
    "InlineScheduler",
    "LogSourceToIndexMapper",
    "RichReportAdapter",
    "StatsSnapshot",
    "load_transport_options",
    "reduce_config",
]
