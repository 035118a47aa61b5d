"""Ports decoupling the routing core from concrete collaborators."""

from __future__ import annotations

from .event_bus import EventBusPort, ParsedEventHandler
from .routing import ConfigReducerPort, TokenMapperPort
from .scheduler import CancelHandle, SchedulerPort
from .stats import StatsSinkPort
from .worker import DeliveryWorkerPort, Listener, WorkerFactory, WorkerOptions

__all__ = [
    "CancelHandle",
    "ConfigReducerPort",
    "DeliveryWorkerPort",
    "EventBusPort",
    "Listener",
    "ParsedEventHandler",
    "SchedulerPort",
    "StatsSinkPort",
    "TokenMapperPort",
    "WorkerFactory",
    "WorkerOptions",
]
