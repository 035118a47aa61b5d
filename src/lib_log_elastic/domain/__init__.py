"""Domain entities and value objects used by the routing core."""

from __future__ import annotations

from .config import AdapterConfig, TransportOptions
from .context import EMPTY_CONTEXT, RoutingContext
from .errors import ConfigurationFileError, ElasticOutputError, InvalidTimestamp
from .index_template import render_index_name
from .notifications import DeliveryFailed, Retransmitted, Shipped, WorkerNotification, WorkerSignal
from .pending import PendingCounter
from .routing import RouteDecision, RoutingKey

__all__ = [
    "AdapterConfig",
    "ConfigurationFileError",
    "DeliveryFailed",
    "EMPTY_CONTEXT",
    "ElasticOutputError",
    "InvalidTimestamp",
    "PendingCounter",
    "Retransmitted",
    "RouteDecision",
    "RoutingContext",
    "RoutingKey",
    "Shipped",
    "TransportOptions",
    "WorkerNotification",
    "WorkerSignal",
    "render_index_name",
]
