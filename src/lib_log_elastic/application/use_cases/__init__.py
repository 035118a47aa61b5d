"""Use cases composing the routing core."""

from __future__ import annotations

from .resolve_route import RouteResolver, create_route_resolver
from .route_event import EventRouter, RouterState
from .shutdown import ShutdownDrain
from .worker_pool import WorkerPool, use_index_in_bulk_url

__all__ = [
    "EventRouter",
    "RouteResolver",
    "RouterState",
    "ShutdownDrain",
    "WorkerPool",
    "create_route_resolver",
    "use_index_in_bulk_url",
]
