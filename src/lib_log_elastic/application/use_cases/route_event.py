"""Forward parsed events from the upstream bus to delivery workers.

Purpose
-------
Subscribe to the pipeline's parsed-event signal and, for every event, resolve
its route, obtain the matching worker and hand the record over while keeping
the pending counter in step.

Contents
--------
* :class:`RouterState` - ``SUBSCRIBED`` / ``UNSUBSCRIBED``.
* :class:`EventRouter` - subscription lifecycle and per-event dispatch.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from enum import Enum
from typing import Any

from lib_log_elastic.application.ports.event_bus import EventBusPort, ParsedEventHandler
from lib_log_elastic.domain.context import EMPTY_CONTEXT, RoutingContext
from lib_log_elastic.domain.errors import InvalidTimestamp
from lib_log_elastic.domain.fields import message_of, severity_of
from lib_log_elastic.domain.pending import PendingCounter

from .resolve_route import RouteResolver
from .worker_pool import WorkerPool

logger = logging.getLogger(__name__)


class RouterState(Enum):
    UNSUBSCRIBED = "unsubscribed"
    SUBSCRIBED = "subscribed"


class EventRouter:
    """Dispatch parsed events to per-route delivery workers.

    Parameters
    ----------
    bus:
        Upstream event bus the router subscribes to.
    resolve:
        Route resolver built by :func:`create_route_resolver`.
    pool:
        Worker registry.
    pending:
        Counter incremented once per record handed to a worker.
    activatable:
        When ``False`` :meth:`start` leaves the router unsubscribed; used for
        output instances without an index or destination URL.
    """

    def __init__(
        self,
        *,
        bus: EventBusPort,
        resolve: RouteResolver,
        pool: WorkerPool,
        pending: PendingCounter,
        activatable: bool,
    ) -> None:
        self._bus = bus
        self._resolve = resolve
        self._pool = pool
        self._pending = pending
        self._activatable = activatable
        self._state = RouterState.UNSUBSCRIBED
        # One bound-method object for both subscribe and unsubscribe.
        self._handler: ParsedEventHandler = self.on_event

    @property
    def state(self) -> RouterState:
        return self._state

    def start(self) -> bool:
        """Subscribe to the bus; returns ``False`` when left inactive."""

        if self._state is RouterState.SUBSCRIBED:
            return True
        if not self._activatable:
            logger.debug("Elasticsearch output has no index or url configured; not subscribing")
            return False
        self._bus.subscribe(self._handler)
        self._state = RouterState.SUBSCRIBED
        return True

    def stop(self) -> None:
        """Unsubscribe from the bus; later deliveries are ignored."""

        if self._state is RouterState.SUBSCRIBED:
            self._bus.unsubscribe(self._handler)
        self._state = RouterState.UNSUBSCRIBED

    def on_event(self, event: Mapping[str, Any], context: RoutingContext | None = None) -> None:
        """Route ``event`` to its worker; unroutable events are dropped."""

        if self._state is not RouterState.SUBSCRIBED:
            return
        context = context if context is not None else EMPTY_CONTEXT
        try:
            decision = self._resolve(event, context)
        except InvalidTimestamp as exc:
            logger.warning("Dropping event without usable @timestamp for date-templated index: %s", exc)
            return
        if decision is None:
            return
        worker = self._pool.get_or_create(decision.key, decision.config)
        self._pending.accept()
        worker.log(severity_of(event), message_of(event), dict(event))


__all__ = ["EventRouter", "RouterState"]
