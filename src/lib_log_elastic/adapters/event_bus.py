"""In-process parsed-event bus.

Purpose
-------
Stand-in for the pipeline's event emitter when the output is embedded in a
Python host or driven from the CLI.

Contents
--------
* :class:`InMemoryEventBus` - identity-keyed subscriber list with synchronous
  fan-out.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Mapping
from typing import Any

from lib_log_elastic.application.ports.event_bus import EventBusPort, ParsedEventHandler
from lib_log_elastic.domain.context import EMPTY_CONTEXT, RoutingContext

logger = logging.getLogger(__name__)


class InMemoryEventBus(EventBusPort):
    """Deliver ``(event, context)`` pairs to subscribed handlers in order.

    Examples
    --------
    >>> bus = InMemoryEventBus()
    >>> seen = []
    >>> handler = lambda event, context: seen.append(event['message'])
    >>> bus.subscribe(handler)
    >>> bus.subscribe(handler)
    >>> bus.publish({'message': 'hi'})
    1
    >>> bus.unsubscribe(handler)
    >>> bus.publish({'message': 'ignored'})
    0
    >>> seen
    ['hi']
    """

    def __init__(self) -> None:
        self._handlers: list[ParsedEventHandler] = []
        self._lock = threading.Lock()

    def subscribe(self, handler: ParsedEventHandler) -> None:
        with self._lock:
            if not any(existing is handler for existing in self._handlers):
                self._handlers.append(handler)

    def unsubscribe(self, handler: ParsedEventHandler) -> None:
        with self._lock:
            self._handlers = [existing for existing in self._handlers if existing is not handler]

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._handlers)

    def publish(self, event: Mapping[str, Any], context: RoutingContext | None = None) -> int:
        """Deliver ``event`` to every handler; returns the number invoked.

        A failing handler is logged and does not prevent the others from
        receiving the event.
        """

        with self._lock:
            handlers = list(self._handlers)
        effective = context if context is not None else EMPTY_CONTEXT
        for handler in handlers:
            try:
                handler(event, effective)
            except Exception as exc:  # noqa: BLE001
                logger.error("Parsed-event handler raised an exception; continuing", exc_info=exc)
        return len(handlers)


__all__ = ["InMemoryEventBus"]
