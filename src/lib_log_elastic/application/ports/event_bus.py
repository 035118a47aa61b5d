"""Port for the upstream pipeline bus emitting parsed events."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any, Protocol, runtime_checkable

from lib_log_elastic.domain.context import RoutingContext

ParsedEventHandler = Callable[[Mapping[str, Any], RoutingContext], None]


@runtime_checkable
class EventBusPort(Protocol):
    """Subscribe/unsubscribe handlers to the ``data.parsed`` signal.

    Handlers are tracked by identity: unsubscribing removes exactly the object
    that was subscribed, and subscribing the same object twice is a no-op.
    """

    def subscribe(self, handler: ParsedEventHandler) -> None: ...

    def unsubscribe(self, handler: ParsedEventHandler) -> None: ...


__all__ = ["EventBusPort", "ParsedEventHandler"]
