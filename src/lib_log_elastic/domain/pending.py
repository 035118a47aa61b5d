"""Bookkeeping for events accepted but not yet confirmed as shipped.

The counter is incremented once per event handed to a worker and decremented
by the count a worker reports when it confirms a bulk batch. Workers that
replay buffered files after a restart report batches this process never
accepted, so the value can legitimately drop below zero. The counter records
that instead of clamping it.
"""

from __future__ import annotations

import logging
import threading

logger = logging.getLogger(__name__)


class PendingCounter:
    """Thread-safe running total of in-flight events.

    Examples
    --------
    >>> pending = PendingCounter()
    >>> pending.accept()
    1
    >>> pending.confirm(3)
    -2
    >>> pending.is_drained
    False
    """

    def __init__(self) -> None:
        self._value = 0
        self._lock = threading.Lock()

    @property
    def value(self) -> int:
        with self._lock:
            return self._value

    @property
    def is_drained(self) -> bool:
        """Return ``True`` when exactly zero events are outstanding."""

        return self.value == 0

    def accept(self) -> int:
        """Record one event handed to a worker and return the new total."""

        with self._lock:
            self._value += 1
            return self._value

    def confirm(self, count: int) -> int:
        """Subtract ``count`` confirmed deliveries and return the new total."""

        with self._lock:
            self._value -= count
            value = self._value
        if value < 0:
            logger.debug("Pending count overshot to %d after confirming %d events", value, count)
        return value


__all__ = ["PendingCounter"]
