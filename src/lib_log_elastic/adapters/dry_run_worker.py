"""In-memory delivery worker used for dry runs and embedding tests.

Purpose
-------
Provide a :class:`DeliveryWorkerPort` that behaves like a bulk shipper from the
routing core's point of view (buffering, flush on demand or at a threshold,
``log``/``error``/``rt`` notifications) without touching the network or disk.

Contents
--------
* :class:`DryRunWorker` - buffering worker with listener registry.
* :class:`DryRunWorkerFactory` - :class:`WorkerFactory` remembering every
  worker it built.

System Role
-----------
Backs the ``route`` CLI command and serves as the reference implementation of
the worker listener contract (registration order, ``once`` listeners).
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from lib_log_elastic.application.ports.worker import DeliveryWorkerPort, Listener, WorkerFactory, WorkerOptions
from lib_log_elastic.domain.notifications import SIGNAL_PAYLOADS, Shipped, WorkerNotification, WorkerSignal

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class _Registration:
    callback: Listener
    once: bool


@dataclass(slots=True, frozen=True)
class BufferedRecord:
    severity: Any
    message: Any
    record: Mapping[str, Any]


@dataclass
class DryRunWorker(DeliveryWorkerPort):
    """Buffer records in memory and "ship" them on :meth:`send`.

    ``send`` on an empty buffer still acknowledges with ``Shipped(0)`` so a
    drain never waits on a worker that has nothing left to deliver.

    Examples
    --------
    >>> worker = DryRunWorker('idx', 'logs', 'http://localhost:9200', None, WorkerOptions())
    >>> seen = []
    >>> worker.add_listener(WorkerSignal.LOG, lambda note: seen.append(note.count))
    >>> worker.log('info', 'hello', {'message': 'hello'})
    >>> worker.send()
    >>> seen, worker.shipped_count
    ([1], 1)
    """

    token: str
    document_type: str
    url: str | None
    disk_buffer_dir: str | None
    options: WorkerOptions
    flush_at: int = 0
    buffer: list[BufferedRecord] = field(default_factory=list)
    shipped: list[BufferedRecord] = field(default_factory=list)
    _listeners: dict[WorkerSignal, list[_Registration]] = field(default_factory=dict, repr=False)
    _lock: threading.RLock = field(default_factory=threading.RLock, repr=False)

    @property
    def shipped_count(self) -> int:
        return len(self.shipped)

    def add_listener(self, signal: WorkerSignal, callback: Listener, *, once: bool = False) -> None:
        with self._lock:
            self._listeners.setdefault(signal, []).append(_Registration(callback, once))

    def log(self, severity: Any, message: Any, record: Mapping[str, Any]) -> None:
        with self._lock:
            self.buffer.append(BufferedRecord(severity, message, dict(record)))
            threshold_reached = self.flush_at > 0 and len(self.buffer) >= self.flush_at
        if threshold_reached:
            self.send()

    def send(self) -> None:
        with self._lock:
            batch, self.buffer = self.buffer, []
            self.shipped.extend(batch)
        logger.debug("dry-run ship %d records to %s %s/%s", len(batch), self.url, self.token, self.document_type)
        self.emit(Shipped(len(batch)))

    def emit(self, notification: WorkerNotification) -> None:
        """Deliver ``notification`` to the listeners of its signal."""

        signal = next(sig for sig, payload in SIGNAL_PAYLOADS.items() if isinstance(notification, payload))
        with self._lock:
            registrations = list(self._listeners.get(signal, []))
            self._listeners[signal] = [entry for entry in registrations if not entry.once]
        for entry in registrations:
            entry.callback(notification)


class DryRunWorkerFactory(WorkerFactory):
    """Build :class:`DryRunWorker` instances and keep them for inspection."""

    def __init__(self, *, flush_at: int = 0) -> None:
        self._flush_at = flush_at
        self.workers: list[DryRunWorker] = []

    def __call__(
        self,
        token: str,
        document_type: str,
        url: str | None,
        disk_buffer_dir: str | None,
        options: WorkerOptions,
    ) -> DryRunWorker:
        worker = DryRunWorker(token, document_type, url, disk_buffer_dir, options, flush_at=self._flush_at)
        self.workers.append(worker)
        return worker


__all__ = ["BufferedRecord", "DryRunWorker", "DryRunWorkerFactory"]
