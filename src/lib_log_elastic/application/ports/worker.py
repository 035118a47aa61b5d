"""Port describing the per-destination delivery worker.

The worker owns disk buffering, bulk request assembly and retry/backoff. The
routing core only hands it records, asks it to flush, and listens to the
notifications it emits. Listeners for one signal must run in the order they
were registered: the pool's bookkeeping listener is registered first and the
shutdown drain relies on it having run before its own listener.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

from lib_log_elastic.domain.config import TransportOptions
from lib_log_elastic.domain.notifications import WorkerNotification, WorkerSignal

Listener = Callable[[WorkerNotification], None]


@dataclass(slots=True, frozen=True)
class WorkerOptions:
    """Creation options derived by the worker pool for one destination."""

    use_index_in_bulk_url: bool = True
    http_options: TransportOptions | None = None


@runtime_checkable
class DeliveryWorkerPort(Protocol):
    """Disk-buffered, retrying sender for one (token, document type) pair."""

    def log(self, severity: Any, message: Any, record: Mapping[str, Any]) -> None:
        """Accept one record for buffered delivery."""

    def send(self) -> None:
        """Force an immediate flush attempt of buffered records."""

    def add_listener(self, signal: WorkerSignal, callback: Listener, *, once: bool = False) -> None:
        """Register ``callback`` for ``signal``; ``once`` removes it after one call."""


@runtime_checkable
class WorkerFactory(Protocol):
    """Build a delivery worker for a newly seen routing key."""

    def __call__(
        self,
        token: str,
        document_type: str,
        url: str | None,
        disk_buffer_dir: str | None,
        options: WorkerOptions,
    ) -> DeliveryWorkerPort: ...


__all__ = ["DeliveryWorkerPort", "Listener", "WorkerFactory", "WorkerOptions"]
