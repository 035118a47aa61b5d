"""Lazily created delivery workers keyed by routing token and document type.

Purpose
-------
Guarantee exactly one delivery worker per :class:`RoutingKey` for the lifetime
of the output, and connect each worker's notifications to the shared stats
sink and the pending counter.

Contents
--------
* :data:`HOSTED_INGESTION_PATTERN` - URL pattern of hosted endpoints.
* :func:`use_index_in_bulk_url` - bulk path policy per destination.
* :class:`WorkerPool` - get-or-create registry.

System Role
-----------
Owned by the composition root. The router asks for workers, the shutdown drain
iterates them.
"""

from __future__ import annotations

import logging
import re
import threading
from collections.abc import Iterator

from lib_log_elastic.application.ports.stats import StatsSinkPort
from lib_log_elastic.application.ports.worker import DeliveryWorkerPort, WorkerFactory, WorkerOptions
from lib_log_elastic.domain.config import AdapterConfig
from lib_log_elastic.domain.notifications import (
    DeliveryFailed,
    Retransmitted,
    Shipped,
    WorkerNotification,
    WorkerSignal,
    describe_error,
)
from lib_log_elastic.domain.pending import PendingCounter
from lib_log_elastic.domain.routing import RoutingKey

logger = logging.getLogger(__name__)

HOSTED_INGESTION_PATTERN = re.compile(r"logsene")


def use_index_in_bulk_url(url: str | None) -> bool:
    """Return ``False`` for hosted endpoints, ``True`` for self-managed ones.

    Hosted ingestion creates missing indices on a plain ``/_bulk`` request, so
    the index must stay out of the path there.

    Examples
    --------
    >>> use_index_in_bulk_url('https://thisisanexample.logsene.com')
    False
    >>> use_index_in_bulk_url('http://localhost:9200')
    True
    """

    if not url:
        return True
    return HOSTED_INGESTION_PATTERN.search(url) is None


class WorkerPool:
    """Registry creating one delivery worker per routing key on first use."""

    def __init__(
        self,
        *,
        factory: WorkerFactory,
        stats: StatsSinkPort,
        pending: PendingCounter,
        log_new_tokens: bool = False,
    ) -> None:
        self._factory = factory
        self._stats = stats
        self._pending = pending
        self._log_new_tokens = log_new_tokens
        self._workers: dict[str, DeliveryWorkerPort] = {}
        self._lock = threading.Lock()

    def get_or_create(self, key: RoutingKey, config: AdapterConfig) -> DeliveryWorkerPort:
        """Return the worker for ``key``, creating it from ``config`` if needed.

        Existing workers are returned unchanged even when ``config`` differs
        from the one they were created with.
        """

        with self._lock:
            worker = self._workers.get(key.pool_key)
            if worker is None:
                worker = self._create(key, config)
                self._workers[key.pool_key] = worker
            return worker

    def items(self) -> list[tuple[str, DeliveryWorkerPort]]:
        """Return a snapshot of ``(pool_key, worker)`` pairs in creation order."""

        with self._lock:
            return list(self._workers.items())

    def __contains__(self, key: object) -> bool:
        pool_key = key.pool_key if isinstance(key, RoutingKey) else key
        with self._lock:
            return pool_key in self._workers

    def __iter__(self) -> Iterator[DeliveryWorkerPort]:
        return iter([worker for _, worker in self.items()])

    def __len__(self) -> int:
        with self._lock:
            return len(self._workers)

    def _create(self, key: RoutingKey, config: AdapterConfig) -> DeliveryWorkerPort:
        options = WorkerOptions(
            use_index_in_bulk_url=use_index_in_bulk_url(config.url),
            http_options=config.http_options,
        )
        worker = self._factory(key.token, key.document_type, config.url, config.disk_buffer_dir, options)
        self._stats.record_token_seen(key.token)
        worker.add_listener(WorkerSignal.LOG, self._on_shipped)
        worker.add_listener(WorkerSignal.ERROR, self._on_failed)
        worker.add_listener(WorkerSignal.RETRANSMIT, self._on_retransmit)
        if self._log_new_tokens:
            logger.info("create logger for token: %s", key.token)
        return worker

    def _on_shipped(self, notification: WorkerNotification) -> None:
        if not isinstance(notification, Shipped):
            return
        self._stats.record_shipped(notification.count)
        self._pending.confirm(notification.count)

    def _on_failed(self, notification: WorkerNotification) -> None:
        if not isinstance(notification, DeliveryFailed):
            return
        self._stats.record_failed()
        logger.error(
            "Error in Elasticsearch request:%s /%s",
            describe_error(notification.error),
            describe_error(notification.cause),
        )

    def _on_retransmit(self, notification: WorkerNotification) -> None:
        if not isinstance(notification, Retransmitted):
            return
        logger.warning("Retransmit %s to %s", notification.file, notification.url)
        self._stats.record_retransmit()
        self._stats.record_shipped(notification.count)


__all__ = ["HOSTED_INGESTION_PATTERN", "WorkerPool", "use_index_in_bulk_url"]
