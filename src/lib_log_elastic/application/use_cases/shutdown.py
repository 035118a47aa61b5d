"""Shutdown orchestration for the Elasticsearch output.

Purpose
-------
Stop accepting events, ask every delivery worker to flush, and report
completion once the flushes have been confirmed.

Contents
--------
* :class:`ShutdownDrain` - the drain sequence.

System Role
-----------
Invoked by :meth:`lib_log_elastic.output.ElasticsearchOutput.stop`.

Completion is driven by two independent predicates, each allowed to finish
the drain:

* a worker confirms a batch (``Shipped``) and the global pending count is
  zero;
* a worker reports a failure and the outstanding-worker count reaches zero.

The outstanding-worker count starts at ``len(workers) - 1``. With a single
worker that fails, the failure predicate never reaches zero and only the
pending predicate or the optional timeout ends the drain. Completion runs the
caller's callback at most once; later triggers are logged and ignored, and
batches confirmed after completion are not reported by the drain.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from functools import partial

from lib_log_elastic.application.ports.scheduler import CancelHandle, SchedulerPort
from lib_log_elastic.application.ports.worker import DeliveryWorkerPort
from lib_log_elastic.domain.notifications import Shipped, WorkerNotification, WorkerSignal
from lib_log_elastic.domain.pending import PendingCounter

from .route_event import EventRouter
from .worker_pool import WorkerPool

logger = logging.getLogger(__name__)


class _Completion:
    """Run ``callback`` once, whichever predicate fires first."""

    def __init__(self, callback: Callable[[], None]) -> None:
        self._callback = callback
        self._fired = False
        self._lock = threading.Lock()
        self._timer: CancelHandle | None = None

    @property
    def fired(self) -> bool:
        return self._fired

    def arm_timer(self, handle: CancelHandle) -> None:
        self._timer = handle

    def fire(self, reason: str) -> None:
        with self._lock:
            if self._fired:
                logger.debug("Drain already complete; ignoring %s", reason)
                return
            self._fired = True
            timer = self._timer
        if timer is not None:
            timer.cancel()
        logger.debug("Drain complete: %s", reason)
        self._callback()


class _Outstanding:
    def __init__(self, initial: int) -> None:
        self._value = initial
        self._lock = threading.Lock()

    def decrement(self) -> int:
        with self._lock:
            self._value -= 1
            return self._value


class ShutdownDrain:
    """Flush every worker and signal completion.

    Parameters
    ----------
    router:
        Router to unsubscribe before draining.
    pool:
        Worker registry to flush.
    pending:
        Global pending counter checked on every confirmed batch.
    scheduler:
        Defers the drain by one turn so events already dispatched in the
        current turn reach their workers first.
    destination:
        Destination URL used in log lines.
    """

    def __init__(
        self,
        *,
        router: EventRouter,
        pool: WorkerPool,
        pending: PendingCounter,
        scheduler: SchedulerPort,
        destination: str | None = None,
    ) -> None:
        self._router = router
        self._pool = pool
        self._pending = pending
        self._scheduler = scheduler
        self._destination = destination

    def stop(self, on_complete: Callable[[], None], *, timeout: float | None = None) -> None:
        """Unsubscribe immediately and schedule the drain.

        Parameters
        ----------
        on_complete:
            Invoked once when the drain finishes (or the timeout expires).
        timeout:
            Seconds after which the drain is force-completed with a warning.
            ``None`` waits for the workers indefinitely.
        """

        self._router.stop()
        completion = _Completion(on_complete)
        self._scheduler.call_soon(partial(self._drain, completion, timeout))

    def _drain(self, completion: _Completion, timeout: float | None) -> None:
        workers = self._pool.items()
        if timeout is not None:
            completion.arm_timer(self._scheduler.call_later(timeout, partial(self._expire, completion, timeout)))
        if not workers:
            if self._pending.is_drained:
                completion.fire("no workers to flush")
            return

        outstanding = _Outstanding(len(workers) - 1)
        for pool_key, worker in workers:
            self._flush(pool_key, worker, outstanding, completion)

    def _flush(
        self,
        pool_key: str,
        worker: DeliveryWorkerPort,
        outstanding: _Outstanding,
        completion: _Completion,
    ) -> None:
        logger.info("send %s", pool_key)
        worker.add_listener(WorkerSignal.LOG, partial(self._on_flushed, pool_key, outstanding, completion))
        worker.add_listener(WorkerSignal.ERROR, partial(self._on_flush_failed, pool_key, outstanding, completion), once=True)
        worker.send()

    def _on_flushed(
        self,
        pool_key: str,
        outstanding: _Outstanding,
        completion: _Completion,
        notification: WorkerNotification,
    ) -> None:
        if completion.fired:
            return
        outstanding.decrement()
        count = notification.count if isinstance(notification, Shipped) else 0
        pending = self._pending.value
        logger.info(
            "flushed %d logs for %s %s, logs in buffer: %d",
            count,
            self._destination,
            pool_key,
            pending,
        )
        if pending == 0:
            completion.fire(f"pending count drained after {pool_key}")

    def _on_flush_failed(
        self,
        pool_key: str,
        outstanding: _Outstanding,
        completion: _Completion,
        _notification: WorkerNotification,
    ) -> None:
        remaining = outstanding.decrement()
        logger.error("flushed logs for %s failed", pool_key)
        if remaining == 0:
            completion.fire(f"all workers reported after failure of {pool_key}")

    def _expire(self, completion: _Completion, timeout: float) -> None:
        if completion.fired:
            return
        logger.warning(
            "Drain did not finish within %.1fs; %d logs still pending",
            timeout,
            self._pending.value,
        )
        completion.fire("timeout")


__all__ = ["ShutdownDrain"]
