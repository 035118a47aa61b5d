"""Elasticsearch output façade wiring domain, use cases, and adapters.

Purpose
-------
Expose one object a pipeline host constructs per configured Elasticsearch
output. It owns the worker pool, the pending counter and the router, and
offers ``start``/``stop`` with the documented drain semantics.

Contents
--------
* :class:`ElasticsearchOutput` - composition root and lifecycle API.

System Role
-----------
Outer shell of the package: hosts depend on this class and on the ports; the
routing policy itself lives in :mod:`lib_log_elastic.application.use_cases`.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Mapping
from typing import Any

from .adapters.config_reducer import reduce_config
from .adapters.scheduler import AsyncioScheduler, InlineScheduler
from .adapters.stats import InMemoryStats
from .adapters.token_mapper import LogSourceToIndexMapper
from .application.ports import (
    ConfigReducerPort,
    DeliveryWorkerPort,
    EventBusPort,
    SchedulerPort,
    StatsSinkPort,
    TokenMapperPort,
    WorkerFactory,
)
from .application.use_cases import EventRouter, RouterState, ShutdownDrain, WorkerPool, create_route_resolver
from .config import OutputSettings, load_adapter_config
from .domain.config import AdapterConfig
from .domain.pending import PendingCounter

logger = logging.getLogger(__name__)

_UNSET: Any = object()


class ElasticsearchOutput:
    """Route parsed events to per-index delivery workers.

    Parameters
    ----------
    config:
        :class:`AdapterConfig` or the raw option mapping accepted by
        :func:`lib_log_elastic.config.load_adapter_config`.
    bus:
        Upstream parsed-event bus.
    worker_factory:
        Builds the delivery worker for each new routing key.
    stats:
        Shipping statistics sink; a private :class:`InMemoryStats` by default.
    settings:
        Environment defaults; read from :data:`os.environ` when omitted.
    scheduler:
        Scheduler used by the drain. When omitted, the running asyncio loop is
        used if there is one, otherwise callbacks run inline.
    reduce_config_fn:
        Per-event config reducer.
    token_mapper:
        Source-name mapper; built from ``config.indices`` when omitted.

    Examples
    --------
    >>> from lib_log_elastic.adapters import DryRunWorkerFactory, InMemoryEventBus
    >>> bus = InMemoryEventBus()
    >>> factory = DryRunWorkerFactory()
    >>> output = ElasticsearchOutput(
    ...     {'url': 'http://localhost:9200', 'index': 'app'},
    ...     bus,
    ...     worker_factory=factory,
    ...     settings=OutputSettings(),
    ... )
    >>> output.start()
    True
    >>> bus.publish({'message': 'hello'})
    1
    >>> output.pending_count
    1
    >>> done = []
    >>> output.stop(lambda: done.append(True), timeout=None)
    >>> done, output.pending_count
    ([True], 0)
    """

    def __init__(
        self,
        config: AdapterConfig | Mapping[str, Any],
        bus: EventBusPort,
        *,
        worker_factory: WorkerFactory,
        stats: StatsSinkPort | None = None,
        settings: OutputSettings | None = None,
        scheduler: SchedulerPort | None = None,
        reduce_config_fn: ConfigReducerPort = reduce_config,
        token_mapper: TokenMapperPort | None = None,
    ) -> None:
        self._settings = settings if settings is not None else OutputSettings.from_env()
        if not isinstance(config, AdapterConfig):
            config = load_adapter_config(config, settings=self._settings)
        self._config = config
        if token_mapper is None and config.indices:
            token_mapper = LogSourceToIndexMapper(config.indices)
        self._stats: StatsSinkPort = stats if stats is not None else InMemoryStats()
        self._scheduler = scheduler
        self._pending = PendingCounter()
        self._pool = WorkerPool(
            factory=worker_factory,
            stats=self._stats,
            pending=self._pending,
            log_new_tokens=self._settings.log_new_tokens,
        )
        resolve = create_route_resolver(
            config=config,
            reduce_config=reduce_config_fn,
            token_mapper=token_mapper,
            default_token=self._settings.default_token,
        )
        self._router = EventRouter(
            bus=bus,
            resolve=resolve,
            pool=self._pool,
            pending=self._pending,
            activatable=config.is_activatable,
        )

    @property
    def config(self) -> AdapterConfig:
        return self._config

    @property
    def stats(self) -> StatsSinkPort:
        return self._stats

    @property
    def pending_count(self) -> int:
        """Events handed to workers and not yet confirmed shipped."""

        return self._pending.value

    @property
    def workers(self) -> dict[str, DeliveryWorkerPort]:
        """Snapshot of ``pool_key -> worker``."""

        return dict(self._pool.items())

    @property
    def is_running(self) -> bool:
        return self._router.state is RouterState.SUBSCRIBED

    def start(self) -> bool:
        """Subscribe to the bus; returns ``False`` when the output is unconfigured."""

        return self._router.start()

    def stop(
        self,
        on_complete: Callable[[], None],
        *,
        timeout: float | None = _UNSET,
        scheduler: SchedulerPort | None = None,
    ) -> None:
        """Stop routing and drain every worker.

        Parameters
        ----------
        on_complete:
            Called once the drain finishes.
        timeout:
            Force-complete after this many seconds; defaults to
            ``settings.drain_timeout``. ``None`` disables the deadline.
        scheduler:
            Overrides the scheduler chosen at construction for this drain.
        """

        effective_timeout = self._settings.drain_timeout if timeout is _UNSET else timeout
        drain = ShutdownDrain(
            router=self._router,
            pool=self._pool,
            pending=self._pending,
            scheduler=scheduler or self._select_scheduler(),
            destination=self._config.url,
        )
        drain.stop(on_complete, timeout=effective_timeout)

    async def stop_async(self, *, timeout: float | None = _UNSET) -> None:
        """Awaitable variant of :meth:`stop` for asyncio hosts."""

        loop = asyncio.get_running_loop()
        finished: asyncio.Future[None] = loop.create_future()

        def _resolve() -> None:
            if not finished.done():
                finished.set_result(None)

        self.stop(lambda: loop.call_soon_threadsafe(_resolve), timeout=timeout, scheduler=AsyncioScheduler(loop))
        await finished

    def _select_scheduler(self) -> SchedulerPort:
        if self._scheduler is not None:
            return self._scheduler
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            return InlineScheduler()
        return AsyncioScheduler(loop)


__all__ = ["ElasticsearchOutput"]
