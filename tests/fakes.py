"""Test doubles for the routing core's ports."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

from lib_log_elastic.application.ports.worker import Listener, WorkerOptions
from lib_log_elastic.domain.notifications import (
    DeliveryFailed,
    Retransmitted,
    Shipped,
    WorkerNotification,
    WorkerSignal,
)


class FakeWorker:
    """Records calls and lets tests emit notifications explicitly."""

    def __init__(self, token: str, document_type: str, url: str | None, disk_buffer_dir: str | None, options: WorkerOptions) -> None:
        self.token = token
        self.document_type = document_type
        self.url = url
        self.disk_buffer_dir = disk_buffer_dir
        self.options = options
        self.logged: list[tuple[Any, Any, dict[str, Any]]] = []
        self.send_calls = 0
        self._listeners: dict[WorkerSignal, list[tuple[Listener, bool]]] = {}

    def log(self, severity: Any, message: Any, record: Mapping[str, Any]) -> None:
        self.logged.append((severity, message, dict(record)))

    def send(self) -> None:
        self.send_calls += 1

    def add_listener(self, signal: WorkerSignal, callback: Listener, *, once: bool = False) -> None:
        self._listeners.setdefault(signal, []).append((callback, once))

    def listener_count(self, signal: WorkerSignal) -> int:
        return len(self._listeners.get(signal, []))

    def _emit(self, signal: WorkerSignal, notification: WorkerNotification) -> None:
        registrations = list(self._listeners.get(signal, []))
        self._listeners[signal] = [entry for entry in registrations if not entry[1]]
        for callback, _once in registrations:
            callback(notification)

    def ship(self, count: int) -> None:
        self._emit(WorkerSignal.LOG, Shipped(count))

    def fail(self, error: Any = None, cause: Any = None) -> None:
        self._emit(WorkerSignal.ERROR, DeliveryFailed(error, cause))

    def retransmit(self, file: str, url: str, count: int) -> None:
        self._emit(WorkerSignal.RETRANSMIT, Retransmitted(file, url, count))


class FakeWorkerFactory:
    def __init__(self) -> None:
        self.created: list[FakeWorker] = []

    def __call__(
        self,
        token: str,
        document_type: str,
        url: str | None,
        disk_buffer_dir: str | None,
        options: WorkerOptions,
    ) -> FakeWorker:
        worker = FakeWorker(token, document_type, url, disk_buffer_dir, options)
        self.created.append(worker)
        return worker


class FakeTimer:
    def __init__(self, delay: float, callback: Callable[[], None]) -> None:
        self.delay = delay
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True

    def fire(self) -> None:
        if not self.cancelled:
            self.callback()


class ManualScheduler:
    """Collect deferred callbacks until the test runs them."""

    def __init__(self) -> None:
        self.soon: list[Callable[[], None]] = []
        self.timers: list[FakeTimer] = []

    def call_soon(self, callback: Callable[[], None]) -> None:
        self.soon.append(callback)

    def call_later(self, delay: float, callback: Callable[[], None]) -> FakeTimer:
        timer = FakeTimer(delay, callback)
        self.timers.append(timer)
        return timer

    def run_pending(self) -> int:
        ran = 0
        while self.soon:
            callback = self.soon.pop(0)
            callback()
            ran += 1
        return ran


class RecordingBus:
    """Event bus double that records subscriptions by identity."""

    def __init__(self) -> None:
        self.handlers: list[Callable[..., None]] = []
        self.subscribe_calls = 0
        self.unsubscribe_calls = 0

    def subscribe(self, handler: Callable[..., None]) -> None:
        self.subscribe_calls += 1
        if not any(existing is handler for existing in self.handlers):
            self.handlers.append(handler)

    def unsubscribe(self, handler: Callable[..., None]) -> None:
        self.unsubscribe_calls += 1
        self.handlers = [existing for existing in self.handlers if existing is not handler]

    def publish(self, event: Mapping[str, Any], context: Any = None) -> None:
        for handler in list(self.handlers):
            handler(event, context)


__all__ = ["FakeTimer", "FakeWorker", "FakeWorkerFactory", "ManualScheduler", "RecordingBus"]
