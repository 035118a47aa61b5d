"""Port for deferring work to a later scheduling turn."""

from __future__ import annotations

from collections.abc import Callable
from typing import Protocol, runtime_checkable


@runtime_checkable
class CancelHandle(Protocol):
    def cancel(self) -> None: ...


@runtime_checkable
class SchedulerPort(Protocol):
    """Cooperative scheduling primitives used by the shutdown drain."""

    def call_soon(self, callback: Callable[[], None]) -> None:
        """Run ``callback`` on the next scheduling opportunity."""

    def call_later(self, delay: float, callback: Callable[[], None]) -> CancelHandle:
        """Run ``callback`` after ``delay`` seconds unless cancelled."""


__all__ = ["CancelHandle", "SchedulerPort"]
