"""Port for the process-wide shipping statistics sink."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class StatsSinkPort(Protocol):
    """Write-only counters updated by the worker pool."""

    def record_token_seen(self, token: str) -> None:
        """Remember that a worker was created for ``token``."""

    def record_shipped(self, count: int) -> None:
        """Add ``count`` delivered records."""

    def record_failed(self) -> None:
        """Count one failed bulk request."""

    def record_retransmit(self) -> None:
        """Count one retransmitted buffer file."""


__all__ = ["StatsSinkPort"]
