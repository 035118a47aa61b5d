"""In-memory shipping statistics."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field

from lib_log_elastic.application.ports.stats import StatsSinkPort


@dataclass(slots=True, frozen=True)
class StatsSnapshot:
    used_tokens: tuple[str, ...]
    logs_shipped: int
    http_failed: int
    retransmit: int

    def to_dict(self) -> dict[str, object]:
        return {
            "used_tokens": list(self.used_tokens),
            "logs_shipped": self.logs_shipped,
            "http_failed": self.http_failed,
            "retransmit": self.retransmit,
        }


@dataclass
class InMemoryStats(StatsSinkPort):
    """Counters shared by every worker of one or more outputs.

    Examples
    --------
    >>> stats = InMemoryStats()
    >>> stats.record_token_seen('tok')
    >>> stats.record_shipped(3)
    >>> stats.snapshot().logs_shipped
    3
    """

    used_tokens: list[str] = field(default_factory=list)
    logs_shipped: int = 0
    http_failed: int = 0
    retransmit: int = 0
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    def record_token_seen(self, token: str) -> None:
        with self._lock:
            self.used_tokens.append(token)

    def record_shipped(self, count: int) -> None:
        with self._lock:
            self.logs_shipped += count

    def record_failed(self) -> None:
        with self._lock:
            self.http_failed += 1

    def record_retransmit(self) -> None:
        with self._lock:
            self.retransmit += 1

    def snapshot(self) -> StatsSnapshot:
        with self._lock:
            return StatsSnapshot(
                used_tokens=tuple(self.used_tokens),
                logs_shipped=self.logs_shipped,
                http_failed=self.http_failed,
                retransmit=self.retransmit,
            )


__all__ = ["InMemoryStats", "StatsSnapshot"]
