"""Lifecycle notifications emitted by delivery workers.

Purpose
-------
Model the three signals a delivery worker reports back as a closed set of
immutable variants, so listeners dispatch on type instead of on loosely shaped
payload dictionaries.

Contents
--------
* :class:`WorkerSignal` - enumeration used when registering listeners.
* :class:`Shipped`, :class:`DeliveryFailed`, :class:`Retransmitted` - payloads.
* :func:`describe_error` - compact ``key=value`` rendering for log lines.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, Union


class WorkerSignal(Enum):
    """Signals a delivery worker can emit."""

    LOG = "log"
    ERROR = "error"
    RETRANSMIT = "rt"


def _coerce_count(value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


@dataclass(slots=True, frozen=True)
class Shipped:
    """A bulk batch of ``count`` records was accepted by the destination."""

    count: int

    def __post_init__(self) -> None:
        object.__setattr__(self, "count", _coerce_count(self.count))


@dataclass(slots=True, frozen=True)
class DeliveryFailed:
    """A bulk request failed; ``cause`` carries the nested transport error."""

    error: Any
    cause: Any = None


@dataclass(slots=True, frozen=True)
class Retransmitted:
    """A buffered ``file`` was re-sent to ``url`` after an earlier failure."""

    file: str
    url: str
    count: int

    def __post_init__(self) -> None:
        object.__setattr__(self, "count", _coerce_count(self.count))


WorkerNotification = Union[Shipped, DeliveryFailed, Retransmitted]

SIGNAL_PAYLOADS: dict[WorkerSignal, type] = {
    WorkerSignal.LOG: Shipped,
    WorkerSignal.ERROR: DeliveryFailed,
    WorkerSignal.RETRANSMIT: Retransmitted,
}


def describe_error(error: Any) -> str:
    """Render an error payload as ``key=value`` pairs.

    Examples
    --------
    >>> describe_error({'status': 503, 'reason': 'busy'})
    ' status=503 reason="busy"'
    >>> describe_error(None)
    ''
    >>> describe_error(ValueError('bad'))
    " ValueError('bad')"
    """

    if error is None:
        return ""
    if isinstance(error, Mapping):
        return "".join(f" {key}={json.dumps(value, default=str)}" for key, value in error.items())
    return f" {error!r}"


__all__ = [
    "DeliveryFailed",
    "Retransmitted",
    "SIGNAL_PAYLOADS",
    "Shipped",
    "WorkerNotification",
    "WorkerSignal",
    "describe_error",
]
