"""Field alias tables for parsed events.

Inputs name the same concept differently (``severity`` vs ``level``,
``message`` vs ``msg`` vs journald's ``MESSAGE``). The tables below are
ordered; the first present, non-empty field wins.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

SEVERITY_FIELDS: tuple[str, ...] = ("severity", "level")
MESSAGE_FIELDS: tuple[str, ...] = ("message", "msg", "MESSAGE")
TIMESTAMP_FIELD = "@timestamp"
INDEX_FIELD = "_index"
TYPE_FIELD = "_type"
LOG_SOURCE_FIELD = "logSource"

DEFAULT_SEVERITY = "info"
DEFAULT_DOCUMENT_TYPE = "logs"


def first_match(event: Mapping[str, Any], candidates: Sequence[str], default: Any = None) -> Any:
    """Return the first truthy value among ``candidates`` in ``event``.

    Examples
    --------
    >>> first_match({'msg': 'hi', 'MESSAGE': 'ignored'}, MESSAGE_FIELDS)
    'hi'
    >>> first_match({'level': ''}, SEVERITY_FIELDS, DEFAULT_SEVERITY)
    'info'
    """

    for name in candidates:
        value = event.get(name)
        if value:
            return value
    return default


def severity_of(event: Mapping[str, Any]) -> Any:
    """Return the event severity, defaulting to ``"info"``."""

    return first_match(event, SEVERITY_FIELDS, DEFAULT_SEVERITY)


def message_of(event: Mapping[str, Any]) -> Any:
    return first_match(event, MESSAGE_FIELDS)


__all__ = [
    "DEFAULT_DOCUMENT_TYPE",
    "DEFAULT_SEVERITY",
    "INDEX_FIELD",
    "LOG_SOURCE_FIELD",
    "MESSAGE_FIELDS",
    "SEVERITY_FIELDS",
    "TIMESTAMP_FIELD",
    "TYPE_FIELD",
    "first_match",
    "message_of",
    "severity_of",
]
