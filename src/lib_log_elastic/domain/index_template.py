"""Date substitution for time-based index names.

Purpose
-------
Turn index templates such as ``logs-YYYY.MM.DD`` into concrete daily index
names using the event's own timestamp.

Contents
--------
* :func:`render_index_name` - token substitution.
* :func:`coerce_timestamp` - accepts ``datetime``/``date`` objects and ISO-8601
  strings.

System Role
-----------
Pure domain helper invoked by the route resolver after the index candidate has
been chosen. The calendar fields are read as-is; no timezone conversion takes
place, so an index rolls over at the event's local midnight. Numeric epoch
values (seconds, or milliseconds when larger than
:data:`EPOCH_MILLIS_THRESHOLD`) are read as UTC.
"""

from __future__ import annotations

import re
from datetime import date, datetime, timezone
from typing import Any

from .errors import InvalidTimestamp

_DATE_TOKENS = re.compile(r"YYYY|MM|DD")

#: Epoch values at or above this magnitude are taken as milliseconds.
EPOCH_MILLIS_THRESHOLD = 100_000_000_000


def has_date_tokens(template: str) -> bool:
    """Return ``True`` when ``template`` contains any substitutable token."""

    return _DATE_TOKENS.search(template) is not None


def coerce_timestamp(value: Any) -> date:
    """Return ``value`` as a :class:`date`/:class:`datetime` or raise.

    Examples
    --------
    >>> coerce_timestamp('2024-03-07T10:00:00Z').day
    7
    >>> coerce_timestamp(1672913200000).day
    5
    >>> coerce_timestamp(None)
    Traceback (most recent call last):
    ...
    lib_log_elastic.domain.errors.InvalidTimestamp: event has no timestamp
    """

    if isinstance(value, date):
        return value
    if value is None:
        raise InvalidTimestamp("event has no timestamp")
    if isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            return datetime.fromisoformat(text)
        except ValueError as exc:
            raise InvalidTimestamp(f"unparseable timestamp: {value!r}") from exc
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return _from_epoch(value)
    raise InvalidTimestamp(f"unsupported timestamp type: {type(value).__name__}")


def _from_epoch(value: float) -> datetime:
    seconds = value / 1000 if abs(value) >= EPOCH_MILLIS_THRESHOLD else value
    try:
        return datetime.fromtimestamp(seconds, tz=timezone.utc)
    except (OverflowError, OSError, ValueError) as exc:
        raise InvalidTimestamp(f"epoch timestamp out of range: {value!r}") from exc


def render_index_name(template: str, timestamp: Any) -> str:
    """Replace ``YYYY``, ``MM`` and ``DD`` in ``template`` with date fields.

    Templates without tokens are returned unchanged and ``timestamp`` is not
    inspected.

    Examples
    --------
    >>> render_index_name('logs-YYYY.MM.DD', datetime(2024, 3, 7))
    'logs-2024.03.07'
    >>> render_index_name('static-index', None)
    'static-index'
    """

    if not has_date_tokens(template):
        return template
    moment = coerce_timestamp(timestamp)
    replacements = {
        "YYYY": f"{moment.year:04d}",
        "MM": f"{moment.month:02d}",
        "DD": f"{moment.day:02d}",
    }
    return _DATE_TOKENS.sub(lambda match: replacements[match.group(0)], template)


__all__ = ["EPOCH_MILLIS_THRESHOLD", "coerce_timestamp", "has_date_tokens", "render_index_name"]
