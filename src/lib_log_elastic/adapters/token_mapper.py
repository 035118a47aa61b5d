"""Regex-based log source to routing token mapping.

Purpose
-------
Route events to tenant-specific indices based on the name of the source that
produced them (file path, container name, journald unit, ...).

Contents
--------
* :class:`LogSourceToIndexMapper` - concrete :class:`TokenMapperPort`.

System Role
-----------
Built by the composition root from the ``indices`` section of the adapter
configuration. A hit overrides every other index candidate.
"""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from typing import Pattern

from lib_log_elastic.application.ports.routing import TokenMapperPort

_MISS = ""


class LogSourceToIndexMapper(TokenMapperPort):
    """Find the routing token whose patterns match a source name.

    Parameters
    ----------
    indices:
        Mapping of routing token -> regular expressions (or a single pattern
        string). Tokens are tried in mapping order; the first match wins.
    cache_size:
        Maximum number of remembered lookups; the cache is reset when full.

    Examples
    --------
    >>> mapper = LogSourceToIndexMapper({'TOKEN123': ['app1'], 'OTHER': [r'/var/log/.*']})
    >>> mapper.find_token('app1')
    'TOKEN123'
    >>> mapper.find_token('/var/log/syslog')
    'OTHER'
    >>> mapper.find_token('unknown') is None
    True
    """

    def __init__(self, indices: Mapping[str, Sequence[str] | str], *, cache_size: int = 4096) -> None:
        if not isinstance(indices, Mapping):
            raise ValueError("indices must be a mapping of token -> list of patterns")
        self._patterns: list[tuple[str, list[Pattern[str]]]] = []
        for token, patterns in indices.items():
            if isinstance(patterns, str):
                patterns = [patterns]
            self._patterns.append((token, [re.compile(pattern) for pattern in patterns]))
        self._cache: dict[str, str] = {}
        self._cache_size = cache_size

    def find_token(self, source_name: str) -> str | None:
        """Return the token mapped to ``source_name`` or ``None``."""

        cached = self._cache.get(source_name)
        if cached is not None:
            return cached or None
        token = self._match(source_name)
        if len(self._cache) >= self._cache_size:
            self._cache.clear()
        self._cache[source_name] = token or _MISS
        return token

    def _match(self, source_name: str) -> str | None:
        for token, patterns in self._patterns:
            if any(pattern.search(source_name) for pattern in patterns):
                return token
        return None


__all__ = ["LogSourceToIndexMapper"]
