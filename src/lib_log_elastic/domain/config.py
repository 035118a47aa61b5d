"""Static adapter configuration value objects.

Purpose
-------
Capture the settings an output instance is constructed with so every routing
decision works from an immutable snapshot.

Contents
--------
* :class:`TransportOptions` - already-loaded TLS material handed to workers.
* :class:`AdapterConfig` - index template, destination URL, buffer directory
  and the optional token-mapping table.

System Role
-----------
Lives in the domain layer. Per-event overrides never mutate an
:class:`AdapterConfig`; the config reducer returns a new instance instead.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, replace
from typing import Any


@dataclass(slots=True, frozen=True)
class TransportOptions:
    """TLS material forwarded to delivery workers.

    Attributes
    ----------
    key, cert, ca:
        Raw bytes read from disk at startup; ``None`` when not configured or
        when the file could not be read.
    """

    key: bytes | None = None
    cert: bytes | None = None
    ca: bytes | None = None

    @property
    def is_empty(self) -> bool:
        """Return ``True`` when no TLS material is present."""

        return self.key is None and self.cert is None and self.ca is None


@dataclass(slots=True, frozen=True)
class AdapterConfig:
    """Immutable configuration for one Elasticsearch output instance.

    Attributes
    ----------
    index:
        Default index name or template (``YYYY``/``MM``/``DD`` tokens allowed).
    url:
        Destination ingestion endpoint.
    disk_buffer_dir:
        Directory the delivery workers use for their on-disk buffers.
    indices:
        Token-mapping table: routing token -> source-name regular expressions.
    http_options:
        Transport options passed through to every worker.

    Examples
    --------
    >>> cfg = AdapterConfig(index='logs-YYYY', url='http://localhost:9200')
    >>> cfg.is_activatable
    True
    >>> cfg.with_overrides(index='other').index
    'other'
    >>> cfg.index
    'logs-YYYY'
    """

    index: str | None = None
    url: str | None = None
    disk_buffer_dir: str | None = None
    indices: Mapping[str, Sequence[str]] | None = None
    http_options: TransportOptions | None = None

    @property
    def is_activatable(self) -> bool:
        """Return ``True`` when either a default index or a destination exists."""

        return bool(self.index or self.url)

    def with_overrides(self, **changes: Any) -> "AdapterConfig":
        """Return a copy with ``changes`` applied."""

        return replace(self, **changes)


__all__ = ["AdapterConfig", "TransportOptions"]
