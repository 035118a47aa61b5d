"""Per-event routing context supplied by the upstream pipeline."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any


@dataclass(slots=True, frozen=True)
class RoutingContext:
    """Read-only override bag accompanying each parsed event.

    Attributes
    ----------
    index:
        Explicit index requested by the input that produced the event.
    source_name:
        Name of the log source (file path, container name, ...). Used for
        token-mapping lookups when the event has no ``logSource`` field.
    overrides:
        Configuration overrides layered onto the static adapter config by the
        config reducer (``url``, ``index``, ``disk_buffer_dir``).
    """

    index: str | None = None
    source_name: str | None = None
    overrides: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "overrides", MappingProxyType(dict(self.overrides)))

    @classmethod
    def from_mapping(cls, payload: Mapping[str, Any] | None) -> "RoutingContext":
        """Build a context from the loose mapping shape emitted by inputs.

        Examples
        --------
        >>> ctx = RoutingContext.from_mapping({'sourceName': 'app1', 'index': 'idx', 'url': 'http://es'})
        >>> ctx.source_name, ctx.index, dict(ctx.overrides)
        ('app1', 'idx', {'url': 'http://es'})
        """

        if not payload:
            return cls()
        remaining = dict(payload)
        index = remaining.pop("index", None)
        source_name = remaining.pop("sourceName", None)
        snake_source_name = remaining.pop("source_name", None)
        return cls(index=index, source_name=source_name or snake_source_name, overrides=remaining)


EMPTY_CONTEXT = RoutingContext()


__all__ = ["EMPTY_CONTEXT", "RoutingContext"]
