"""Ports for the configuration reducer and the token mapper."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable

from lib_log_elastic.domain.config import AdapterConfig
from lib_log_elastic.domain.context import RoutingContext


@runtime_checkable
class ConfigReducerPort(Protocol):
    """Layer per-event overrides onto the static config without mutating it."""

    def __call__(self, context: RoutingContext, event: Mapping[str, Any], config: AdapterConfig) -> AdapterConfig: ...


@runtime_checkable
class TokenMapperPort(Protocol):
    """Map a log source name to a routing token."""

    def find_token(self, source_name: str) -> str | None: ...


__all__ = ["ConfigReducerPort", "TokenMapperPort"]
