"""Routing key and resolver output."""

from __future__ import annotations

from dataclasses import dataclass

from .config import AdapterConfig

KEY_SEPARATOR = "/"


@dataclass(slots=True, frozen=True)
class RoutingKey:
    """Identify one delivery worker by routing token and document type.

    Examples
    --------
    >>> RoutingKey('TOKEN123', 'logs').pool_key
    'TOKEN123/logs'
    """

    token: str
    document_type: str

    def __post_init__(self) -> None:
        if not self.token:
            raise ValueError("token must not be empty")
        if not self.document_type:
            raise ValueError("document_type must not be empty")

    @property
    def pool_key(self) -> str:
        return f"{self.token}{KEY_SEPARATOR}{self.document_type}"

    def __str__(self) -> str:
        return self.pool_key


@dataclass(slots=True, frozen=True)
class RouteDecision:
    """Result of routing one event: where it goes and under which config."""

    key: RoutingKey
    config: AdapterConfig

    @property
    def index(self) -> str:
        return self.key.token


__all__ = ["KEY_SEPARATOR", "RouteDecision", "RoutingKey"]
