"""Route resolution for a single parsed event.

Purpose
-------
Decide which index (routing token) and document type an event belongs to,
using the event itself, its routing context, the static config and the
optional token-mapping table.

Contents
--------
* :data:`RouteResolver` - callable type returned by the factory.
* :func:`create_route_resolver` - binds collaborators into the resolver.

System Role
-----------
First step of :class:`~lib_log_elastic.application.use_cases.route_event.EventRouter`.
Events for which no index can be found resolve to ``None`` and are dropped
without logging; sources with no configured destination are common and would
otherwise flood the console.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

from lib_log_elastic.application.ports.routing import ConfigReducerPort, TokenMapperPort
from lib_log_elastic.domain.config import AdapterConfig
from lib_log_elastic.domain.context import RoutingContext
from lib_log_elastic.domain.fields import (
    DEFAULT_DOCUMENT_TYPE,
    INDEX_FIELD,
    LOG_SOURCE_FIELD,
    TIMESTAMP_FIELD,
    TYPE_FIELD,
)
from lib_log_elastic.domain.index_template import render_index_name
from lib_log_elastic.domain.routing import RouteDecision, RoutingKey

RouteResolver = Callable[[Mapping[str, Any], RoutingContext], "RouteDecision | None"]


def create_route_resolver(
    *,
    config: AdapterConfig,
    reduce_config: ConfigReducerPort,
    token_mapper: TokenMapperPort | None = None,
    default_token: str | None = None,
) -> RouteResolver:
    """Return a resolver bound to ``config`` and its collaborators.

    Parameters
    ----------
    config:
        Static adapter configuration.
    reduce_config:
        Pure function layering per-event overrides onto ``config``.
    token_mapper:
        Optional lookup from log source name to routing token. A hit takes
        precedence over every other index candidate.
    default_token:
        Environment-level fallback used when nothing else yields an index.

    Returns
    -------
    RouteResolver
        Callable ``(event, context) -> RouteDecision | None``. Raises
        :class:`~lib_log_elastic.domain.errors.InvalidTimestamp` when the
        resolved index holds date tokens but the event has no usable
        ``@timestamp``.

    Examples
    --------
    >>> from datetime import datetime
    >>> resolve = create_route_resolver(
    ...     config=AdapterConfig(index='myindex-YYYY.MM.DD', url='http://localhost:9200'),
    ...     reduce_config=lambda context, event, config: config,
    ... )
    >>> decision = resolve({'@timestamp': datetime(2023, 1, 5)}, RoutingContext())
    >>> decision.key.pool_key
    'myindex-2023.01.05/logs'
    """

    def resolve(event: Mapping[str, Any], context: RoutingContext) -> RouteDecision | None:
        effective = reduce_config(context, event, config)
        index = _first_non_empty(event.get(INDEX_FIELD), context.index, effective.index, default_token)
        if token_mapper is not None:
            mapped = _mapped_token(token_mapper, event, context)
            if mapped:
                index = mapped
        if not index:
            return None
        index = render_index_name(str(index), event.get(TIMESTAMP_FIELD))
        document_type = event.get(TYPE_FIELD) or DEFAULT_DOCUMENT_TYPE
        return RouteDecision(key=RoutingKey(index, str(document_type)), config=effective)

    return resolve


def _first_non_empty(*candidates: Any) -> Any:
    for candidate in candidates:
        if candidate:
            return candidate
    return None


def _mapped_token(token_mapper: TokenMapperPort, event: Mapping[str, Any], context: RoutingContext) -> str | None:
    source_name = event.get(LOG_SOURCE_FIELD) or context.source_name
    if not source_name:
        return None
    return token_mapper.find_token(str(source_name))


__all__ = ["RouteResolver", "create_route_resolver"]
