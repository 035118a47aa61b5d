"""Layer routing-context overrides onto the static adapter config."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from lib_log_elastic.domain.config import AdapterConfig
from lib_log_elastic.domain.context import RoutingContext

logger = logging.getLogger(__name__)

#: Context override names (camelCase as emitted by inputs, or snake_case) -> config field.
OVERRIDABLE_FIELDS: Mapping[str, str] = {
    "index": "index",
    "url": "url",
    "elasticsearchUrl": "url",
    "elasticsearch_url": "url",
    "diskBufferDir": "disk_buffer_dir",
    "disk_buffer_dir": "disk_buffer_dir",
}


def reduce_config(context: RoutingContext, event: Mapping[str, Any], config: AdapterConfig) -> AdapterConfig:
    """Return ``config`` with ``context.overrides`` applied.

    Unknown override names are ignored. ``event`` is accepted so the function
    satisfies :class:`ConfigReducerPort`; event fields never change the
    config. Inputs are left untouched and ``config`` itself is returned when
    nothing applies.

    Examples
    --------
    >>> base = AdapterConfig(index='idx', url='http://a:9200')
    >>> ctx = RoutingContext(overrides={'elasticsearchUrl': 'http://b:9200', 'tags': ['x']})
    >>> reduce_config(ctx, {}, base).url
    'http://b:9200'
    >>> reduce_config(RoutingContext(), {}, base) is base
    True
    """

    changes: dict[str, Any] = {}
    for name, value in context.overrides.items():
        field_name = OVERRIDABLE_FIELDS.get(name)
        if field_name is None or value in (None, ""):
            continue
        changes[field_name] = value
    if not changes:
        return config
    logger.debug("Applying context overrides %s", sorted(changes))
    return config.with_overrides(**changes)


__all__ = ["OVERRIDABLE_FIELDS", "reduce_config"]
