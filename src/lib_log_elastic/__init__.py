"""Public package surface for the Elasticsearch log output.

Hosts construct an :class:`ElasticsearchOutput` per configured destination,
hand it the pipeline's parsed-event bus and a delivery worker factory, then
drive it through ``start()`` and ``stop(on_complete)``.
"""

from __future__ import annotations

from .config import OutputSettings, load_adapter_config
from .domain import AdapterConfig, InvalidTimestamp, RoutingContext, RoutingKey, render_index_name
from .output import ElasticsearchOutput

__all__ = [
    "AdapterConfig",
    "ElasticsearchOutput",
    "InvalidTimestamp",
    "OutputSettings",
    "RoutingContext",
    "RoutingKey",
    "load_adapter_config",
    "render_index_name",
]
