from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime
from typing import Any

import pytest

from lib_log_elastic.adapters.config_reducer import reduce_config
from lib_log_elastic.adapters.token_mapper import LogSourceToIndexMapper
from lib_log_elastic.application.use_cases.resolve_route import create_route_resolver
from lib_log_elastic.domain.config import AdapterConfig
from lib_log_elastic.domain.context import RoutingContext
from lib_log_elastic.domain.errors import InvalidTimestamp
from tests.os_markers import OS_AGNOSTIC

pytestmark = [OS_AGNOSTIC]

STAMP = datetime(2024, 3, 7, 12, 0)


def _identity(context: RoutingContext, event: Mapping[str, Any], config: AdapterConfig) -> AdapterConfig:
    return config


def test_event_index_wins_over_context_and_config() -> None:
    resolve = create_route_resolver(config=AdapterConfig(index="cfg"), reduce_config=_identity, default_token="env")

    decision = resolve({"_index": "evt"}, RoutingContext(index="ctx"))

    assert decision is not None
    assert decision.index == "evt"


def test_context_index_wins_over_config() -> None:
    resolve = create_route_resolver(config=AdapterConfig(index="cfg"), reduce_config=_identity)

    decision = resolve({}, RoutingContext(index="ctx"))

    assert decision is not None and decision.index == "ctx"


def test_config_index_wins_over_environment_default() -> None:
    resolve = create_route_resolver(config=AdapterConfig(index="cfg"), reduce_config=_identity, default_token="env")

    decision = resolve({}, RoutingContext())

    assert decision is not None and decision.index == "cfg"


def test_environment_default_is_the_last_resort() -> None:
    resolve = create_route_resolver(config=AdapterConfig(url="http://localhost:9200"), reduce_config=_identity, default_token="env")

    decision = resolve({}, RoutingContext())

    assert decision is not None and decision.index == "env"


def test_empty_candidates_are_skipped() -> None:
    resolve = create_route_resolver(config=AdapterConfig(index="cfg"), reduce_config=_identity)

    decision = resolve({"_index": ""}, RoutingContext(index=""))

    assert decision is not None and decision.index == "cfg"


def test_token_mapping_overrides_explicit_event_index() -> None:
    mapper = LogSourceToIndexMapper({"TOKEN123": ["app1"]})
    resolve = create_route_resolver(config=AdapterConfig(index="cfg"), reduce_config=_identity, token_mapper=mapper)

    decision = resolve({"_index": "evt", "logSource": "app1"}, RoutingContext())

    assert decision is not None and decision.index == "TOKEN123"


def test_token_mapping_falls_back_to_context_source_name() -> None:
    mapper = LogSourceToIndexMapper({"TOKEN123": [r"/var/log/app\.log"]})
    resolve = create_route_resolver(config=AdapterConfig(), reduce_config=_identity, token_mapper=mapper)

    decision = resolve({}, RoutingContext(source_name="/var/log/app.log"))

    assert decision is not None and decision.index == "TOKEN123"


def test_token_mapping_miss_keeps_the_candidate() -> None:
    mapper = LogSourceToIndexMapper({"TOKEN123": ["app1"]})
    resolve = create_route_resolver(config=AdapterConfig(index="cfg"), reduce_config=_identity, token_mapper=mapper)

    decision = resolve({"logSource": "other"}, RoutingContext())

    assert decision is not None and decision.index == "cfg"


def test_unroutable_event_resolves_to_none() -> None:
    mapper = LogSourceToIndexMapper({"TOKEN123": ["app1"]})
    resolve = create_route_resolver(config=AdapterConfig(url="http://localhost:9200"), reduce_config=_identity, token_mapper=mapper)

    assert resolve({"logSource": "unknown", "message": "x"}, RoutingContext()) is None


def test_date_template_is_applied_after_selection() -> None:
    resolve = create_route_resolver(config=AdapterConfig(index="myindex-YYYY.MM.DD"), reduce_config=_identity)

    decision = resolve({"@timestamp": datetime(2023, 1, 5)}, RoutingContext())

    assert decision is not None and decision.index == "myindex-2023.01.05"


def test_mapped_token_is_also_date_templated() -> None:
    mapper = LogSourceToIndexMapper({"audit-YYYY.MM": ["auditd"]})
    resolve = create_route_resolver(config=AdapterConfig(), reduce_config=_identity, token_mapper=mapper)

    decision = resolve({"logSource": "auditd", "@timestamp": STAMP}, RoutingContext())

    assert decision is not None and decision.index == "audit-2024.03"


def test_template_without_timestamp_raises_invalid_timestamp() -> None:
    resolve = create_route_resolver(config=AdapterConfig(index="logs-YYYY"), reduce_config=_identity)

    with pytest.raises(InvalidTimestamp):
        resolve({"message": "no time"}, RoutingContext())


def test_document_type_defaults_to_logs() -> None:
    resolve = create_route_resolver(config=AdapterConfig(index="cfg"), reduce_config=_identity)

    assert resolve({}, RoutingContext()).key.document_type == "logs"  # type: ignore[union-attr]
    assert resolve({"_type": "audit"}, RoutingContext()).key.document_type == "audit"  # type: ignore[union-attr]


def test_effective_config_carries_context_overrides() -> None:
    config = AdapterConfig(index="cfg", url="http://a:9200")
    resolve = create_route_resolver(config=config, reduce_config=reduce_config)

    decision = resolve({}, RoutingContext(overrides={"url": "http://b:9200"}))

    assert decision is not None
    assert decision.config.url == "http://b:9200"
    assert config.url == "http://a:9200"


def test_reducer_receives_context_event_and_static_config() -> None:
    calls: list[tuple[RoutingContext, Mapping[str, Any], AdapterConfig]] = []
    config = AdapterConfig(index="cfg")

    def recording(context: RoutingContext, event: Mapping[str, Any], cfg: AdapterConfig) -> AdapterConfig:
        calls.append((context, event, cfg))
        return cfg.with_overrides(index="reduced")

    resolve = create_route_resolver(config=config, reduce_config=recording)
    context = RoutingContext(source_name="src")
    event = {"message": "m"}

    decision = resolve(event, context)

    assert calls == [(context, event, config)]
    assert decision is not None and decision.index == "reduced"
