from __future__ import annotations

import pytest

from lib_log_elastic.adapters.config_reducer import reduce_config
from lib_log_elastic.domain.config import AdapterConfig
from lib_log_elastic.domain.context import RoutingContext
from tests.os_markers import OS_AGNOSTIC

pytestmark = [OS_AGNOSTIC]

BASE = AdapterConfig(index="idx", url="http://a:9200", disk_buffer_dir="/tmp/a")


@pytest.mark.parametrize(
    "overrides, field_name, expected",
    [
        ({"url": "http://b:9200"}, "url", "http://b:9200"),
        ({"elasticsearchUrl": "http://c:9200"}, "url", "http://c:9200"),
        ({"elasticsearch_url": "http://d:9200"}, "url", "http://d:9200"),
        ({"diskBufferDir": "/tmp/b"}, "disk_buffer_dir", "/tmp/b"),
        ({"disk_buffer_dir": "/tmp/c"}, "disk_buffer_dir", "/tmp/c"),
    ],
)
def test_known_overrides_are_applied(overrides: dict[str, str], field_name: str, expected: str) -> None:
    reduced = reduce_config(RoutingContext(overrides=overrides), {}, BASE)

    assert getattr(reduced, field_name) == expected
    assert reduced.index == "idx"


def test_unknown_and_empty_overrides_are_ignored() -> None:
    context = RoutingContext(overrides={"tags": ["x"], "url": "", "diskBufferDir": None})

    assert reduce_config(context, {}, BASE) is BASE


def test_event_fields_never_change_the_config() -> None:
    reduced = reduce_config(RoutingContext(), {"url": "http://evil:9200", "index": "evt"}, BASE)

    assert reduced is BASE


def test_static_config_is_not_mutated() -> None:
    reduce_config(RoutingContext(overrides={"url": "http://b:9200"}), {}, BASE)

    assert BASE.url == "http://a:9200"
