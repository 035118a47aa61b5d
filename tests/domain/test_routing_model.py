from __future__ import annotations

import pytest

from lib_log_elastic.domain.config import AdapterConfig, TransportOptions
from lib_log_elastic.domain.context import RoutingContext
from lib_log_elastic.domain.fields import message_of, severity_of
from lib_log_elastic.domain.notifications import DeliveryFailed, Retransmitted, Shipped, describe_error
from lib_log_elastic.domain.routing import RoutingKey
from tests.os_markers import OS_AGNOSTIC

pytestmark = [OS_AGNOSTIC]


def test_routing_key_joins_token_and_type() -> None:
    key = RoutingKey("TOKEN123", "logs")

    assert key.pool_key == "TOKEN123/logs"
    assert str(key) == "TOKEN123/logs"
    assert key == RoutingKey("TOKEN123", "logs")


@pytest.mark.parametrize("token, document_type", [("", "logs"), ("idx", "")])
def test_routing_key_rejects_blank_parts(token: str, document_type: str) -> None:
    with pytest.raises(ValueError):
        RoutingKey(token, document_type)


def test_config_activation_requires_index_or_url() -> None:
    assert AdapterConfig(index="idx").is_activatable
    assert AdapterConfig(url="http://localhost:9200").is_activatable
    assert not AdapterConfig().is_activatable


def test_config_overrides_return_a_new_instance() -> None:
    base = AdapterConfig(index="idx", url="http://a")
    changed = base.with_overrides(url="http://b")

    assert changed.url == "http://b"
    assert base.url == "http://a"


def test_transport_options_emptiness() -> None:
    assert TransportOptions().is_empty
    assert not TransportOptions(ca=b"pem").is_empty


def test_routing_context_from_loose_mapping() -> None:
    context = RoutingContext.from_mapping({"sourceName": "/var/log/app.log", "index": "idx", "diskBufferDir": "/tmp/x"})

    assert context.source_name == "/var/log/app.log"
    assert context.index == "idx"
    assert dict(context.overrides) == {"diskBufferDir": "/tmp/x"}


def test_routing_context_overrides_are_read_only() -> None:
    context = RoutingContext(overrides={"url": "http://a"})

    with pytest.raises(TypeError):
        context.overrides["url"] = "http://b"  # type: ignore[index]


def test_routing_context_from_empty_mapping() -> None:
    assert RoutingContext.from_mapping(None) == RoutingContext()


@pytest.mark.parametrize(
    "event, expected",
    [
        ({"severity": "error", "level": "warn"}, "error"),
        ({"level": "warn"}, "warn"),
        ({}, "info"),
        ({"severity": ""}, "info"),
    ],
)
def test_severity_aliases(event: dict[str, str], expected: str) -> None:
    assert severity_of(event) == expected


@pytest.mark.parametrize(
    "event, expected",
    [
        ({"message": "a", "msg": "b", "MESSAGE": "c"}, "a"),
        ({"msg": "b", "MESSAGE": "c"}, "b"),
        ({"MESSAGE": "c"}, "c"),
        ({}, None),
    ],
)
def test_message_aliases(event: dict[str, str], expected: str | None) -> None:
    assert message_of(event) == expected


def test_notification_counts_are_coerced() -> None:
    assert Shipped("7").count == 7
    assert Shipped(None).count == 0  # type: ignore[arg-type]
    assert Retransmitted("file.json", "http://es", "3").count == 3


def test_describe_error_renders_mappings_and_exceptions() -> None:
    failure = DeliveryFailed({"status": 500}, ConnectionError("refused"))

    assert describe_error(failure.error) == " status=500"
    assert describe_error(failure.cause) == " ConnectionError('refused')"
