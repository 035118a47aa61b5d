from __future__ import annotations

import pytest

from lib_log_elastic.adapters.token_mapper import LogSourceToIndexMapper
from lib_log_elastic.application.ports.routing import TokenMapperPort
from tests.os_markers import OS_AGNOSTIC

pytestmark = [OS_AGNOSTIC]


def test_mapper_satisfies_the_port() -> None:
    assert isinstance(LogSourceToIndexMapper({}), TokenMapperPort)


def test_first_token_in_mapping_order_wins() -> None:
    mapper = LogSourceToIndexMapper({"FIRST": [r"app"], "SECOND": [r"app1"]})

    assert mapper.find_token("app1") == "FIRST"


def test_patterns_match_anywhere_in_the_source_name() -> None:
    mapper = LogSourceToIndexMapper({"NGINX": [r"nginx"]})

    assert mapper.find_token("/var/log/nginx/access.log") == "NGINX"


def test_single_pattern_string_is_accepted() -> None:
    mapper = LogSourceToIndexMapper({"TOKEN": r"^kube-"})

    assert mapper.find_token("kube-proxy") == "TOKEN"
    assert mapper.find_token("not-kube-proxy") is None


def test_misses_are_cached_but_stay_misses() -> None:
    mapper = LogSourceToIndexMapper({"TOKEN": ["app1"]})

    assert mapper.find_token("other") is None
    assert mapper.find_token("other") is None
    assert mapper.find_token("app1") == "TOKEN"


def test_cache_is_reset_when_full() -> None:
    mapper = LogSourceToIndexMapper({"TOKEN": ["app"]}, cache_size=2)

    for name in ("app-a", "app-b", "app-c", "app-a"):
        assert mapper.find_token(name) == "TOKEN"


def test_non_mapping_indices_are_rejected() -> None:
    with pytest.raises(ValueError, match="indices must be a mapping"):
        LogSourceToIndexMapper(["app1"])  # type: ignore[arg-type]
