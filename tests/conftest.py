from __future__ import annotations

import logging
from collections.abc import Iterator
from io import StringIO

import pytest
from rich.console import Console

from lib_log_elastic import config as config_module


@pytest.fixture
def record_console() -> Console:
    return Console(file=StringIO(), record=True, width=160, force_terminal=False, color_system=None)


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    for name in (
        config_module.DEFAULT_TOKEN_ENV_VAR,
        config_module.LOG_NEW_TOKENS_ENV_VAR,
        config_module.DISK_BUFFER_ENV_VAR,
        config_module.DRAIN_TIMEOUT_ENV_VAR,
        config_module.DOTENV_ENV_VAR,
        "LIB_LOG_ELASTIC_URL",
    ):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


@pytest.fixture(autouse=True)
def reset_dotenv_state() -> Iterator[None]:
    config_module._reset_dotenv_state_for_testing()
    yield
    config_module._reset_dotenv_state_for_testing()


@pytest.fixture(autouse=True)
def restore_package_logger() -> Iterator[None]:
    package_logger = logging.getLogger("lib_log_elastic")
    level = package_logger.level
    handlers = list(package_logger.handlers)
    yield
    package_logger.setLevel(level)
    package_logger.handlers[:] = handlers
