"""Configuration helpers: ``.env`` loading, environment settings, options.

Purpose
-------
Translate the loose option mapping accepted by the output (``index``,
``url``/``elasticsearchUrl``, ``indices``, ``httpOptions``,
``diskBufferDir``) and the process environment into the typed values the
composition root needs.

Contents
--------
* :func:`enable_dotenv` / :func:`should_use_dotenv` - opt-in ``.env`` support.
* :class:`OutputSettings` - environment-level defaults.
* :func:`load_adapter_config` - option mapping -> :class:`AdapterConfig`.
"""

from __future__ import annotations

import logging
import os
import tempfile
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from dotenv import find_dotenv, load_dotenv

from .adapters.tls import load_transport_options
from .domain.config import AdapterConfig

logger = logging.getLogger(__name__)

DOTENV_ENV_VAR = "LIB_LOG_ELASTIC_USE_DOTENV"
DEFAULT_TOKEN_ENV_VAR = "LOGSENE_TOKEN"
LOG_NEW_TOKENS_ENV_VAR = "LOG_NEW_TOKENS"
DISK_BUFFER_ENV_VAR = "LOGSENE_TMP_DIR"
DRAIN_TIMEOUT_ENV_VAR = "LIB_LOG_ELASTIC_DRAIN_TIMEOUT"
DEFAULT_DRAIN_TIMEOUT = 30.0

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off"}

_DOTENV_LOADED: Path | None = None


def _parse_bool(value: str | None) -> bool | None:
    if value is None:
        return None
    normalized = value.strip().lower()
    if normalized in _TRUTHY:
        return True
    if normalized in _FALSY:
        return False
    return None


def should_use_dotenv(*, explicit: bool | None = None, env_value: str | None = None) -> bool:
    """Decide whether ``.env`` should be loaded.

    An explicit CLI flag wins over the environment toggle.

    Examples
    --------
    >>> should_use_dotenv(explicit=False, env_value='1')
    False
    >>> should_use_dotenv(env_value='yes')
    True
    >>> should_use_dotenv()
    False
    """

    if explicit is not None:
        return explicit
    return bool(_parse_bool(env_value))


def enable_dotenv() -> Path | None:
    """Load the nearest ``.env`` without overriding existing variables.

    The search starts in the current working directory and walks upwards.

    Returns
    -------
    Path | None
        Resolved path of the loaded file, or ``None`` when none was found.
    """

    global _DOTENV_LOADED
    if _DOTENV_LOADED is not None:
        return _DOTENV_LOADED
    found = find_dotenv(usecwd=True)
    if not found:
        logger.debug("No .env file found")
        return None
    path = Path(found).resolve()
    load_dotenv(path, override=False)
    _DOTENV_LOADED = path
    logger.debug("Loaded environment from %s", path)
    return path


def _reset_dotenv_state_for_testing() -> None:
    global _DOTENV_LOADED
    _DOTENV_LOADED = None


@dataclass(slots=True, frozen=True)
class OutputSettings:
    """Environment-level defaults shared by every output instance.

    Attributes
    ----------
    default_token:
        Fallback index used when neither event, context nor config names one.
    log_new_tokens:
        Log each newly created delivery worker.
    disk_buffer_dir:
        Buffer directory used when the config does not set one.
    drain_timeout:
        Seconds :meth:`ElasticsearchOutput.stop` waits before force-completing;
        ``None`` waits indefinitely.
    """

    default_token: str | None = None
    log_new_tokens: bool = False
    disk_buffer_dir: str | None = None
    drain_timeout: float | None = DEFAULT_DRAIN_TIMEOUT

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "OutputSettings":
        """Read settings from ``environ`` (defaults to :data:`os.environ`).

        Examples
        --------
        >>> settings = OutputSettings.from_env({'LOGSENE_TOKEN': 'tok', 'LOG_NEW_TOKENS': '1'})
        >>> settings.default_token, settings.log_new_tokens
        ('tok', True)
        >>> OutputSettings.from_env({'LIB_LOG_ELASTIC_DRAIN_TIMEOUT': 'none'}).drain_timeout is None
        True
        """

        env = os.environ if environ is None else environ
        return cls(
            default_token=env.get(DEFAULT_TOKEN_ENV_VAR) or None,
            log_new_tokens=bool(env.get(LOG_NEW_TOKENS_ENV_VAR)),
            disk_buffer_dir=env.get(DISK_BUFFER_ENV_VAR) or None,
            drain_timeout=_parse_timeout(env.get(DRAIN_TIMEOUT_ENV_VAR)),
        )


def _parse_timeout(value: str | None) -> float | None:
    if value is None or not value.strip():
        return DEFAULT_DRAIN_TIMEOUT
    normalized = value.strip().lower()
    if normalized in {"none", "off"}:
        return None
    try:
        timeout = float(normalized)
    except ValueError as exc:
        raise ValueError(f"{DRAIN_TIMEOUT_ENV_VAR} must be a number of seconds, got {value!r}") from exc
    if timeout < 0:
        raise ValueError(f"{DRAIN_TIMEOUT_ENV_VAR} must not be negative")
    return timeout


def load_adapter_config(options: Mapping[str, Any], *, settings: OutputSettings | None = None) -> AdapterConfig:
    """Build an :class:`AdapterConfig` from the plugin option mapping.

    ``url`` takes precedence over ``elasticsearchUrl``. TLS files named in
    ``httpOptions`` are read here; unreadable files are logged and skipped.

    Examples
    --------
    >>> cfg = load_adapter_config({'elasticsearchUrl': 'http://es:9200', 'index': 'logs-YYYY'})
    >>> cfg.url, cfg.index
    ('http://es:9200', 'logs-YYYY')
    >>> load_adapter_config({'indices': ['bad']})
    Traceback (most recent call last):
    ...
    ValueError: indices must be a mapping of token -> list of patterns
    """

    settings = settings if settings is not None else OutputSettings()
    indices = options.get("indices")
    if indices is not None and not isinstance(indices, Mapping):
        raise ValueError("indices must be a mapping of token -> list of patterns")
    http_options = options.get("httpOptions", options.get("http_options"))
    if http_options is not None and not isinstance(http_options, Mapping):
        raise ValueError("httpOptions must be a mapping with key/cert/ca entries")
    disk_buffer_dir = (
        options.get("diskBufferDir")
        or options.get("disk_buffer_dir")
        or settings.disk_buffer_dir
        or tempfile.gettempdir()
    )
    return AdapterConfig(
        index=options.get("index") or None,
        url=options.get("url") or options.get("elasticsearchUrl") or None,
        disk_buffer_dir=str(disk_buffer_dir),
        indices=dict(indices) if indices else None,
        http_options=load_transport_options(http_options),
    )


__all__ = [
    "DEFAULT_DRAIN_TIMEOUT",
    "DEFAULT_TOKEN_ENV_VAR",
    "DOTENV_ENV_VAR",
    "DRAIN_TIMEOUT_ENV_VAR",
    "LOG_NEW_TOKENS_ENV_VAR",
    "OutputSettings",
    "enable_dotenv",
    "load_adapter_config",
    "should_use_dotenv",
]
