"""Load TLS key/cert/CA material referenced by the output configuration.

Files are read once at startup. An unreadable file is logged and the field is
left unset so the output keeps working with the transport defaults.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import Any

from lib_log_elastic.domain.config import TransportOptions
from lib_log_elastic.domain.errors import ConfigurationFileError

logger = logging.getLogger(__name__)

_TLS_FIELDS = ("key", "cert", "ca")

Reader = Callable[[Path], bytes]


def _read_bytes(path: Path) -> bytes:
    return path.read_bytes()


def read_tls_file(field_name: str, path: str | Path, *, reader: Reader = _read_bytes) -> bytes:
    """Return the content of ``path`` or raise :class:`ConfigurationFileError`."""

    try:
        return reader(Path(path))
    except OSError as exc:
        raise ConfigurationFileError(field_name, str(path), str(exc)) from exc


def load_transport_options(http_options: Mapping[str, Any] | None, *, reader: Reader = _read_bytes) -> TransportOptions | None:
    """Translate the ``httpOptions`` section into :class:`TransportOptions`.

    Values may be file paths (read from disk) or bytes (taken as-is).
    Returns ``None`` when no section is configured.
    """

    if not http_options:
        return None
    loaded: dict[str, bytes | None] = {}
    for field_name in _TLS_FIELDS:
        value = http_options.get(field_name)
        if value is None or isinstance(value, bytes):
            loaded[field_name] = value
            continue
        try:
            loaded[field_name] = read_tls_file(field_name, value, reader=reader)
        except ConfigurationFileError as exc:
            logger.error("%s", exc)
            loaded[field_name] = None
    return TransportOptions(**loaded)


__all__ = ["load_transport_options", "read_tls_file"]
