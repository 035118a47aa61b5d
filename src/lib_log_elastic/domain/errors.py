"""Exception hierarchy shared by the routing core and its adapters."""

from __future__ import annotations


class ElasticOutputError(Exception):
    """Base class for errors raised inside the Elasticsearch output."""


class InvalidTimestamp(ElasticOutputError, ValueError):
    """Raised when a date-templated index needs a timestamp the event lacks."""


class ConfigurationFileError(ElasticOutputError, OSError):
    """Raised when TLS material referenced by the configuration cannot be read."""

    def __init__(self, field_name: str, path: str, reason: str) -> None:
        super().__init__(f"Error reading SSL {field_name} file {path}: {reason}")
        self.field_name = field_name
        self.path = path
        self.reason = reason


__all__ = ["ConfigurationFileError", "ElasticOutputError", "InvalidTimestamp"]
