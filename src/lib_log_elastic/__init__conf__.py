"""Static package metadata surfaced by the CLI ``info`` command."""

from __future__ import annotations

from collections.abc import Callable

name = "lib_log_elastic"
title = "Route parsed log events to Elasticsearch-compatible endpoints"
version = "0.1.0"
homepage = "https://github.com/bitranox/lib_log_elastic"
author = "bitranox"
author_email = "bitranox@gmail.com"
shell_command = "lib_log_elastic"


def print_info(writer: Callable[[str], None] | None = None) -> None:
    """Print the metadata banner line by line through ``writer``.

    Examples
    --------
    >>> lines = []
    >>> print_info(writer=lines.append)
    >>> lines[0]
    'Info for lib_log_elastic:'
    """

    emit = writer if writer is not None else print
    fields = [
        ("name", name),
        ("title", title),
        ("version", version),
        ("homepage", homepage),
        ("author", author),
        ("author_email", author_email),
        ("shell_command", shell_command),
    ]
    pad = max(len(label) for label, _ in fields)
    emit(f"Info for {name}:")
    emit("")
    for label, value in fields:
        emit(f"    {label:<{pad}} = {value}")


def summary_info() -> str:
    """Return the banner printed by :func:`print_info` as one string."""

    lines: list[str] = []
    print_info(writer=lines.append)
    return "\n".join(lines) + "\n"


__all__ = ["print_info", "summary_info"]
