"""Click command line interface.

Purpose
-------
Let operators check routing rules without a running cluster: ``route`` feeds
JSON-lines events through a full :class:`ElasticsearchOutput` backed by
dry-run workers and prints which workers would be created.

Contents
--------
* :func:`cli` - command group with global ``--traceback`` and ``--use-dotenv``.
* ``info`` and ``route`` sub-commands.
* :func:`main` - entry point running through :mod:`lib_cli_exit_tools`.
"""

from __future__ import annotations

import asyncio
import json
import logging
import os
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any, TextIO

import click
import lib_cli_exit_tools
from rich.console import Console
from rich.logging import RichHandler

from . import __init__conf__
from . import config as config_module
from .__init__conf__ import summary_info
from .adapters import DryRunWorker, DryRunWorkerFactory, InMemoryEventBus, InMemoryStats, RichReportAdapter, StatsSnapshot
from .domain.context import RoutingContext
from .output import ElasticsearchOutput

CLICK_CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}
CONTEXT_FIELD = "_context"
_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")
_PACKAGE_LOGGER = "lib_log_elastic"


@dataclass(slots=True, frozen=True)
class RouteRun:
    """Outcome of a dry run."""

    workers: list[DryRunWorker]
    stats: StatsSnapshot
    pending: int
    events: int


def _configure_logging(level: str) -> None:
    package_logger = logging.getLogger(_PACKAGE_LOGGER)
    package_logger.setLevel(level)
    if not any(isinstance(handler, RichHandler) for handler in package_logger.handlers):
        package_logger.addHandler(RichHandler(console=Console(stderr=True), show_path=False, markup=False))


def _parse_mappings(mappings: Iterable[str]) -> dict[str, list[str]]:
    """Turn ``TOKEN=REGEX`` options into the ``indices`` table.

    Examples
    --------
    >>> _parse_mappings(['TOKEN123=app1', 'TOKEN123=app2', 'OTHER=/var/log/.*'])
    {'TOKEN123': ['app1', 'app2'], 'OTHER': ['/var/log/.*']}
    """

    indices: dict[str, list[str]] = {}
    for entry in mappings:
        token, separator, pattern = entry.partition("=")
        if not separator or not token or not pattern:
            raise click.BadParameter(f"expected TOKEN=REGEX, got {entry!r}", param_hint="--map")
        indices.setdefault(token, []).append(pattern)
    return indices


def _read_events(lines: Iterable[str]) -> Iterable[tuple[dict[str, Any], RoutingContext]]:
    for number, line in enumerate(lines, start=1):
        if not line.strip():
            continue
        try:
            payload = json.loads(line)
        except json.JSONDecodeError as exc:
            raise click.ClickException(f"line {number}: invalid JSON ({exc.msg})") from exc
        if not isinstance(payload, dict):
            raise click.ClickException(f"line {number}: expected a JSON object")
        raw_context = payload.pop(CONTEXT_FIELD, None)
        if raw_context is not None and not isinstance(raw_context, dict):
            raise click.ClickException(f"line {number}: {CONTEXT_FIELD} must be a JSON object")
        yield payload, RoutingContext.from_mapping(raw_context)


def run_route(lines: Iterable[str], options: Mapping[str, Any], *, flush_at: int = 0) -> RouteRun:
    """Route every JSON line in ``lines`` through dry-run workers and drain."""

    settings = config_module.OutputSettings.from_env()
    bus = InMemoryEventBus()
    factory = DryRunWorkerFactory(flush_at=flush_at)
    stats = InMemoryStats()
    output = ElasticsearchOutput(options, bus, worker_factory=factory, stats=stats, settings=settings)
    if not output.start():
        raise click.UsageError("either --index or --url must be given")
    published = 0
    for event, context in _read_events(lines):
        bus.publish(event, context)
        published += 1
    asyncio.run(output.stop_async(timeout=settings.drain_timeout))
    return RouteRun(workers=list(factory.workers), stats=stats.snapshot(), pending=output.pending_count, events=published)


@click.group(invoke_without_command=True, context_settings=CLICK_CONTEXT_SETTINGS)
@click.version_option(__init__conf__.version, "--version", "-V", prog_name=__init__conf__.shell_command)
@click.option(
    "--traceback/--no-traceback",
    is_flag=True,
    default=False,
    help="Show full Python tracebacks on errors.",
)
@click.option(
    "--use-dotenv/--no-use-dotenv",
    default=False,
    help=f"Load environment variables from the nearest .env (also via {config_module.DOTENV_ENV_VAR}).",
)
@click.option(
    "--log-level",
    type=click.Choice(_LOG_LEVELS, case_sensitive=False),
    default="WARNING",
    show_default=True,
    help="Console log level for the output's own diagnostics.",
)
@click.pass_context
def cli(ctx: click.Context, traceback: bool, use_dotenv: bool, log_level: str) -> None:
    """Elasticsearch log output tooling."""

    lib_cli_exit_tools.config.traceback = traceback
    lib_cli_exit_tools.config.traceback_force_color = traceback

    explicit: bool | None = None
    if ctx.get_parameter_source("use_dotenv") is not click.core.ParameterSource.DEFAULT:
        explicit = use_dotenv
    if config_module.should_use_dotenv(explicit=explicit, env_value=os.getenv(config_module.DOTENV_ENV_VAR)):
        config_module.enable_dotenv()

    _configure_logging(log_level.upper())
    if ctx.invoked_subcommand is None:
        click.echo(summary_info(), nl=False)


@cli.command("info", context_settings=CLICK_CONTEXT_SETTINGS)
def cli_info() -> None:
    """Print package metadata."""

    click.echo(summary_info(), nl=False)


@cli.command("route", context_settings=CLICK_CONTEXT_SETTINGS)
@click.argument("source", type=click.File("r", encoding="utf-8"), default="-")
@click.option("--url", envvar="LIB_LOG_ELASTIC_URL", help="Destination URL (e.g. http://localhost:9200).")
@click.option("--index", help="Default index, may contain YYYY, MM and DD.")
@click.option("--map", "mappings", multiple=True, metavar="TOKEN=REGEX", help="Route matching log sources to TOKEN.")
@click.option("--disk-buffer-dir", type=click.Path(file_okay=False), help="Buffer directory handed to workers.")
@click.option("--flush-at", type=click.IntRange(min=0), default=0, show_default=True, help="Flush a worker after this many records (0: only at shutdown).")
@click.option("--json", "as_json", is_flag=True, help="Print the result as JSON.")
def cli_route(
    source: TextIO,
    url: str | None,
    index: str | None,
    mappings: Sequence[str],
    disk_buffer_dir: str | None,
    flush_at: int,
    as_json: bool,
) -> None:
    """Dry-run routing of JSON-lines events read from SOURCE (default: stdin).

    An optional ``_context`` object per line supplies the routing context
    (``index``, ``sourceName`` and config overrides).
    """

    options = {
        "url": url,
        "index": index,
        "indices": _parse_mappings(mappings) or None,
        "diskBufferDir": disk_buffer_dir,
    }
    result = run_route(source, options, flush_at=flush_at)
    if as_json:
        payload = {
            "events": result.events,
            "pending": result.pending,
            "stats": result.stats.to_dict(),
            "workers": [
                {
                    "key": f"{worker.token}/{worker.document_type}",
                    "url": worker.url,
                    "use_index_in_bulk_url": worker.options.use_index_in_bulk_url,
                    "shipped": worker.shipped_count,
                }
                for worker in result.workers
            ],
        }
        click.echo(json.dumps(payload, sort_keys=True))
        return
    RichReportAdapter().emit(result.workers, result.stats, pending=result.pending)


def main(argv: Sequence[str] | None = None, *, restore_traceback: bool = True) -> int:
    """Run the CLI and return its exit code.

    Traceback preferences changed by ``--traceback`` are restored afterwards
    so embedding callers keep their own settings.
    """

    previous_traceback = getattr(lib_cli_exit_tools.config, "traceback", False)
    previous_force_color = getattr(lib_cli_exit_tools.config, "traceback_force_color", False)
    try:
        return lib_cli_exit_tools.run_cli(
            cli,
            argv=list(argv) if argv is not None else None,
            prog_name=__init__conf__.shell_command,
        )
    finally:
        if restore_traceback:
            lib_cli_exit_tools.config.traceback = previous_traceback
            lib_cli_exit_tools.config.traceback_force_color = previous_force_color


__all__ = ["RouteRun", "cli", "main", "run_route"]
