"""Rich rendering of worker pool and shipping statistics.

Purpose
-------
Give operators a readable summary after a dry run: which routing keys were
created, how the bulk URL policy was applied, and how many records each
worker shipped.

Contents
--------
* :class:`RichReportAdapter` - prints the worker table and a stats footer.
"""

from __future__ import annotations

from collections.abc import Sequence

from rich.console import Console
from rich.table import Table

from lib_log_elastic.adapters.dry_run_worker import DryRunWorker
from lib_log_elastic.adapters.stats import StatsSnapshot


class RichReportAdapter:
    """Render dry-run results with Rich."""

    def __init__(self, *, console: Console | None = None, no_color: bool = False) -> None:
        self._console = console if console is not None else Console(no_color=no_color)

    def emit(self, workers: Sequence[DryRunWorker], stats: StatsSnapshot, *, pending: int) -> None:
        """Print the worker table followed by the stats line.

        Examples
        --------
        >>> from io import StringIO
        >>> from lib_log_elastic.application.ports.worker import WorkerOptions
        >>> console = Console(file=StringIO(), record=True, width=120)
        >>> worker = DryRunWorker('idx-2024.03.07', 'logs', 'http://localhost:9200', None, WorkerOptions())
        >>> RichReportAdapter(console=console).emit([worker], StatsSnapshot(('idx-2024.03.07',), 0, 0, 0), pending=0)
        >>> 'idx-2024.03.07/logs' in console.export_text()
        True
        """

        self._console.print(self.build_table(workers), highlight=False)
        self._console.print(
            f"shipped={stats.logs_shipped} failed={stats.http_failed} "
            f"retransmit={stats.retransmit} pending={pending}",
            highlight=False,
        )

    @staticmethod
    def build_table(workers: Sequence[DryRunWorker]) -> Table:
        table = Table(title="Delivery workers")
        table.add_column("Routing key", style="cyan", no_wrap=True)
        table.add_column("Destination")
        table.add_column("Index in bulk URL", justify="center")
        table.add_column("Shipped", justify="right")
        table.add_column("Buffered", justify="right")
        for worker in workers:
            table.add_row(
                f"{worker.token}/{worker.document_type}",
                worker.url or "-",
                "yes" if worker.options.use_index_in_bulk_url else "no",
                str(worker.shipped_count),
                str(len(worker.buffer)),
            )
        return table


__all__ = ["RichReportAdapter"]
