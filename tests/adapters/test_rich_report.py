from __future__ import annotations

from rich.console import Console

from lib_log_elastic.adapters.console.rich_report import RichReportAdapter
from lib_log_elastic.adapters.dry_run_worker import DryRunWorker
from lib_log_elastic.adapters.stats import InMemoryStats, StatsSnapshot
from lib_log_elastic.application.ports.worker import WorkerOptions
from tests.os_markers import OS_AGNOSTIC

pytestmark = [OS_AGNOSTIC]


def _workers() -> list[DryRunWorker]:
    hosted = DryRunWorker(
        "TOKEN123", "logs", "https://logsene-receiver.sematext.com", None, WorkerOptions(use_index_in_bulk_url=False)
    )
    hosted.log("info", "a", {})
    hosted.send()
    local = DryRunWorker("myindex-2023.01.05", "logs", "http://localhost:9200", None, WorkerOptions())
    local.log("info", "b", {})
    return [hosted, local]


def test_report_lists_every_worker(record_console: Console) -> None:
    RichReportAdapter(console=record_console).emit(_workers(), StatsSnapshot(("TOKEN123",), 1, 0, 0), pending=1)

    output = record_console.export_text()
    assert "TOKEN123/logs" in output
    assert "myindex-2023.01.05/logs" in output
    assert "https://logsene-receiver.sematext.com" in output
    assert "shipped=1 failed=0 retransmit=0 pending=1" in output


def test_table_reports_bulk_url_policy_and_counts() -> None:
    table = RichReportAdapter.build_table(_workers())

    cells = [list(column.cells) for column in table.columns]
    assert cells[2] == ["no", "yes"]
    assert cells[3] == ["1", "0"]
    assert cells[4] == ["0", "1"]


def test_missing_url_renders_placeholder(record_console: Console) -> None:
    worker = DryRunWorker("idx", "logs", None, None, WorkerOptions())

    RichReportAdapter(console=record_console).emit([worker], InMemoryStats().snapshot(), pending=0)

    assert list(RichReportAdapter.build_table([worker]).columns[1].cells) == ["-"]
    assert "shipped=0 failed=0 retransmit=0 pending=0" in record_console.export_text()


def test_no_color_console_is_plain_text() -> None:
    adapter = RichReportAdapter(no_color=True)

    assert adapter._console.no_color is True
