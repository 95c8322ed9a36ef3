"""
wavrip.report - Outcome records, CSV report and run summary.

One OutcomeRecord per processed stream or skipped file. The full ordered
list is written once, after the run, to ``wav_extraction_report.csv`` in
the output directory.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable, Sequence
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict
from rich.table import Table

from wavrip.io import write_csv

REPORT_FILENAME = "wav_extraction_report.csv"
REPORT_COLUMNS = ("FileName", "FullPath", "StreamIndex", "OutPath", "Status", "Error")


class OutcomeStatus(str, Enum):
    OK = "OK"
    FAILED = "Failed"
    SKIPPED_EXISTS = "SkippedExists"
    SKIPPED_NO_AUDIO = "SkippedNoAudio"
    SKIPPED_NOT_MEDIA = "SkippedNotMedia"

    @property
    def is_skip(self) -> bool:
        return self.value.startswith("Skipped")


class OutcomeRecord(BaseModel):
    """Result for one (file, stream) pair, or for a whole skipped file."""

    model_config = ConfigDict(frozen=True)

    file_name: str
    full_path: Path
    stream_index: int | None = None
    out_path: Path | None = None
    status: OutcomeStatus
    error: str | None = None

    def as_row(self) -> list[str]:
        return [
            self.file_name,
            str(self.full_path),
            "" if self.stream_index is None else str(self.stream_index),
            "" if self.out_path is None else str(self.out_path),
            self.status.value,
            self.error or "",
        ]


def write_report(records: Sequence[OutcomeRecord], output_dir: Path) -> Path:
    """Write all outcome records to the run's CSV report.

    Args:
        records: Outcome records in processing order
        output_dir: Run output directory

    Returns:
        Path to the written report
    """
    report_path = output_dir / REPORT_FILENAME
    write_csv(report_path, REPORT_COLUMNS, (record.as_row() for record in records))
    return report_path


def summarize(records: Iterable[OutcomeRecord]) -> dict[OutcomeStatus, int]:
    """Count records per status. Every status is present, zero if unused."""
    counts = Counter(record.status for record in records)
    return {status: counts.get(status, 0) for status in OutcomeStatus}


def render_summary(summary: dict[OutcomeStatus, int]) -> Table:
    """Build a rich table of status counts."""
    styles = {
        OutcomeStatus.OK: "green",
        OutcomeStatus.FAILED: "red",
    }

    table = Table(title="Extraction Summary")
    table.add_column("Status", style="cyan")
    table.add_column("Count", justify="right")

    for status, count in summary.items():
        style = styles.get(status, "yellow")
        table.add_row(status.value, f"[{style}]{count}[/{style}]")

    table.add_row("[bold]Total[/bold]", f"[bold]{sum(summary.values())}[/bold]")
    return table
