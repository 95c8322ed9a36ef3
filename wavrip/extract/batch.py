"""
wavrip.extract.batch - Run orchestration.

Walks the input files one at a time and, within each file, its audio
streams in container order. Every stream yields exactly one outcome record;
a file that cannot be probed or has no audio yields a single file-level
record instead. Failures never stop the run.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator, Sequence
from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.progress import BarColumn, MofNCompleteColumn, Progress, TextColumn

from wavrip.config import EncodingConfig
from wavrip.exceptions import ProbeError
from wavrip.extract.audio import TranscodeResult, transcode_stream
from wavrip.logging import logger
from wavrip.naming import build_output_path, is_output_name
from wavrip.probe import AudioStream, probe_audio_streams
from wavrip.report import REPORT_FILENAME, OutcomeRecord, OutcomeStatus
from wavrip.utils import format_size

Prober = Callable[[Path], Sequence[AudioStream]]
Transcoder = Callable[[Path, int, Path, EncodingConfig], TranscodeResult]


class OutcomeLog:
    """Append-only, ordered record of a run's outcomes."""

    def __init__(self) -> None:
        self._records: list[OutcomeRecord] = []

    def append(self, record: OutcomeRecord) -> None:
        self._records.append(record)

    @property
    def records(self) -> tuple[OutcomeRecord, ...]:
        return tuple(self._records)

    def __iter__(self) -> Iterator[OutcomeRecord]:
        return iter(self.records)

    def __len__(self) -> int:
        return len(self._records)

    def has_failures(self) -> bool:
        return any(r.status is OutcomeStatus.FAILED for r in self._records)


def _log_level(console: Console | None, level: int) -> int:
    # Outcomes shown on the console are logged at DEBUG only.
    return logging.DEBUG if console else level


def discover_inputs(input_path: Path, is_dir: bool, exclude_dir: Path | None = None) -> list[Path]:
    """List input files for a run.

    A single file is returned as-is. Directories are scanned recursively
    for regular files in sorted order. When the output directory
    ``exclude_dir`` lies strictly inside the scanned tree its whole subtree
    is skipped; when it is the scanned directory or one of its parents,
    only the report and files named like extraction outputs are skipped.
    """
    if not is_dir:
        return [input_path]

    root = input_path.resolve()
    exclude = exclude_dir.resolve() if exclude_dir is not None else None
    exclude_subtree = exclude is not None and exclude != root and exclude.is_relative_to(root)
    skip_outputs = exclude is not None and root.is_relative_to(exclude)

    files = []
    for path in sorted(input_path.rglob("*")):
        if not path.is_file():
            continue
        if exclude_subtree and path.resolve().is_relative_to(exclude):
            continue
        if skip_outputs and (path.name == REPORT_FILENAME or is_output_name(path.name)):
            continue
        files.append(path)
    return files


def process_file(
    source_path: Path,
    output_dir: Path,
    config: EncodingConfig,
    log: OutcomeLog,
    prober: Prober,
    transcoder: Transcoder,
    console: Console | None = None,
) -> None:
    """Probe one file and extract each of its audio streams."""
    file_name = source_path.name

    try:
        streams = prober(source_path)
    except ProbeError as e:
        logger.log(_log_level(console, logging.WARNING), "Skipping %s: %s", source_path, e)
        if console:
            console.print(
                f"[yellow]  {escape(file_name)}: not usable media ({escape(str(e))})[/yellow]"
            )
        log.append(
            OutcomeRecord(
                file_name=file_name,
                full_path=source_path,
                status=OutcomeStatus.SKIPPED_NOT_MEDIA,
                error=str(e),
            )
        )
        return

    if not streams:
        if console:
            console.print(f"[yellow]  {escape(file_name)}: no audio streams[/yellow]")
        log.append(
            OutcomeRecord(
                file_name=file_name,
                full_path=source_path,
                status=OutcomeStatus.SKIPPED_NO_AUDIO,
            )
        )
        return

    if console:
        console.print(f"[dim]  {escape(file_name)}: {len(streams)} audio stream(s)[/dim]")

    for stream in streams:
        log.append(extract_stream(source_path, stream, output_dir, config, transcoder, console))


def extract_stream(
    source_path: Path,
    stream: AudioStream,
    output_dir: Path,
    config: EncodingConfig,
    transcoder: Transcoder,
    console: Console | None = None,
) -> OutcomeRecord:
    """Extract a single stream and return its outcome record."""
    out_path = build_output_path(
        source_path.name, stream.index, stream.tags, output_dir, config.extension
    )

    def record(status: OutcomeStatus, error: str | None = None) -> OutcomeRecord:
        return OutcomeRecord(
            file_name=source_path.name,
            full_path=source_path,
            stream_index=stream.index,
            out_path=out_path,
            status=status,
            error=error,
        )

    if out_path.exists() and not config.overwrite:
        if console:
            console.print(f"[dim]  Skipped (exists): {escape(out_path.name)}[/dim]")
        return record(OutcomeStatus.SKIPPED_EXISTS)

    result = transcoder(source_path, stream.index, out_path, config)

    if not result.success:
        error = f"ExitCode={result.returncode}"
        tail = result.error_tail()
        if tail:
            error = f"{error}: {tail}"
        logger.log(
            _log_level(console, logging.ERROR),
            "Stream %d of %s failed: %s",
            stream.index,
            source_path,
            error,
        )
        if console:
            console.print(f"[red]  Failed: {escape(out_path.name)} ({escape(error)})[/red]")
        return record(OutcomeStatus.FAILED, error)

    if not out_path.exists():
        logger.log(
            _log_level(console, logging.ERROR), "ffmpeg reported success but %s is missing", out_path
        )
        if console:
            console.print(f"[red]  Failed: {escape(out_path.name)} (output missing)[/red]")
        return record(OutcomeStatus.FAILED, "OutputMissing")

    if console:
        console.print(
            f"[green]  ✓[/green] {escape(out_path.name)} [dim]({format_size(out_path)})[/dim]"
        )
    return record(OutcomeStatus.OK)


def extract_all(
    inputs: Sequence[Path],
    output_dir: Path,
    config: EncodingConfig,
    console: Console | None = None,
    prober: Prober | None = None,
    transcoder: Transcoder | None = None,
) -> OutcomeLog:
    """Extract every audio stream from every input file.

    Args:
        inputs: Input files in processing order
        output_dir: Directory for extracted audio
        config: Encoding settings for the whole run
        console: Optional rich console for output
        prober: Stream enumerator; defaults to ffprobe
        transcoder: Single-stream extractor; defaults to ffmpeg

    Returns:
        OutcomeLog with one record per stream or skipped file, in order
    """
    prober = prober or probe_audio_streams
    transcoder = transcoder or transcode_stream

    output_dir.mkdir(parents=True, exist_ok=True)
    log = OutcomeLog()

    if console is None or len(inputs) <= 1:
        for source_path in inputs:
            process_file(source_path, output_dir, config, log, prober, transcoder, console)
        return log

    with Progress(
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        MofNCompleteColumn(),
        console=console,
    ) as progress:
        task = progress.add_task("Extracting", total=len(inputs))
        for source_path in inputs:
            progress.update(task, description=f"Extracting {source_path.name}")
            process_file(source_path, output_dir, config, log, prober, transcoder, console)
            progress.advance(task)

    return log
