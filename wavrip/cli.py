"""
wavrip.cli - Typer CLI entry point.

Single command: extract every audio stream from one file or a directory
tree into PCM WAV/W64 files and write a CSV report of the outcomes.
"""

from __future__ import annotations

import time
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape

from wavrip import __version__
from wavrip.config import Container, PcmCodec, build_config
from wavrip.exceptions import ConfigError, DependencyError, ValidationError
from wavrip.extract.batch import discover_inputs, extract_all
from wavrip.logging import configure_logging
from wavrip.report import OutcomeStatus, render_summary, summarize, write_report
from wavrip.utils import format_duration
from wavrip.validation import check_ffmpeg, default_output_dir, resolve_input_selection

app = typer.Typer(
    name="wavrip",
    help="Extract every audio stream from media files to uncompressed PCM.\n\n"
    "Each stream is selected by its global container index and written as "
    "WAV (or W64) next to a CSV report of per-stream outcomes.",
    add_completion=False,
)
console = Console()


def version_callback(value: bool) -> None:
    if value:
        console.print(f"wavrip {__version__}")
        raise typer.Exit()


@app.command()
def main(
    input_dir: Path | None = typer.Option(
        None, "--input-dir", "-d", help="Directory to scan recursively for media files"
    ),
    input_file: Path | None = typer.Option(
        None, "--input-file", "-i", help="Single media file to extract"
    ),
    output_dir: Path | None = typer.Option(
        None,
        "--output-dir",
        "-o",
        help="Output directory (default: _wav_extract next to the input)",
    ),
    codec: PcmCodec | None = typer.Option(
        None, "--codec", "-c", help="PCM encoding (default: pcm_s24le)"
    ),
    sample_rate: int | None = typer.Option(
        None, "--sample-rate", "-r", min=0, help="Force sample rate in Hz (0 = keep source)"
    ),
    channels: int | None = typer.Option(
        None, "--channels", "-a", min=0, help="Force channel count (0 = keep source)"
    ),
    overwrite: bool | None = typer.Option(
        None, "--overwrite/--no-overwrite", help="Replace existing output files"
    ),
    w64: bool | None = typer.Option(
        None, "--w64/--wav", help="Write W64 (no 4GB limit) instead of WAV"
    ),
    config_file: Path | None = typer.Option(
        None, "--config", help="YAML file with encoding defaults"
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-V", help="Echo every ffprobe/ffmpeg command line"
    ),
    version: bool = typer.Option(
        False,
        "--version",
        help="Show version and exit",
        callback=version_callback,
        is_eager=True,
    ),
) -> None:
    """Extract all audio streams to PCM files."""
    configure_logging(verbose)

    try:
        input_path, is_dir = resolve_input_selection(input_dir, input_file)
    except ValidationError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    container = None
    if w64 is not None:
        container = Container.W64 if w64 else Container.WAV

    try:
        config = build_config(
            config_file,
            {
                "codec": codec,
                "sample_rate": sample_rate,
                "channels": channels,
                "container": container,
                "overwrite": overwrite,
            },
        )
    except ConfigError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    try:
        versions = check_ffmpeg()
    except DependencyError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        if e.install_hint:
            console.print(f"[dim]{escape(e.install_hint)}[/dim]")
        raise typer.Exit(1)

    if verbose:
        console.print(
            f"[dim]ffmpeg {versions['ffmpeg_version']}, "
            f"ffprobe {versions['ffprobe_version']}[/dim]"
        )

    out_dir = (output_dir or default_output_dir(input_path, is_dir)).expanduser().resolve()
    inputs = discover_inputs(input_path, is_dir, exclude_dir=out_dir)

    if not inputs:
        console.print(f"[yellow]No files found in {escape(str(input_path))}[/yellow]")

    console.print(
        f"[cyan]Extracting audio from {len(inputs)} file(s) "
        f"as {config.codec.value} {config.container.value.upper()}...[/cyan]"
    )
    console.print(f"[dim]  Output: {escape(str(out_dir))}[/dim]\n")

    started = time.monotonic()
    log = extract_all(inputs, out_dir, config, console=console)
    report_path = write_report(log.records, out_dir)
    elapsed = time.monotonic() - started

    summary = summarize(log.records)
    console.print()
    console.print(render_summary(summary))

    skipped = sum(count for status, count in summary.items() if status.is_skip)
    console.print(
        f"\n[green]✓[/green] Extracted {summary[OutcomeStatus.OK]}, "
        f"skipped {skipped}, failed {summary[OutcomeStatus.FAILED]} "
        f"in {format_duration(elapsed)}"
    )
    console.print(f"[dim]  Report: {escape(str(report_path))}[/dim]")

    if log.has_failures():
        raise typer.Exit(1)
