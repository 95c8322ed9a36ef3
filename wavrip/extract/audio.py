"""
wavrip.extract.audio - FFmpeg single-stream PCM transcode.

Each call writes exactly one audio stream, selected by its global container
index, to an uncompressed PCM file. Video, subtitle and data streams are
dropped.
"""

from __future__ import annotations

import shlex
import subprocess
from dataclasses import dataclass
from pathlib import Path

from wavrip.config import EncodingConfig
from wavrip.logging import logger


@dataclass(frozen=True)
class TranscodeResult:
    """Exit status and diagnostics from one ffmpeg invocation."""

    returncode: int
    stderr: str = ""

    @property
    def success(self) -> bool:
        return self.returncode == 0

    def error_tail(self, lines: int = 1) -> str:
        """Last non-empty stderr line(s), for short error messages."""
        tail = [line.strip() for line in self.stderr.splitlines() if line.strip()]
        return " | ".join(tail[-lines:])


def build_transcode_command(
    source_path: Path,
    stream_index: int,
    output_path: Path,
    config: EncodingConfig,
) -> list[str]:
    """Build the ffmpeg command line for one stream.

    Args:
        source_path: Source media file
        stream_index: Global container stream index to extract
        output_path: Destination file
        config: Encoding settings

    Returns:
        Command as an argument list
    """
    cmd = [
        "ffmpeg",
        "-hide_banner",
        "-nostdin",
        "-y" if config.overwrite else "-n",
        "-i",
        str(source_path),
        "-map",
        f"0:{stream_index}",
        "-vn",
        "-sn",
        "-dn",
        "-acodec",
        config.codec.value,
    ]

    if config.sample_rate:
        cmd += ["-ar", str(config.sample_rate)]
    if config.channels:
        cmd += ["-ac", str(config.channels)]

    cmd += ["-f", config.container.value]

    cmd.append(str(output_path))
    return cmd


def transcode_stream(
    source_path: Path,
    stream_index: int,
    output_path: Path,
    config: EncodingConfig,
) -> TranscodeResult:
    """Extract one audio stream to PCM using FFmpeg.

    Blocks until ffmpeg exits. A launch failure (ffmpeg missing or not
    executable) is reported as a failed result rather than raised.

    Args:
        source_path: Source media file
        stream_index: Global container stream index to extract
        output_path: Destination file
        config: Encoding settings

    Returns:
        TranscodeResult with ffmpeg's exit code and stderr
    """
    output_path.parent.mkdir(parents=True, exist_ok=True)

    cmd = build_transcode_command(source_path, stream_index, output_path, config)
    logger.debug("ffmpeg: %s", shlex.join(cmd))

    try:
        proc = subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
        )
    except OSError as e:
        logger.debug("Cannot run ffmpeg: %s", e)
        return TranscodeResult(returncode=-1, stderr=str(e))

    if proc.returncode != 0:
        logger.debug("ffmpeg stderr for %s:\n%s", output_path.name, proc.stderr)

    return TranscodeResult(returncode=proc.returncode, stderr=proc.stderr)
