"""
wavrip.probe - ffprobe audio stream enumeration.

Turns ffprobe's JSON stream listing into typed, immutable AudioStream
descriptors. Only audio streams are returned, in container order, each
carrying its global (container-wide) stream index.
"""

from __future__ import annotations

import json
import shlex
import subprocess
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict

from wavrip.exceptions import ProbeError
from wavrip.logging import logger

RECOGNIZED_TAGS = ("language", "title", "handler_name")


class StreamTags(BaseModel):
    """Stream tags relevant to output naming. Other tag keys are ignored."""

    model_config = ConfigDict(frozen=True)

    language: str | None = None
    title: str | None = None
    handler_name: str | None = None

    @classmethod
    def from_raw(cls, raw: Mapping[str, Any] | None) -> StreamTags:
        """Build from an ffprobe tag mapping, matching keys case-insensitively."""
        values: dict[str, str] = {}
        for key, value in (raw or {}).items():
            name = str(key).lower()
            if name in RECOGNIZED_TAGS and value is not None and name not in values:
                values[name] = str(value)
        return cls(**values)

    @property
    def display_title(self) -> str | None:
        """Title tag, falling back to handler_name when title is missing or blank."""
        if self.title and self.title.strip():
            return self.title
        return self.handler_name


class AudioStream(BaseModel):
    """One audio track inside a media file."""

    model_config = ConfigDict(frozen=True)

    index: int
    codec_name: str | None = None
    sample_rate: int | None = None
    channels: int | None = None
    channel_layout: str | None = None
    tags: StreamTags = StreamTags()


def build_probe_command(path: Path) -> list[str]:
    return [
        "ffprobe",
        "-v",
        "error",
        "-select_streams",
        "a",
        "-show_streams",
        "-print_format",
        "json",
        str(path),
    ]


def parse_probe_output(output: str) -> list[AudioStream]:
    """Parse ffprobe JSON output into audio stream descriptors.

    Raises:
        ProbeError: If the output is empty or not the expected JSON shape
    """
    if not output or not output.strip():
        raise ProbeError("ffprobe produced no output")

    try:
        data = json.loads(output)
    except json.JSONDecodeError as e:
        raise ProbeError(f"Invalid ffprobe output: {e}") from e

    if not isinstance(data, dict):
        raise ProbeError("Invalid ffprobe output: expected a JSON object")

    raw_streams = data.get("streams", [])
    if not isinstance(raw_streams, list):
        raise ProbeError("Invalid ffprobe output: streams is not a list")

    streams = []
    for raw in raw_streams:
        if not isinstance(raw, dict):
            raise ProbeError("Malformed stream entry in ffprobe output: expected an object")
        if raw.get("codec_type", "audio") != "audio":
            continue
        tags = raw.get("tags")
        try:
            streams.append(
                AudioStream(
                    index=raw["index"],
                    codec_name=raw.get("codec_name"),
                    sample_rate=raw.get("sample_rate"),
                    channels=raw.get("channels"),
                    channel_layout=raw.get("channel_layout"),
                    tags=StreamTags.from_raw(tags if isinstance(tags, dict) else None),
                )
            )
        except (KeyError, ValueError) as e:
            raise ProbeError(f"Malformed stream entry in ffprobe output: {e}") from e
    return streams


def probe_audio_streams(path: Path) -> list[AudioStream]:
    """Enumerate the audio streams of a media file with ffprobe.

    Args:
        path: Path to the media file

    Returns:
        Audio stream descriptors in container order (possibly empty)

    Raises:
        ProbeError: If ffprobe fails or its output cannot be decoded
    """
    cmd = build_probe_command(path)
    logger.debug("ffprobe: %s", shlex.join(cmd))

    try:
        proc = subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
        )
    except OSError as e:
        raise ProbeError(f"Cannot run ffprobe: {e}") from e

    if proc.returncode != 0:
        detail = proc.stderr.strip() or f"exit code {proc.returncode}"
        raise ProbeError(f"ffprobe failed: {detail}")

    return parse_probe_output(proc.stdout)
