"""
Test configuration and shared fixtures.

ffprobe and ffmpeg are replaced by in-process fakes so no media binaries
are needed.
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from wavrip.config import EncodingConfig
from wavrip.exceptions import ProbeError
from wavrip.extract.audio import TranscodeResult
from wavrip.probe import AudioStream, StreamTags


class FakeProber:
    """Maps file names to stream lists; ``None`` means the probe fails."""

    def __init__(self, streams_by_name: dict[str, list[AudioStream] | None]) -> None:
        self.streams_by_name = streams_by_name
        self.calls: list[Path] = []

    def __call__(self, path: Path) -> list[AudioStream]:
        self.calls.append(path)
        streams = self.streams_by_name.get(path.name)
        if streams is None:
            raise ProbeError("ffprobe failed: Invalid data found when processing input")
        return streams


class FakeTranscoder:
    """Writes a stub WAV for each call unless told to fail."""

    def __init__(self, returncode: int = 0, write_output: bool = True) -> None:
        self.returncode = returncode
        self.write_output = write_output
        self.calls: list[tuple[Path, int, Path]] = []

    def __call__(
        self, source: Path, stream_index: int, output: Path, config: EncodingConfig
    ) -> TranscodeResult:
        self.calls.append((source, stream_index, output))
        if self.returncode != 0:
            return TranscodeResult(
                returncode=self.returncode,
                stderr="Stream map '0:9' matches no streams.\n",
            )
        if self.write_output:
            output.parent.mkdir(parents=True, exist_ok=True)
            output.write_bytes(b"RIFF----WAVEfmt ")
        return TranscodeResult(returncode=0)


@pytest.fixture
def make_stream() -> Callable[..., AudioStream]:
    def _make(index: int, **tags: str) -> AudioStream:
        return AudioStream(
            index=index,
            codec_name="aac",
            sample_rate=48000,
            channels=2,
            channel_layout="stereo",
            tags=StreamTags.from_raw(tags),
        )

    return _make


@pytest.fixture
def media_dir(tmp_path: Path) -> Path:
    """Directory with two fake media files and a text file."""
    source = tmp_path / "media"
    source.mkdir()
    (source / "movie.mkv").write_bytes(b"fake mkv")
    (source / "notes.txt").write_text("not media")
    sub = source / "season1"
    sub.mkdir()
    (sub / "episode.mp4").write_bytes(b"fake mp4")
    return source


@pytest.fixture
def default_config() -> EncodingConfig:
    return EncodingConfig()


@pytest.fixture
def transcoder() -> FakeTranscoder:
    return FakeTranscoder()
