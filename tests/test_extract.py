"""Tests for wavrip.extract.audio module."""

from __future__ import annotations

import shutil
import subprocess
from pathlib import Path

import pytest

from wavrip.config import Container, EncodingConfig, PcmCodec
from wavrip.extract.audio import TranscodeResult, build_transcode_command, transcode_stream
from wavrip.extract.batch import extract_all
from wavrip.probe import probe_audio_streams
from wavrip.report import OutcomeStatus


def option_value(cmd: list[str], flag: str) -> str:
    return cmd[cmd.index(flag) + 1]


class TestBuildTranscodeCommand:
    def test_default_settings(self) -> None:
        cmd = build_transcode_command(
            Path("/in/movie.mkv"), 2, Path("/out/movie__idx2.wav"), EncodingConfig()
        )
        assert cmd[0] == "ffmpeg"
        assert "-n" in cmd
        assert "-y" not in cmd
        assert option_value(cmd, "-i") == "/in/movie.mkv"
        assert option_value(cmd, "-map") == "0:2"
        assert option_value(cmd, "-acodec") == "pcm_s24le"
        assert option_value(cmd, "-f") == "wav"
        assert "-ar" not in cmd
        assert "-ac" not in cmd
        assert {"-vn", "-sn", "-dn"} <= set(cmd)
        assert cmd[-1] == "/out/movie__idx2.wav"

    def test_maps_global_index_not_audio_relative(self) -> None:
        cmd = build_transcode_command(Path("a.mp4"), 5, Path("o.wav"), EncodingConfig())
        assert option_value(cmd, "-map") == "0:5"
        assert not any(arg.startswith("0:a:") for arg in cmd)

    def test_overrides(self) -> None:
        config = EncodingConfig(
            codec=PcmCodec.S16LE,
            sample_rate=44100,
            channels=2,
            container=Container.W64,
            overwrite=True,
        )
        cmd = build_transcode_command(Path("a.mp4"), 1, Path("o.w64"), config)
        assert "-y" in cmd
        assert option_value(cmd, "-acodec") == "pcm_s16le"
        assert option_value(cmd, "-ar") == "44100"
        assert option_value(cmd, "-ac") == "2"
        assert option_value(cmd, "-f") == "w64"


class TestTranscodeResult:
    def test_success(self) -> None:
        assert TranscodeResult(0).success
        assert not TranscodeResult(1).success

    def test_error_tail(self) -> None:
        result = TranscodeResult(1, "line one\n\nConversion failed!\n")
        assert result.error_tail() == "Conversion failed!"
        assert result.error_tail(lines=2) == "line one | Conversion failed!"


class TestTranscodeStream:
    def test_returns_exit_code_and_stderr(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        seen = {}

        def fake_run(cmd, **kwargs):
            seen["cmd"] = cmd
            return subprocess.CompletedProcess(cmd, 1, stdout="", stderr="Conversion failed!")

        monkeypatch.setattr(subprocess, "run", fake_run)
        output = tmp_path / "out" / "a__idx1.wav"
        result = transcode_stream(tmp_path / "a.mkv", 1, output, EncodingConfig())

        assert result.returncode == 1
        assert result.stderr == "Conversion failed!"
        assert seen["cmd"][-1] == str(output)
        assert output.parent.is_dir()

    def test_missing_ffmpeg_is_a_failed_result(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        def fake_run(cmd, **kwargs):
            raise FileNotFoundError("ffmpeg")

        monkeypatch.setattr(subprocess, "run", fake_run)
        result = transcode_stream(tmp_path / "a.mkv", 1, tmp_path / "o.wav", EncodingConfig())
        assert not result.success


requires_ffmpeg = pytest.mark.skipif(
    shutil.which("ffmpeg") is None or shutil.which("ffprobe") is None,
    reason="Requires FFmpeg and FFprobe in PATH",
)


@pytest.fixture
def interleaved_source(tmp_path: Path) -> Path:
    """MKV with a video stream at index 0 and two sine audio streams at 1 and 2.

    Stream 1 is 48 kHz tagged language=eng; stream 2 is 22.05 kHz and untagged.
    """
    source = tmp_path / "source.mkv"
    subprocess.run(
        [
            "ffmpeg",
            "-hide_banner",
            "-nostdin",
            "-y",
            "-f",
            "lavfi",
            "-i",
            "testsrc=size=64x64:rate=10:duration=1",
            "-f",
            "lavfi",
            "-i",
            "sine=frequency=440:sample_rate=48000:duration=1",
            "-f",
            "lavfi",
            "-i",
            "sine=frequency=880:sample_rate=22050:duration=1",
            "-map",
            "0:v",
            "-map",
            "1:a",
            "-map",
            "2:a",
            "-c:v",
            "mpeg4",
            "-c:a",
            "pcm_s16le",
            "-metadata:s:a:0",
            "language=eng",
            str(source),
        ],
        capture_output=True,
        check=True,
    )
    return source


@pytest.mark.slow
@requires_ffmpeg
class TestRealFfmpeg:
    def test_extracts_by_global_index(self, interleaved_source: Path, tmp_path: Path) -> None:
        out = tmp_path / "out"
        log = extract_all([interleaved_source], out, EncodingConfig())

        assert [(r.stream_index, r.status) for r in log] == [
            (1, OutcomeStatus.OK),
            (2, OutcomeStatus.OK),
        ]
        first = out / "source__idx1__eng.wav"
        second = out / "source__idx2.wav"
        assert first.exists()
        assert second.exists()

        (first_stream,) = probe_audio_streams(first)
        (second_stream,) = probe_audio_streams(second)
        assert first_stream.codec_name == "pcm_s24le"
        assert first_stream.sample_rate == 48000
        assert second_stream.sample_rate == 22050

    def test_w64_output(self, interleaved_source: Path, tmp_path: Path) -> None:
        out = tmp_path / "out"
        config = EncodingConfig(codec=PcmCodec.S16LE, container=Container.W64)
        log = extract_all([interleaved_source], out, config)

        assert {r.status for r in log} == {OutcomeStatus.OK}
        w64 = out / "source__idx2.w64"
        assert w64.exists()
        (stream,) = probe_audio_streams(w64)
        assert stream.codec_name == "pcm_s16le"
