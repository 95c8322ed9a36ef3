"""
wavrip.validation - Setup checks run before any file is scanned.

Covers external tool availability and input/output path selection. Every
failure here is fatal for the run.
"""

from __future__ import annotations

import shutil
import subprocess
from pathlib import Path

from wavrip.exceptions import DependencyError, ValidationError

DEFAULT_OUTPUT_DIRNAME = "_wav_extract"
INSTALL_HINT = "Install with: brew install ffmpeg (macOS) or apt install ffmpeg (Linux)"


def _tool_version(path: str) -> str:
    try:
        proc = subprocess.run(
            [path, "-version"],
            capture_output=True,
            text=True,
            timeout=5,
        )
        version_line = proc.stdout.split("\n")[0]
        return version_line.split()[2] if version_line else "unknown"
    except (subprocess.TimeoutExpired, OSError, IndexError):
        return "unknown"


def check_ffmpeg() -> dict[str, str]:
    """Check if FFmpeg and FFprobe are installed and get versions.

    Returns:
        Dict with 'ffmpeg_version' and 'ffprobe_version'

    Raises:
        DependencyError: If FFmpeg or FFprobe not found
    """
    result = {}

    for tool in ("ffmpeg", "ffprobe"):
        tool_path = shutil.which(tool)
        if not tool_path:
            raise DependencyError(tool, f"{tool} not found in PATH", INSTALL_HINT)
        result[f"{tool}_version"] = _tool_version(tool_path)

    return result


def resolve_input_selection(
    input_dir: Path | None,
    input_file: Path | None,
) -> tuple[Path, bool]:
    """Validate the directory/file input choice.

    Exactly one of the two must be given, and it must exist with the
    right kind.

    Returns:
        (resolved path, True if it is a directory)

    Raises:
        ValidationError: If neither or both are given, or the path is invalid
    """
    if input_dir is not None and input_file is not None:
        raise ValidationError("Specify either an input directory or an input file, not both")
    if input_dir is None and input_file is None:
        raise ValidationError("An input directory or an input file is required")

    if input_dir is not None:
        path = input_dir.expanduser().resolve()
        if not path.is_dir():
            raise ValidationError(f"Input directory not found: {path}")
        return path, True

    path = input_file.expanduser().resolve()
    if not path.is_file():
        raise ValidationError(f"Input file not found: {path}")
    return path, False


def default_output_dir(input_path: Path, is_dir: bool) -> Path:
    """Fixed-name output directory inside the input dir, or beside the input file."""
    parent = input_path if is_dir else input_path.parent
    return parent / DEFAULT_OUTPUT_DIRNAME
