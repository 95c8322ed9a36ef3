"""
wavrip.config - Encoding configuration, YAML config loading and merging.

The encoding configuration is resolved once per run from model defaults,
an optional YAML file, and CLI overrides (in increasing precedence), and is
immutable afterwards.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from wavrip.exceptions import ConfigError


class PcmCodec(str, Enum):
    """Uncompressed PCM sample encodings ffmpeg can write."""

    S16LE = "pcm_s16le"
    S24LE = "pcm_s24le"
    S32LE = "pcm_s32le"


class Container(str, Enum):
    """Output container kinds."""

    WAV = "wav"
    W64 = "w64"

    @property
    def extension(self) -> str:
        return f".{self.value}"


class EncodingConfig(BaseModel):
    """Process-wide encoding settings for one extraction run."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    codec: PcmCodec = PcmCodec.S24LE
    sample_rate: int = Field(default=0, ge=0)
    channels: int = Field(default=0, ge=0)
    container: Container = Container.WAV
    overwrite: bool = False

    @property
    def extension(self) -> str:
        return self.container.extension


def merge_config(file_config: dict[str, Any], overrides: dict[str, Any]) -> dict[str, Any]:
    """Merge CLI overrides over file config. ``None`` overrides are ignored."""
    merged = dict(file_config)
    for key, value in overrides.items():
        if value is not None:
            merged[key] = value
    return merged


def load_config_file(path: Path) -> dict[str, Any]:
    """Read a YAML config file into a plain dict.

    Raises:
        ConfigError: If the file is missing, unreadable, or not a mapping
    """
    if not path.exists():
        raise ConfigError(f"Config file not found: {path}")

    try:
        with open(path, encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Cannot read config file {path}: {e}") from e

    if not isinstance(raw, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")
    return raw


def build_config(
    config_path: Path | None = None,
    overrides: dict[str, Any] | None = None,
) -> EncodingConfig:
    """Resolve the run's EncodingConfig.

    Args:
        config_path: Optional YAML file with encoding settings
        overrides: CLI values; ``None`` entries fall through to the file/defaults

    Raises:
        ConfigError: If the file or any merged value is invalid
    """
    file_config = load_config_file(config_path) if config_path else {}
    merged = merge_config(file_config, overrides or {})

    try:
        return EncodingConfig(**merged)
    except PydanticValidationError as e:
        raise ConfigError(f"Invalid encoding configuration: {e}") from e
