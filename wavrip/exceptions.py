"""
wavrip.exceptions - Custom exception classes.

All Wavrip-specific exceptions inherit from WavripError.
"""


class WavripError(Exception):
    """Base exception for all Wavrip errors."""

    pass


class ConfigError(WavripError):
    """Configuration loading or validation error."""

    pass


class ProbeError(WavripError):
    """ffprobe could not produce usable stream metadata for a file."""

    pass


class ValidationError(WavripError):
    """Input selection or path validation error."""

    pass


class DependencyError(WavripError):
    """Required dependency missing or misconfigured."""

    def __init__(self, dependency: str, message: str, install_hint: str | None = None):
        self.dependency = dependency
        self.message = message
        self.install_hint = install_hint
        super().__init__(f"{dependency}: {message}")
