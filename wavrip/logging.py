"""
wavrip.logging - Centralized logging configuration.

Verbose mode turns on DEBUG output, which echoes every ffprobe/ffmpeg
command line built during a run.
"""

from __future__ import annotations

import logging

logger = logging.getLogger("wavrip")


def configure_logging(verbose: bool = False) -> None:
    """Configure logging for the wavrip package.

    Args:
        verbose: If True, enable DEBUG level logging; otherwise WARNING level
    """
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s",
    )
    logger.setLevel(level)
