"""
wavrip.extract - Per-stream PCM extraction.

- audio: builds and runs the ffmpeg command for a single stream
- batch: drives discovery, probing, naming and transcoding for a whole run
"""

from __future__ import annotations
