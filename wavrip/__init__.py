"""
Wavrip - batch audio stream extraction to PCM WAV.

Pulls every audio track out of media containers through a linear pipeline:
input discovery → ffprobe stream enumeration → deterministic output naming →
per-stream ffmpeg transcode → CSV outcome report.
"""

__version__ = "0.1.0"
