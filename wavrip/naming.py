"""
wavrip.naming - Deterministic output file naming.

Output names have the form ``{base}__idx{N}[__{language}[_{title}]]{ext}``.
The global stream index keeps names stable across runs, which is what makes
skip/overwrite decisions reproducible.
"""

from __future__ import annotations

import re
from pathlib import Path

from wavrip.probe import StreamTags

# Characters rejected by at least one common filesystem (NTFS/FAT are the
# strictest), plus ASCII control characters.
ILLEGAL_FILENAME_CHARS = re.compile(r'[<>:"/\\|?*\x00-\x1f]')
WHITESPACE_RUN = re.compile(r"\s+")
OUTPUT_NAME = re.compile(r"__idx\d+(?:__.+)?\.(?:wav|w64)$", re.IGNORECASE)


def sanitize_component(text: str | None) -> str:
    """Make a tag value safe to embed in a filename.

    Illegal characters become ``_``, whitespace runs collapse to one space,
    and the result is trimmed. ``None`` or blank input yields ``""``.
    """
    if not text:
        return ""
    cleaned = ILLEGAL_FILENAME_CHARS.sub("_", text)
    cleaned = WHITESPACE_RUN.sub(" ", cleaned)
    return cleaned.strip()


def is_output_name(name: str) -> bool:
    """True if a file name has the shape of a name built by build_output_path."""
    return OUTPUT_NAME.search(name) is not None


def build_output_path(
    source_name: str,
    stream_index: int,
    tags: StreamTags,
    output_dir: Path,
    extension: str,
) -> Path:
    """Build the output path for one audio stream.

    Args:
        source_name: Source file basename (extension is stripped)
        stream_index: Global container stream index
        tags: Stream tags; language and title (or handler_name) are used
        output_dir: Directory the output file goes into
        extension: Output extension including the dot, e.g. ``.wav``

    Returns:
        Output file path
    """
    base = Path(source_name).stem
    parts = [
        part
        for part in (sanitize_component(tags.language), sanitize_component(tags.display_title))
        if part
    ]
    suffix = f"__{'_'.join(parts)}" if parts else ""
    return output_dir / f"{base}__idx{stream_index}{suffix}{extension}"
