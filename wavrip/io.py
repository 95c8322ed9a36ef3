"""
wavrip.io - Atomic CSV writes.

Files are written to a temp file in the destination directory and renamed
into place, so an interrupted run never leaves a half-written report.
"""

from __future__ import annotations

import csv
import tempfile
from collections.abc import Iterable, Sequence
from pathlib import Path


def write_csv(path: Path, header: Sequence[str], rows: Iterable[Sequence[str]]) -> None:
    """Write a CSV file atomically.

    Args:
        path: Destination path
        header: Column names for the first row
        rows: Data rows, each with one value per column
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    with tempfile.NamedTemporaryFile(
        mode="w",
        encoding="utf-8",
        newline="",
        dir=path.parent,
        delete=False,
        suffix=".tmp",
    ) as tmp:
        tmp_path = Path(tmp.name)
        try:
            writer = csv.writer(tmp)
            writer.writerow(header)
            writer.writerows(rows)
        except Exception:
            tmp_path.unlink(missing_ok=True)
            raise
    tmp_path.replace(path)
