"""
Path helpers for rrdb.io.

Overview (file protocol baseline)
- <database_directory>/<series_id>.rrd

Notes
- The path is derived data: it may not exist yet for a series that has never been updated.
"""

from __future__ import annotations

import os

from rrdb.core.constants import SERIES_SUFFIX

from .config import RrdbSettings


def series_path(settings: RrdbSettings, series_id: str) -> str:
    """
    Path to the on-disk file backing a series.

    Args:
        settings (RrdbSettings): Settings providing database_directory.
        series_id (str): Unique series identifier.

    Returns:
        str: "<database_directory>/<series_id>.rrd"

    Raises:
        ValueError: If series_id is empty or contains a path separator.
    """
    sid = str(series_id)
    if not sid or os.sep in sid or (os.altsep and os.altsep in sid):
        raise ValueError(f"invalid series id: {series_id!r}")
    return os.path.join(settings.database_directory, f"{sid}{SERIES_SUFFIX}")


def series_exists(settings: RrdbSettings, series_id: str) -> bool:
    """True if the file backing the series is present on disk."""
    return os.path.exists(series_path(settings, series_id))
