"""
rrdb core defaults.

Defines the naming limits, reserved-slot convention, and data source defaults consumed
by the IO layer. This module is zero-IO and uses only the Python standard library.

Notes:
    - rrdtool accepts data source names of 1 to 19 characters drawn from [a-zA-Z0-9_].
    - Reserved slots are named RESERVED_PREFIX followed by a zero-based ordinal
      (e.g., "_reserved3") and are consumed in ascending ordinal order.
    - Changes to these constants change the on-disk layout of newly created series.
"""

from __future__ import annotations

__all__ = [
    "MAX_FIELD_NAME_LENGTH",
    "RESERVED_PREFIX",
    "RESERVE_FIELDS",
    "DEFAULT_DATA_SOURCE",
    "DEFAULT_STEP",
    "START_OFFSET",
    "UNKNOWN",
    "NO_DATA",
    "SERIES_SUFFIX",
]

# Longest data source name rrdtool accepts.
MAX_FIELD_NAME_LENGTH: int = 19

# Prefix for placeholder data sources held in reserve for future fields.
RESERVED_PREFIX: str = "_reserved"

# Total number of fields a newly created series is expected to hold.
RESERVE_FIELDS: int = 10

# Data source type used when configuration does not provide one.
DEFAULT_DATA_SOURCE: str = "GAUGE:600:U:U"

# Step reported for a series that does not exist yet.
DEFAULT_STEP: int = 300

# Seconds subtracted from the first update time when no start is configured.
START_OFFSET: int = 10

# rrdtool token for an unknown value (update input, min/max in DS definitions).
UNKNOWN: str = "U"

# Decoded value for samples rrdtool reports as unknown.
NO_DATA: float = float("nan")

# File suffix of a series on disk.
SERIES_SUFFIX: str = ".rrd"
