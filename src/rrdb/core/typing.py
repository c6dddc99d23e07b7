"""
Lightweight typing aliases used across rrdb.

Provides minimal NewTypes and aliases to improve readability and static checks.
This module contains no runtime logic and is zero-IO.

Examples:
    >>> from rrdb.core.typing import SeriesId
    >>> def describe(series: SeriesId) -> str:
    ...     return f"series:{series}"
    >>> describe(SeriesId("web01"))
    'series:web01'
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime
from typing import Any, NewType, Union

__all__ = [
    "SeriesId",
    "TimeLike",
    "Observation",
    "TimeSeriesResult",
]

SeriesId = NewType("SeriesId", str)

# Epoch seconds or a datetime (naive datetimes are read as UTC).
TimeLike = Union[int, float, datetime]

# Caller-supplied field -> value mapping for a single update.
Observation = Mapping[Any, Any]

# Fetch output: sample time -> {field: value}.
TimeSeriesResult = dict[datetime, dict[str, float]]
