"""
Time conversions between caller values and rrdtool epoch seconds.

rrdtool speaks whole epoch seconds. Callers may pass ints, floats or datetimes;
naive datetimes are interpreted as UTC. Fetch results are keyed by UTC-aware datetimes.

Examples:
    >>> from datetime import UTC, datetime
    >>> from rrdb.core.clock import from_epoch, to_epoch
    >>> to_epoch(datetime(2024, 1, 1, tzinfo=UTC))
    1704067200
    >>> from_epoch(1704067200).isoformat()
    '2024-01-01T00:00:00+00:00'
"""

from __future__ import annotations

from datetime import UTC, datetime

from .typing import TimeLike

__all__ = ["to_epoch", "from_epoch"]


def to_epoch(value: TimeLike) -> int:
    """
    Convert a time value to whole epoch seconds (truncating fractions).

    Raises:
        TypeError: If value is not a number or datetime.
    """
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return int(value.timestamp())
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"expected epoch seconds or datetime, got {type(value).__name__}")
    return int(value)


def from_epoch(seconds: int) -> datetime:
    """UTC-aware datetime for epoch seconds."""
    return datetime.fromtimestamp(int(seconds), tz=UTC)
