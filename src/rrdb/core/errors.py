"""
Core exception types raised by field naming and reservation checks.

Provides typed exceptions for core-domain failures:
- NameConflictError for field names that cannot be mapped onto legal rrdtool names.
- FieldsExhaustedError when an update introduces more new fields than remain reserved.

Every rrdb exception carries an ErrorKind from a closed enumeration, so callers can
dispatch on ``exc.kind`` instead of on class identity when convenient. Store command
failures (create/tune/update/fetch) live in rrdb.io.errors.

Notes:
    - This module uses only the Python standard library and has no side effects.

Examples:
    Catch a naming failure.

    >>> from rrdb.core.errors import ErrorKind, NameConflictError
    >>> try:
    ...     raise NameConflictError("duplicate field names: ['a.b', 'adb']")
    ... except NameConflictError as e:
    ...     kind = e.kind
    >>> kind is ErrorKind.NAME_CONFLICT
    True
"""

from __future__ import annotations

from enum import Enum

__all__ = [
    "ErrorKind",
    "RrdbError",
    "NameConflictError",
    "FieldsExhaustedError",
]


class ErrorKind(Enum):
    """Closed set of failure kinds surfaced by rrdb."""

    NAME_CONFLICT = "name_conflict"
    FIELDS_EXHAUSTED = "fields_exhausted"
    INFO = "info"
    CREATE = "create"
    TUNE = "tune"
    UPDATE = "update"
    FETCH = "fetch"
    CONFIG = "config"


class RrdbError(Exception):
    """Base class for every error raised by rrdb."""

    kind: ErrorKind


class NameConflictError(RrdbError, ValueError):
    """Field names collide after sanitizing, or fall outside the 1-19 character range."""

    kind = ErrorKind.NAME_CONFLICT


class FieldsExhaustedError(RrdbError):
    """
    An update needs more reserved slots than the series has left.

    Attributes:
        requested (int): Number of new fields the update introduced.
        available (int): Number of reserved slots remaining in the series.
    """

    kind = ErrorKind.FIELDS_EXHAUSTED

    def __init__(self, requested: int, available: int) -> None:
        self.requested = requested
        self.available = available
        super().__init__(
            f"not enough reserved fields to complete this update "
            f"(requested={requested}, available={available})"
        )
