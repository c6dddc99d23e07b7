"""
Custom exceptions for the rrdb.io module.

Purpose
- Provide store-operation error types that map cleanly onto the closed Operation enum.
- Keep rrdb.core as the source of truth for naming/reservation errors (see rrdb.core.errors).

Source of truth and boundaries
- rrdb.core.errors.NameConflictError and FieldsExhaustedError are raised before any
  store call is made.
- rrdb.io raises StoreError subclasses when a store command fails:
  - InfoError: introspection failed (absorbed as "series absent" by the schema manager).
  - CreateError: series materialization failed (bad schema, I/O).
  - TuneError: claiming reserved slots failed.
  - UpdateError: appending an observation failed.
  - FetchError: range read failed.
- RrdbConfigError: invalid or unsupported configuration.

Notes
- These exceptions do not perform any IO and are stdlib-only.
"""

from __future__ import annotations

from rrdb.core.errors import ErrorKind, RrdbError

from .store import Operation

__all__ = [
    "RrdbConfigError",
    "StoreError",
    "InfoError",
    "CreateError",
    "TuneError",
    "UpdateError",
    "FetchError",
    "error_for",
]


class RrdbConfigError(RrdbError, ValueError):
    """
    Raised when rrdb configuration is invalid.

    Examples:
        - Negative reserve_fields
        - Non-positive database_step or command_timeout
    """

    kind = ErrorKind.CONFIG


class StoreError(RrdbError):
    """
    A store operation failed.

    Attributes:
        operation (Operation): The operation that failed.
        diagnostic (str): Text reported by the store (or by rrdb before calling it).
    """

    operation: Operation

    def __init__(self, diagnostic: str = "") -> None:
        self.diagnostic = (diagnostic or "").strip()
        super().__init__(self.diagnostic or f"rrdtool {self.operation.value} failed")


class InfoError(StoreError):
    """Introspection of a series failed (usually because it does not exist yet)."""

    kind = ErrorKind.INFO
    operation = Operation.INFO


class CreateError(StoreError):
    """A series could not be created, likely from a malformed schema in the settings."""

    kind = ErrorKind.CREATE
    operation = Operation.CREATE


class TuneError(StoreError):
    """
    Reserved slots could not be claimed.

    Notes:
        The real-field set of the series is indeterminate after this error; re-introspect
        before retrying.
    """

    kind = ErrorKind.TUNE
    operation = Operation.TUNE


class UpdateError(StoreError):
    """An observation could not be appended (e.g., time not after the last update)."""

    kind = ErrorKind.UPDATE
    operation = Operation.UPDATE


class FetchError(StoreError):
    """Data could not be read from a series."""

    kind = ErrorKind.FETCH
    operation = Operation.FETCH


_ERRORS: dict[Operation, type[StoreError]] = {
    Operation.INFO: InfoError,
    Operation.CREATE: CreateError,
    Operation.TUNE: TuneError,
    Operation.UPDATE: UpdateError,
    Operation.FETCH: FetchError,
}


def error_for(operation: Operation, diagnostic: str = "") -> StoreError:
    """Build the typed error for a failed store operation."""
    return _ERRORS[operation](diagnostic)
