"""
Schema manager: lazy creation and reserved-slot claiming for one series.

Lifecycle
- Absent: no backing file; introspection fails.
- Materialized: created on the first successful write with every field of that write
  plus max(0, reserve_fields - n) reserved slots. The total field count never changes
  afterwards; claiming renames reserved slots in place.

write_observation(time, data)
1) Sanitize field names (NameConflictError; no store interaction).
2) Introspect. A failed info call means "absent".
3) Absent -> create_series(); materialized -> claim_fields().
4) Re-introspect if the schema changed, then hand the current field order to UpdateWriter.

Errors
- NameConflictError / FieldsExhaustedError (rrdb.core.errors) before any mutation.
- CreateError / TuneError / UpdateError (rrdb.io.errors) from the store.
- Nothing is retried; a TuneError leaves the real-field set indeterminate until
  re-introspected.

Notes
- Single-writer semantics: introspect/create/claim/update is not atomic. Callers that
  write one series from several workers must serialize per series id.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from rrdb.core.clock import to_epoch
from rrdb.core.constants import START_OFFSET
from rrdb.core.naming import reserved_field_name, validate_field_names
from rrdb.core.schema import DataSource, SeriesInfo
from rrdb.core.typing import TimeLike

from .config import RrdbSettings
from .errors import InfoError, error_for
from .ledger import Claim, ReservationLedger
from .store import CommandResult, Operation, StoreAdapter
from .write import UpdateWriter

__all__ = ["SchemaManager"]


class SchemaManager:
    """
    Creates and evolves the schema of one series, then writes observations to it.

    Args:
        settings (RrdbSettings): Immutable configuration (reserve_fields, data sources, ...).
        store (StoreAdapter): Store adapter used for every operation.
        path (str): Path of the series.
        logger (logging.Logger | None): Logger for lifecycle events.
    """

    def __init__(
        self,
        settings: RrdbSettings,
        store: StoreAdapter,
        path: str,
        *,
        logger: logging.Logger | None = None,
    ) -> None:
        self.settings = settings
        self.store = store
        self.path = path
        self._logger = logger or logging.getLogger(__name__)
        self.writer = UpdateWriter(store, path, logger=self._logger)

    # ---------------------------------------------------------------------
    # Introspection
    # ---------------------------------------------------------------------
    def info_text(self) -> str:
        """
        Raw info output for the series.

        Raises:
            InfoError: If the series cannot be introspected (e.g., it does not exist).
        """
        result = self.store.run(Operation.INFO, self.path)
        if not result.ok:
            raise error_for(Operation.INFO, result.error or "")
        return result.output or ""

    def introspect(self) -> SeriesInfo:
        """Current schema; SeriesInfo.absent() when the info call fails."""
        try:
            return SeriesInfo.from_text(self.info_text())
        except InfoError as exc:
            self._logger.debug("info %s failed, treating as absent: %s", self.path, exc)
            return SeriesInfo.absent()

    # ---------------------------------------------------------------------
    # Create
    # ---------------------------------------------------------------------
    def creation_args(self, time: TimeLike, field_names: Sequence[str]) -> list[str]:
        """Arguments of the create call for a first write with field_names at time."""
        s = self.settings
        args: list[str] = []
        if s.database_step is not None:
            args.extend(["--step", str(int(s.database_step))])
        if s.database_start is not None:
            args.extend(["--start", str(int(s.database_start))])
        else:
            args.extend(["--start", str(to_epoch(time) - START_OFFSET)])

        names = list(field_names)
        names.extend(reserved_field_name(i) for i in range(max(0, s.reserve_fields - len(names))))
        for name in names:
            args.append(DataSource(name=name, type_descriptor=s.data_source_type(name)).definition())
        args.extend(s.archive_statements())
        return args

    def create_series(self, time: TimeLike, field_names: Sequence[str]) -> CommandResult:
        """
        Materialize the series with field_names plus reserved slots.

        Raises:
            CreateError: If the store rejects the schema or the file cannot be written.
        """
        args = self.creation_args(time, field_names)
        self._logger.info(
            "creating %s with fields %s (%d reserved)",
            self.path,
            list(field_names),
            max(0, self.settings.reserve_fields - len(field_names)),
        )
        result = self.store.run(Operation.CREATE, self.path, args)
        if not result.ok:
            self._logger.warning("create of %s failed: %s", self.path, (result.error or "").strip())
            raise error_for(Operation.CREATE, result.error or "")
        return result

    # ---------------------------------------------------------------------
    # Claim
    # ---------------------------------------------------------------------
    def tune_args(self, claims: Iterable[Claim]) -> list[str]:
        args: list[str] = []
        for claim in claims:
            args.extend(["-r", f"{claim.reserved}:{claim.field}"])
            args.extend(["-d", f"{claim.field}:{self.settings.data_source_type(claim.field)}"])
        return args

    def claim_fields(self, field_names: Sequence[str], info: SeriesInfo | None = None) -> list[Claim]:
        """
        Rename reserved slots so every name in field_names is a real field.

        Args:
            field_names (Sequence[str]): Sanitized names of the current write.
            info (SeriesInfo | None): Schema snapshot to plan from (default: re-introspect).

        Returns:
            list[Claim]: Claims issued; empty when nothing was new.

        Raises:
            FieldsExhaustedError: If more new fields than reserved slots (nothing changed).
            TuneError: If the store rejects the rename.
        """
        ledger = ReservationLedger.from_info(info if info is not None else self.introspect())
        claims = ledger.plan_claims(field_names)
        if not claims:
            return []
        self._logger.info(
            "claiming %s in %s",
            ", ".join(f"{c.reserved}->{c.field}" for c in claims),
            self.path,
        )
        result = self.store.run(Operation.TUNE, self.path, self.tune_args(claims))
        if not result.ok:
            self._logger.warning("tune of %s failed: %s", self.path, (result.error or "").strip())
            raise error_for(Operation.TUNE, result.error or "")
        return claims

    # ---------------------------------------------------------------------
    # Write
    # ---------------------------------------------------------------------
    def write_observation(self, time: TimeLike, data: Mapping[Any, Any]) -> CommandResult:
        """
        Store one observation, creating the series or claiming fields as needed.

        Args:
            time (TimeLike): Observation time.
            data (Mapping[Any, Any]): Caller field name -> value.

        Returns:
            CommandResult: Result of the update call.

        Raises:
            NameConflictError, FieldsExhaustedError, CreateError, TuneError, UpdateError
        """
        names = validate_field_names(data.keys())
        safe_data = {names[original]: value for original, value in data.items()}
        safe_names = list(safe_data)

        info = self.introspect()
        if not info.exists:
            self.create_series(time, safe_names)
            info = self.introspect()
        elif self.claim_fields(safe_names, info):
            info = self.introspect()

        return self.writer.write(time, info.field_names(), safe_data)
