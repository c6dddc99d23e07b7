"""
Database facade for rrdb.io.

Provides a convenient object bound to one series id with update/fetch/fields/step
helpers. Each instance manages a separate round robin database keyed on the id it was
given; the file is created lazily on the first update so its fields are known.

Source of truth
- Naming: rrdb.core.naming (field_name maps caller names to stored names)
- Schema snapshot: rrdb.core.schema.SeriesInfo
- Creation/claiming: rrdb.io.schema_manager.SchemaManager
- Decoding: rrdb.io.read

Notes
- Not safe for concurrent writers to the same id; serialize writes per id.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

import polars as pl

from rrdb.core.naming import field_name
from rrdb.core.typing import Observation, SeriesId, TimeLike, TimeSeriesResult

from .config import RrdbSettings
from .paths import series_exists, series_path
from .read import Consolidation, FetchRange
from .read import fetch as _fetch
from .read import to_frame
from .schema_manager import SchemaManager
from .store import CommandResult, RrdtoolAdapter, StoreAdapter


class Database:
    """
    Facade bound to a specific RrdbSettings and series id.

    Notes:
        - No I/O happens at construction time.
        - Field names given to update() are stored under field_name(name); use
          Database.field_name() to map them back when reading.
    """

    def __init__(
        self,
        settings: RrdbSettings,
        series_id: SeriesId | str,
        *,
        store: StoreAdapter | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        """
        Initialize a facade for one series.

        Args:
            settings (RrdbSettings): Configuration (directory, reserve_fields, data sources...).
            series_id (SeriesId | str): Unique id; the file is <database_directory>/<id>.rrd.
            store (StoreAdapter | None): Store adapter (default: RrdtoolAdapter from settings).
            logger (logging.Logger | None): Logger passed to the schema manager.

        Raises:
            rrdb.io.errors.RrdbConfigError: If settings are invalid.
        """
        self.settings = settings.validate()
        self.id = SeriesId(str(series_id))
        self.store: StoreAdapter = store or RrdtoolAdapter(
            settings.rrdtool_path, timeout=settings.command_timeout
        )
        self.schema = SchemaManager(settings, self.store, self.path, logger=logger)

    @staticmethod
    def field_name(name: Any) -> str:
        """Name used inside the series for a field given to update()."""
        return field_name(name)

    @property
    def path(self) -> str:
        """Path of the backing file; may not exist before the first update()."""
        return series_path(self.settings, self.id)

    def exists(self) -> bool:
        return series_exists(self.settings, self.id)

    # ---------------------------------------------------------------------
    # Schema
    # ---------------------------------------------------------------------
    def fields(self, include_types: bool = False) -> list[str] | dict[str, str]:
        """
        Declared fields of the series (reserved slots included).

        Args:
            include_types (bool): Return {name: type descriptor} instead of names.

        Returns:
            list[str] | dict[str, str]: Empty for a series that was never created.
        """
        info = self.schema.introspect()
        return info.field_types() if include_types else info.field_names()

    def step(self) -> int:
        """Step of the series in seconds (300 for a series that was never created)."""
        return self.schema.introspect().step

    # ---------------------------------------------------------------------
    # Write
    # ---------------------------------------------------------------------
    def update(self, time: TimeLike, data: Observation) -> CommandResult:
        """
        Record data at time, creating the series or claiming reserved fields as needed.

        Args:
            time (TimeLike): Sample time (epoch seconds or datetime).
            data (Observation): Field name -> value.

        Raises:
            rrdb.core.errors.NameConflictError: Names cannot be mapped unambiguously.
            rrdb.core.errors.FieldsExhaustedError: Not enough reserved fields left.
            rrdb.io.errors.CreateError: The series could not be created.
            rrdb.io.errors.TuneError: Reserved fields could not be claimed.
            rrdb.io.errors.UpdateError: The data could not be added.
        """
        return self.schema.write_observation(time, data)

    # ---------------------------------------------------------------------
    # Read
    # ---------------------------------------------------------------------
    def fetch(
        self,
        consolidation: Consolidation | str,
        bounds: FetchRange | Mapping[str, Any] | None = None,
        **options: Any,
    ) -> TimeSeriesResult:
        """
        Read data from one consolidation function.

        Args:
            consolidation (Consolidation | str): e.g. "AVERAGE", "MAX".
            bounds (FetchRange | Mapping | None): start/end/resolution bounds.
            **options: start/end/resolution given as keywords (override bounds).

        Returns:
            TimeSeriesResult: {time: {field: value}}.

        Raises:
            rrdb.io.errors.FetchError: If data cannot be read.
        """
        if not isinstance(bounds, FetchRange):
            merged = dict(bounds or {})
            merged.update(options)
            bounds = FetchRange.from_mapping(merged)
        elif options:
            bounds = FetchRange.from_mapping(
                {"start": bounds.start, "end": bounds.end, "resolution": bounds.resolution, **options}
            )
        return _fetch(self.store, self.path, consolidation, bounds)

    def fetch_frame(
        self,
        consolidation: Consolidation | str,
        bounds: FetchRange | Mapping[str, Any] | None = None,
        **options: Any,
    ) -> pl.DataFrame:
        """Same as fetch(), as a Polars DataFrame (see rrdb.io.read.to_frame)."""
        return to_frame(self.fetch(consolidation, bounds, **options))
