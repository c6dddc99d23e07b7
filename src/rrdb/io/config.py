"""
Configuration for the rrdb.io module.

Defines RrdbSettings, a frozen dataclass carrying the runtime configuration for series
creation, claiming and store invocation. Defaults are sourced from rrdb.core.constants
(the single source of truth). Settings are passed explicitly to Database/SchemaManager;
there is no process-wide configuration.

Source of truth
- rrdb.core.constants.RESERVE_FIELDS, DEFAULT_DATA_SOURCE

Import DAG discipline
- Depends only on stdlib, rrdb.core and rrdb.io.store/errors.

Notes
- Type descriptors are resolved per field by data_source_type(); the result only depends
  on settings and the sanitized name, so it can be re-derived at any later create/claim.
- Archive statements default to empty: operators must supply them for any archive
  (and therefore any fetchable data) to exist.
"""

from __future__ import annotations

import os
import tomllib
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

from rrdb.core.constants import DEFAULT_DATA_SOURCE as CORE_DEFAULT_DATA_SOURCE
from rrdb.core.constants import RESERVE_FIELDS as CORE_RESERVE_FIELDS

from .errors import RrdbConfigError
from .store import find_rrdtool

DataSources = str | Mapping[str, str]


@dataclass(frozen=True)
class RrdbSettings:
    """
    Runtime settings for the rrdb.io layer.

    Attributes:
        rrdtool_path (str): rrdtool executable (default: discovered on PATH).
        database_directory (str): Directory holding <id>.rrd files (default ".").
        reserve_fields (int): Total number of fields a new series is expected to hold.
            A series created from an update with n fields gets max(0, reserve_fields - n)
            reserved slots.
        data_sources (str | Mapping[str, str]): Either one type descriptor used for all
            fields, or a mapping of sanitized field name -> type descriptor.
        data_source_fallback (str): Descriptor for names missing from a data_sources mapping.
        round_robin_archives (tuple[str, ...]): RRA statements added to every series created
            (the "RRA:" prefix is optional).
        database_step (int | None): Optional --step for created series.
        database_start (int | None): Optional --start override for created series.
        command_timeout (float | None): Seconds before a store command is abandoned.

    Examples:
        >>> from rrdb.io import RrdbSettings
        >>> RrdbSettings(reserve_fields=3, data_sources={"hits": "COUNTER:600:0:U"})  # doctest: +ELLIPSIS
        RrdbSettings(...)
    """

    rrdtool_path: str = field(default_factory=find_rrdtool)
    database_directory: str = "."
    reserve_fields: int = CORE_RESERVE_FIELDS
    data_sources: DataSources = CORE_DEFAULT_DATA_SOURCE
    data_source_fallback: str = CORE_DEFAULT_DATA_SOURCE
    round_robin_archives: tuple[str, ...] = ()
    database_step: int | None = None
    database_start: int | None = None
    command_timeout: float | None = None

    def data_source_type(self, name: str) -> str:
        """
        Resolve the type descriptor for a sanitized field name.

        Args:
            name (str): Sanitized field (or reserved slot) name.

        Returns:
            str: Descriptor such as "GAUGE:600:U:U".
        """
        if isinstance(self.data_sources, str):
            return self.data_sources
        return self.data_sources.get(name) or self.data_source_fallback

    def archive_statements(self) -> list[str]:
        out = []
        for stmt in self.round_robin_archives:
            stmt = stmt.strip()
            out.append(stmt if stmt.startswith("RRA:") else f"RRA:{stmt}")
        return out

    def validate(self) -> RrdbSettings:
        """
        Check settings for values the store would reject.

        Raises:
            RrdbConfigError: On a negative reserve_fields, a non-positive step or timeout,
                or an empty type descriptor.
        """
        if self.reserve_fields < 0:
            raise RrdbConfigError(f"reserve_fields must be >= 0 (got {self.reserve_fields})")
        if self.database_step is not None and self.database_step <= 0:
            raise RrdbConfigError(f"database_step must be > 0 (got {self.database_step})")
        if self.command_timeout is not None and self.command_timeout <= 0:
            raise RrdbConfigError(f"command_timeout must be > 0 (got {self.command_timeout})")
        if not self.data_source_fallback:
            raise RrdbConfigError("data_source_fallback must not be empty")
        if isinstance(self.data_sources, str):
            if not self.data_sources:
                raise RrdbConfigError("data_sources must not be empty")
        elif any(not v for v in self.data_sources.values()):
            raise RrdbConfigError("data_sources mapping contains an empty descriptor")
        return self

    # Configuration loaders (env/TOML) with precedence: env > TOML > defaults.

    @classmethod
    def _apply_mapping(cls, base: RrdbSettings, cfg: dict[str, Any] | None) -> RrdbSettings:
        """Apply a loose config mapping onto RrdbSettings, returning a new instance."""
        if not isinstance(cfg, dict):
            return base

        s = base

        def _int(v: Any) -> int | None:
            try:
                return int(v)
            except (TypeError, ValueError):
                return None

        for key in ("rrdtool_path", "database_directory", "data_source_fallback"):
            if key in cfg and isinstance(cfg[key], str):
                s = replace(s, **{key: cfg[key]})

        if "reserve_fields" in cfg:
            n = _int(cfg["reserve_fields"])
            if n is not None:
                s = replace(s, reserve_fields=n)

        # data_sources: a single descriptor or a table of per-field descriptors
        if "data_sources" in cfg:
            ds = cfg["data_sources"]
            if isinstance(ds, str):
                s = replace(s, data_sources=ds)
            elif isinstance(ds, dict):
                s = replace(s, data_sources={str(k): str(v) for k, v in ds.items()})

        # round_robin_archives: list or comma separated string
        if "round_robin_archives" in cfg:
            rra = cfg["round_robin_archives"]
            if isinstance(rra, str):
                rra = [part for part in rra.split(",") if part.strip()]
            if isinstance(rra, (list, tuple)):
                s = replace(s, round_robin_archives=tuple(str(a).strip() for a in rra))

        for key in ("database_step", "database_start"):
            if key in cfg:
                n = _int(cfg[key])
                if n is not None:
                    s = replace(s, **{key: n})

        if "command_timeout" in cfg:
            try:
                s = replace(s, command_timeout=float(cfg["command_timeout"]))
            except (TypeError, ValueError):
                pass

        return s

    @classmethod
    def from_env(cls, base: RrdbSettings | None = None, prefix: str = "RRDB_") -> RrdbSettings:
        """
        Build RrdbSettings from environment variables. Precedence is env > base (if provided) > defaults.

        Recognized variables:
            - RRDB_RRDTOOL_PATH
            - RRDB_DATABASE_DIRECTORY
            - RRDB_RESERVE_FIELDS
            - RRDB_DATA_SOURCES (single descriptor only; per-field tables via TOML)
            - RRDB_DATA_SOURCE_FALLBACK
            - RRDB_ROUND_ROBIN_ARCHIVES (comma separated)
            - RRDB_DATABASE_STEP
            - RRDB_DATABASE_START
            - RRDB_COMMAND_TIMEOUT
        """
        s = base or cls()
        mapping: dict[str, Any] = {}
        for key in (
            "rrdtool_path",
            "database_directory",
            "reserve_fields",
            "data_sources",
            "data_source_fallback",
            "round_robin_archives",
            "database_step",
            "database_start",
            "command_timeout",
        ):
            v = os.getenv(prefix + key.upper())
            if v:
                mapping[key] = v
        return cls._apply_mapping(s, mapping)

    @classmethod
    def from_toml(cls, path: str | os.PathLike[str] | None = None) -> RrdbSettings:
        """
        Build RrdbSettings from a TOML file.

        Search order when `path` is None:
            1) ./rrdb.toml (with either a top-level [rrdb] table or direct keys)
            2) ./pyproject.toml under [tool.rrdb]

        Returns defaults if no file is present.
        """
        s = cls()

        def _load_toml(p: Path) -> dict[str, Any] | None:
            try:
                with p.open("rb") as fh:
                    return tomllib.load(fh)
            except (OSError, tomllib.TOMLDecodeError):
                return None

        cfg: dict[str, Any] | None = None

        cand: list[Path] = []
        if path is not None:
            cand.append(Path(path))
        else:
            cand.append(Path.cwd() / "rrdb.toml")
            cand.append(Path.cwd() / "pyproject.toml")

        for p in cand:
            if not p.exists():
                continue
            data = _load_toml(p)
            if not isinstance(data, dict):
                continue
            if p.name == "pyproject.toml":
                tool = data.get("tool", {})
                cfg = tool.get("rrdb", {}) if isinstance(tool, dict) else None
            elif "rrdb" in data and isinstance(data["rrdb"], dict):
                cfg = data["rrdb"]
            else:
                cfg = data
            if cfg:
                break

        return cls._apply_mapping(s, cfg)

    @classmethod
    def load(cls, path: str | os.PathLike[str] | None = None) -> RrdbSettings:
        """
        Load RrdbSettings applying precedence: environment > TOML > defaults.

        Args:
            path: Optional explicit TOML path. If None, search defaults (rrdb.toml, pyproject.toml).

        Returns:
            RrdbSettings

        Raises:
            RrdbConfigError: If the merged settings are invalid.
        """
        s = cls.from_toml(path)
        s = cls.from_env(base=s)
        return s.validate()
