"""
Pydantic v2 models for the schema of a materialized series, parsed from ``rrdtool info``.

Responsibilities
- DataSource: one declared field and its type descriptor ("GAUGE:600:U:U").
- SeriesInfo: declared fields in storage order plus the series step.
- SeriesInfo.from_text(): parse the info text format.

Info text format
----------------
Lines consumed (everything else is ignored)::

    step = 300
    ds[temp].type = "GAUGE"
    ds[temp].minimal_heartbeat = 600
    ds[temp].min = NaN
    ds[temp].max = 1.0000000000e+02

- ``ds[<name>]`` identifies a declared field; first appearance fixes its order.
- NaN min/max values are normalized to the "U" token.
- A missing ``step`` line yields DEFAULT_STEP.

Style
- Zero-IO (stdlib + pydantic only).
"""

from __future__ import annotations

import re
from typing import Final

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .constants import DEFAULT_STEP, UNKNOWN
from .naming import is_reserved_field_name, reserved_ordinal

__all__ = [
    "DataSource",
    "SeriesInfo",
]

_DS_RE: Final[re.Pattern[str]] = re.compile(r"^ds\[([^\]]+)\]", re.MULTILINE)
_STEP_RE: Final[re.Pattern[str]] = re.compile(r"^step\s*=\s*(\d+)", re.MULTILINE)


def _attribute(text: str, name: str, attr: str, pattern: str) -> str | None:
    match = re.search(
        rf"^ds\[{re.escape(name)}\]\.{attr}\s*=\s*{pattern}",
        text,
        re.MULTILINE,
    )
    return match.group(1) if match else None


def _unknown_if_nan(value: str | None) -> str:
    if value is None:
        return ""
    return value.replace("NaN", UNKNOWN)


class DataSource(BaseModel):
    """
    A declared field of a series.

    Attributes:
        name (str): Identifier inside the series (already sanitized).
        type_descriptor (str): rrdtool DS definition without the leading "DS:<name>:",
            e.g. "GAUGE:600:U:U".

    Examples:
        >>> from rrdb.core.schema import DataSource
        >>> DataSource(name="temp", type_descriptor="GAUGE:600:U:U").definition()
        'DS:temp:GAUGE:600:U:U'
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str
    type_descriptor: str = ""

    @property
    def reserved(self) -> bool:
        return is_reserved_field_name(self.name)

    def definition(self) -> str:
        return f"DS:{self.name}:{self.type_descriptor}"


class SeriesInfo(BaseModel):
    """
    Schema snapshot of a series as reported by one introspection call.

    Attributes:
        data_sources (list[DataSource]): Declared fields in storage (column) order.
        step (int): Series step in seconds.
        exists (bool): False when the introspection failed (series absent).

    Notes:
        An absent series is represented by SeriesInfo.absent(): no fields, default step.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    data_sources: list[DataSource] = Field(default_factory=list)
    step: int = DEFAULT_STEP
    exists: bool = True

    @field_validator("step")
    @classmethod
    def _step_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("step must be > 0")
        return v

    @classmethod
    def absent(cls) -> SeriesInfo:
        return cls(data_sources=[], step=DEFAULT_STEP, exists=False)

    @classmethod
    def from_text(cls, text: str) -> SeriesInfo:
        """
        Parse ``rrdtool info`` output.

        Args:
            text (str): Raw info output.

        Returns:
            SeriesInfo: Parsed schema. Unrecognized lines are ignored.
        """
        text = text or ""
        names: list[str] = []
        for match in _DS_RE.finditer(text):
            name = match.group(1)
            if name not in names:
                names.append(name)

        fields: list[DataSource] = []
        for name in names:
            parts = [
                _attribute(text, name, "type", r'"([^"]+)"') or "",
                _attribute(text, name, "minimal_heartbeat", r"(\d+)") or "",
                _unknown_if_nan(_attribute(text, name, "min", r"(\S+)")),
                _unknown_if_nan(_attribute(text, name, "max", r"(\S+)")),
            ]
            fields.append(DataSource(name=name, type_descriptor=":".join(parts)))

        step_match = _STEP_RE.search(text)
        step = int(step_match.group(1)) if step_match else DEFAULT_STEP
        return cls(data_sources=fields, step=step)

    def field_names(self) -> list[str]:
        return [f.name for f in self.data_sources]

    def real_fields(self) -> list[str]:
        return [f.name for f in self.data_sources if not f.reserved]

    def reserved_fields(self) -> list[str]:
        """Reserved slot names, lowest ordinal first."""
        return sorted((f.name for f in self.data_sources if f.reserved), key=reserved_ordinal)

    def field_types(self) -> dict[str, str]:
        return {f.name: f.type_descriptor for f in self.data_sources}
