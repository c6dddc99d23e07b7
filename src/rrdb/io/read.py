"""
Read utilities for rrdb series.

Overview
- fetch(): runs ``rrdtool fetch <path> <CF> [--start N] [--end N] [--resolution N]`` and
  decodes the output into {time: {field: value}}.
- parse_fetch_output(): the decoder on its own (pure).
- to_frame(): Polars view of a decoded result (one row per sample time).

Output format decoded
---------------------
::

                              temp          hits

    1704067200: 2.1500000000e+01 1.2000000000e+01
    1704067500: -nan -nan

- The first non-blank line is the header naming the fields in column order.
- Each "<epoch>: v1 v2 ..." line with at least as many values as fields is a sample;
  shorter lines are ignored.
- Values that are not numeric literals (nan, -nan, U, ...) decode to NO_DATA (NaN).
- Empty output, or output without a header, yields an empty result.

Notes
- Range bounds are each optional; omitted bounds use the store's defaults.
- Reads have no ordering dependency on writes beyond what the store guarantees.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, Final

import polars as pl

from rrdb.core.clock import from_epoch, to_epoch
from rrdb.core.constants import NO_DATA
from rrdb.core.typing import TimeLike, TimeSeriesResult

from .errors import FetchError, error_for
from .store import Operation, StoreAdapter

logger = logging.getLogger(__name__)

__all__ = [
    "Consolidation",
    "FetchRange",
    "decode_value",
    "parse_fetch_output",
    "fetch",
    "to_frame",
]

_ROW_RE: Final[re.Pattern[str]] = re.compile(r"^\s*(\d+):(.*)$")
_NUMBER_RE: Final[re.Pattern[str]] = re.compile(r"^[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?$")


class Consolidation(Enum):
    """Consolidation functions understood by rrdtool fetch."""

    AVERAGE = "AVERAGE"
    MIN = "MIN"
    MAX = "MAX"
    LAST = "LAST"


@dataclass(frozen=True, slots=True)
class FetchRange:
    """
    Optional bounds for a fetch.

    Attributes:
        start (TimeLike | None): --start (epoch seconds, numeric string or datetime).
        end (TimeLike | None): --end (epoch seconds, numeric string or datetime).
        resolution (int | None): --resolution in seconds.
    """

    start: TimeLike | None = None
    end: TimeLike | None = None
    resolution: int | None = None

    @classmethod
    def from_mapping(cls, bounds: Mapping[str, Any] | None) -> FetchRange:
        """Build a range from a loose {"start","end","resolution"} mapping."""
        if not bounds:
            return cls()
        return cls(
            start=bounds.get("start"),
            end=bounds.get("end"),
            resolution=bounds.get("resolution"),
        )

    def args(self) -> list[str]:
        out: list[str] = []
        for option, value in (
            ("start", self.start),
            ("end", self.end),
            ("resolution", self.resolution),
        ):
            if value is not None:
                out.extend([f"--{option}", str(_bound_epoch(option, value))])
        return out


def _bound_epoch(option: str, value: Any) -> int:
    if isinstance(value, str):
        try:
            return int(float(value.strip()))
        except (ValueError, OverflowError) as exc:
            raise FetchError(f"invalid --{option} bound {value!r}") from exc
    try:
        return to_epoch(value)
    except (TypeError, ValueError, OverflowError) as exc:
        raise FetchError(f"invalid --{option} bound {value!r}") from exc


def decode_value(token: str) -> float:
    """Decode one fetch column value; anything non-numeric is NO_DATA."""
    token = token.strip()
    return float(token) if _NUMBER_RE.match(token) else NO_DATA


def parse_fetch_output(text: str | None) -> TimeSeriesResult:
    """
    Decode ``rrdtool fetch`` output.

    Args:
        text (str | None): Raw fetch output.

    Returns:
        TimeSeriesResult: {sample time (UTC datetime): {field: value}}; {} for empty output.
    """
    fields: list[str] | None = None
    results: TimeSeriesResult = {}
    for line in (text or "").splitlines():
        if not line.strip():
            continue
        row = _ROW_RE.match(line)
        if fields is None:
            if row is not None:
                # Samples without a header cannot be attributed to fields.
                return {}
            fields = line.split()
            continue
        if row is None:
            continue
        values = row.group(2).split()
        if len(values) < len(fields):
            continue
        results[from_epoch(int(row.group(1)))] = {
            name: decode_value(token) for name, token in zip(fields, values)
        }
    return results


def fetch(
    store: StoreAdapter,
    path: str,
    consolidation: Consolidation | str,
    bounds: FetchRange | None = None,
) -> TimeSeriesResult:
    """
    Read samples from a series.

    Args:
        store (StoreAdapter): Store to read from.
        path (str): Series path.
        consolidation (Consolidation | str): Consolidation function (e.g., "AVERAGE").
        bounds (FetchRange | None): Optional start/end/resolution.

    Returns:
        TimeSeriesResult: Decoded samples (possibly empty).

    Raises:
        FetchError: If the fetch command fails.
    """
    cf = consolidation.value if isinstance(consolidation, Consolidation) else str(consolidation)
    args = [cf, *(bounds or FetchRange()).args()]
    logger.debug("fetch %s %s", path, args)
    result = store.run(Operation.FETCH, path, args)
    if not result.ok:
        logger.warning("fetch of %s failed: %s", path, (result.error or "").strip())
        raise error_for(Operation.FETCH, result.error or "")
    return parse_fetch_output(result.output)


def to_frame(result: TimeSeriesResult) -> pl.DataFrame:
    """
    Convert a decoded fetch result to a Polars DataFrame.

    Args:
        result (TimeSeriesResult): Output of fetch()/parse_fetch_output().

    Returns:
        pl.DataFrame: "time" (UTC datetime, ascending) followed by one Float64 column per
        field; NO_DATA samples become nulls.
    """
    times = sorted(result)
    names = list(result[times[0]]) if times else []
    schema: dict[str, Any] = {"time": pl.Datetime(time_unit="us", time_zone="UTC")}
    schema.update({name: pl.Float64 for name in names})
    data: dict[str, list[Any]] = {"time": times}
    for name in names:
        data[name] = [result[t].get(name, NO_DATA) for t in times]
    df = pl.DataFrame(data, schema=schema)
    if names:
        df = df.with_columns(pl.col(names).fill_nan(None))
    return df
