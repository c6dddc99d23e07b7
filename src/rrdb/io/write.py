"""
Update writer for rrdb series.

Overview
- Orders the values of one observation to match the series' declared field order.
- Coerces each value to an integral or fractional number by its literal form.
- Issues a single ``rrdtool update <path> <epoch>:<v1>:<v2>...`` call.

Coercion rules
- A value whose textual form starts with digits followed by a decimal point
  ("7.", "7.0", "2.5") is fractional; anything else is integral ("7" -> 7, "1e3" -> 1000).
- Integral coercion truncates numeric literals toward zero ("-2.5" -> -2).
- Python floats are sent unchanged (5e-05 stays 5e-05); the literal-form rule applies to
  strings and ints.
- None and NaN are sent as the unknown token "U", as are fields the observation lacks.
- Values that are not numeric literals raise UpdateError before the store is called.

Notes
- The field order must come from the same introspection that decided create vs. claim,
  refreshed after any mutation. A stale order silently writes values into wrong fields.
- Single-writer semantics; no locking.
"""

from __future__ import annotations

import logging
import math
import re
from collections.abc import Mapping, Sequence
from typing import Any, Final

from rrdb.core.clock import to_epoch
from rrdb.core.constants import UNKNOWN
from rrdb.core.typing import TimeLike

from .errors import UpdateError, error_for
from .store import CommandResult, Operation, StoreAdapter

__all__ = [
    "coerce_value",
    "format_value",
    "build_update_values",
    "UpdateWriter",
]

_FRACTIONAL_RE: Final[re.Pattern[str]] = re.compile(r"^\d+\.")


def _is_nan(value: Any) -> bool:
    return isinstance(value, float) and math.isnan(value)


def coerce_value(value: Any) -> int | float | None:
    """
    Coerce one observation value by its literal form.

    Args:
        value (Any): Caller value (number or numeric string).

    Returns:
        int | float | None: float for fractional literals, int otherwise, None for unknown.

    Raises:
        UpdateError: If the value is not a numeric literal.

    Examples:
        >>> coerce_value("7"), coerce_value("7.0")
        (7, 7.0)
    """
    if value is None or _is_nan(value):
        return None
    if isinstance(value, float):
        return value
    text = str(value).strip()
    try:
        if _FRACTIONAL_RE.match(text):
            return float(text)
        if isinstance(value, int):
            return int(value)
        try:
            return int(text)
        except ValueError:
            return int(float(text))
    except (ValueError, OverflowError) as exc:
        raise UpdateError(f"value {value!r} is not a numeric literal") from exc


def format_value(value: int | float | None) -> str:
    """Render a coerced value as an rrdtool update token."""
    if value is None or _is_nan(value):
        return UNKNOWN
    return repr(value) if isinstance(value, float) else str(value)


def build_update_values(field_order: Sequence[str], data: Mapping[str, Any]) -> list[str]:
    """
    One update token per declared field, in declared order.

    Args:
        field_order (Sequence[str]): Complete field order reported by introspection.
        data (Mapping[str, Any]): Sanitized field name -> value.

    Returns:
        list[str]: Tokens aligned with field_order; "U" for fields absent from data.
    """
    return [format_value(coerce_value(data[f])) if f in data else UNKNOWN for f in field_order]


class UpdateWriter:
    """
    Appends observations to one series.

    Args:
        store (StoreAdapter): Store used to run the update.
        path (str): Path of the series.
        logger (logging.Logger | None): Logger for store calls.
    """

    def __init__(
        self,
        store: StoreAdapter,
        path: str,
        *,
        logger: logging.Logger | None = None,
    ) -> None:
        self.store = store
        self.path = path
        self._logger = logger or logging.getLogger(__name__)

    def write(
        self,
        time: TimeLike,
        field_order: Sequence[str],
        data: Mapping[str, Any],
    ) -> CommandResult:
        """
        Append one observation.

        Args:
            time (TimeLike): Observation time.
            field_order (Sequence[str]): Field order from the current introspection.
            data (Mapping[str, Any]): Sanitized field name -> value.

        Returns:
            CommandResult: The successful store result.

        Raises:
            UpdateError: If a value cannot be coerced or the store rejects the update.
        """
        values = build_update_values(field_order, data)
        sample = ":".join([str(to_epoch(time)), *values])
        self._logger.debug("update %s %s", self.path, sample)
        result = self.store.run(Operation.UPDATE, self.path, [sample])
        if not result.ok:
            self._logger.warning("update of %s failed: %s", self.path, (result.error or "").strip())
            raise error_for(Operation.UPDATE, result.error or "")
        return result
