"""
Field naming rules for rrdb series.

Maps arbitrary caller-supplied field names onto the identifier alphabet rrdtool accepts
for data source names, and guards batches of names against collisions.

Responsibilities
- field_name(): deterministic, total sanitizer (punctuation translation, strip, truncate).
- validate_field_names(): batch check raising NameConflictError on collisions,
  out-of-range results, or names that would shadow a reserved slot.
- Reserved-slot naming helpers shared by the ledger and the schema manager.

Rules
-----
1) Punctuation translation (one safe letter per character):

| char | -  | ~  | !  | @  | #  | $  | %  | ^  | &  | *  | +  | =  | |  | <  | >  | .  | /  | ?  |
|------|----|----|----|----|----|----|----|----|----|----|----|----|----|----|----|----|----|----|----|
| to   | m  | t  | b  | a  | h  | d  | p  | c  | n  | m  | v  | e  | p  | l  | g  | d  | d  | q  |

2) Every remaining character outside [a-zA-Z0-9_] is deleted.
3) The result is truncated to MAX_FIELD_NAME_LENGTH (19) characters.

Examples
--------
>>> from rrdb.core.naming import field_name, reserved_field_name
>>> field_name("cpu.load-avg")
'cpudloadmavg'
>>> field_name("héllo wörld")
'hllowrld'
>>> reserved_field_name(3)
'_reserved3'
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from typing import Any, Final

from .constants import MAX_FIELD_NAME_LENGTH, RESERVED_PREFIX
from .errors import NameConflictError

__all__ = [
    "field_name",
    "validate_field_names",
    "reserved_field_name",
    "is_reserved_field_name",
    "reserved_ordinal",
]

_PUNCTUATION_TABLE: Final[dict[int, int]] = str.maketrans(
    "-~!@#$%^&*+=|<>./?",
    "mtbahdpcnmveplgddq",
)
_ILLEGAL_RE: Final[re.Pattern[str]] = re.compile(r"[^a-zA-Z0-9_]")
_RESERVED_RE: Final[re.Pattern[str]] = re.compile(rf"^{re.escape(RESERVED_PREFIX)}(\d+)$")


def field_name(name: Any) -> str:
    """
    Return the name used inside a series for a caller-supplied field name.

    Args:
      name (Any): Field name as given to an update; non-strings are converted with str().

    Returns:
      str: Sanitized identifier (possibly empty if nothing legal remained).

    Notes:
      Idempotent for any legal identifier: field_name(field_name(x)) == field_name(x).
    """
    translated = str(name).translate(_PUNCTUATION_TABLE)
    return _ILLEGAL_RE.sub("", translated)[:MAX_FIELD_NAME_LENGTH]


def reserved_field_name(ordinal: int) -> str:
    """Name of the reserved slot with the given zero-based ordinal."""
    if ordinal < 0:
        raise ValueError("reserved slot ordinal must be >= 0")
    return f"{RESERVED_PREFIX}{ordinal}"


def is_reserved_field_name(name: str) -> bool:
    """True if name follows the reserved-slot convention (e.g., "_reserved0")."""
    return bool(_RESERVED_RE.match(name or ""))


def reserved_ordinal(name: str) -> int:
    """
    Ordinal encoded in a reserved slot name.

    Raises:
      ValueError: If name is not a reserved slot name.
    """
    match = _RESERVED_RE.match(name or "")
    if match is None:
        raise ValueError(f"not a reserved field name: {name!r}")
    return int(match.group(1))


def validate_field_names(names: Iterable[Any]) -> dict[Any, str]:
    """
    Sanitize a batch of caller field names and check it can be stored unambiguously.

    Args:
      names (Iterable[Any]): Original field names from one update.

    Returns:
      dict[Any, str]: Original name -> sanitized name, in input order.

    Raises:
      NameConflictError: If two names sanitize identically, a sanitized name is empty or
        longer than MAX_FIELD_NAME_LENGTH, or a name would shadow a reserved slot.
    """
    mapping: dict[Any, str] = {}
    for name in names:
        mapping[name] = field_name(name)

    seen: dict[str, Any] = {}
    for original, safe in mapping.items():
        if not 1 <= len(safe) <= MAX_FIELD_NAME_LENGTH:
            raise NameConflictError(
                f"field name {original!r} cannot be converted to an rrdtool field name "
                f"(1 to {MAX_FIELD_NAME_LENGTH} [a-zA-Z0-9_] characters)"
            )
        if is_reserved_field_name(safe):
            raise NameConflictError(
                f"field name {original!r} collides with the reserved field convention "
                f"({RESERVED_PREFIX}<n>)"
            )
        if safe in seen:
            raise NameConflictError(
                f"field names {seen[safe]!r} and {original!r} both map to {safe!r}"
            )
        seen[safe] = original
    return mapping
