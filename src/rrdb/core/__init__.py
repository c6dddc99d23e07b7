"""
Core package for rrdb contracts (naming, schema models, errors, constants).

## Contracts (single source of truth)
- Naming: caller field name -> rrdtool data source name, batch conflict checks,
  reserved-slot convention.
- Schema: pydantic models for a parsed series schema (DataSource, SeriesInfo).
- Errors: closed ErrorKind enumeration and domain exceptions.
- Constants/Typing: defaults and aliases shared with rrdb.io.

## Notes
- Zero-IO policy: stdlib + pydantic only; no file/process IO.
- MUST NOT import rrdb.io.

## Examples
```python
from rrdb.core import field_name, validate_field_names
field_name("disk/used%")  # 'diskdusedp'
validate_field_names(["a.b", "adb"])  # raises NameConflictError
```
"""

from __future__ import annotations

from .constants import DEFAULT_DATA_SOURCE, NO_DATA, RESERVE_FIELDS, RESERVED_PREFIX
from .errors import ErrorKind, FieldsExhaustedError, NameConflictError, RrdbError
from .naming import (
    field_name,
    is_reserved_field_name,
    reserved_field_name,
    reserved_ordinal,
    validate_field_names,
)
from .schema import DataSource, SeriesInfo

__all__ = [
    "DEFAULT_DATA_SOURCE",
    "NO_DATA",
    "RESERVE_FIELDS",
    "RESERVED_PREFIX",
    "ErrorKind",
    "RrdbError",
    "NameConflictError",
    "FieldsExhaustedError",
    "field_name",
    "validate_field_names",
    "reserved_field_name",
    "is_reserved_field_name",
    "reserved_ordinal",
    "DataSource",
    "SeriesInfo",
]
