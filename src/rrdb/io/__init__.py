"""
rrdb.io: store-facing layer for rrdb series.

## Responsibilities
- Lazily create round robin databases on first update, padded with reserved fields.
- Claim reserved fields when later updates introduce new field names.
- Order and coerce update values to the series' current field order.
- Decode fetch output into {time: {field: value}} (and Polars frames).

## Public API
- RrdbSettings: immutable configuration (env/TOML loaders).
- Database: facade bound to one series id (update/fetch/fields/step).
- RrdtoolAdapter / StoreAdapter: the store boundary.

## Import DAG discipline
- Depends on stdlib, pydantic, polars and rrdb.core.*.

## Examples
```python
from rrdb.io import Database, RrdbSettings

settings = RrdbSettings(  # doctest: +SKIP
    database_directory="data",
    reserve_fields=5,
    round_robin_archives=("AVERAGE:0.5:1:288",),
)
db = Database(settings, "web01")  # doctest: +SKIP
db.update(1704067200, {"load.avg": "0.42", "users": 3})  # doctest: +SKIP
db.fetch("AVERAGE", start=1704060000)  # doctest: +SKIP
```
"""

from __future__ import annotations

from .config import RrdbSettings
from .database import Database
from .errors import CreateError, FetchError, InfoError, StoreError, TuneError, UpdateError
from .store import CommandResult, Operation, RrdtoolAdapter, StoreAdapter

__all__ = [
    "RrdbSettings",
    "Database",
    "StoreAdapter",
    "RrdtoolAdapter",
    "CommandResult",
    "Operation",
    "StoreError",
    "InfoError",
    "CreateError",
    "TuneError",
    "UpdateError",
    "FetchError",
]
