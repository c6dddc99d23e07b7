"""
rrdb: round robin database wrapper with reserved-field schema evolution.

- rrdb.core: zero-IO naming rules, schema models, errors.
- rrdb.io: settings, store adapter and the Database facade.
"""

__version__ = "0.1.0"
