import subprocess
import sys

import pytest

from rrdb.core.errors import NameConflictError
from rrdb.io import Database


def test_validation_rejects_ambiguous_names_without_store_calls(settings, fake_store):
    db = Database(settings, "web01", store=fake_store)

    # "load.avg" and "loaddavg" sanitize to the same stored name
    with pytest.raises(NameConflictError):
        db.update(1704067200, {"load.avg": 1, "loaddavg": 2})
    assert fake_store.calls == []
    assert not db.exists()


def test_import_dag_core_has_no_side_imports():
    # Run in a clean Python process to avoid pollution from other tests
    code = r"""
import sys
import rrdb.core  # noqa: F401

forbidden = ["rrdb.io", "polars"]
present = [m for m in forbidden if m in sys.modules]
print(",".join(present))
"""
    proc = subprocess.run([sys.executable, "-c", code], capture_output=True, text=True, check=True)
    present = proc.stdout.strip()
    # On a clean import of rrdb.core, the store layer and its dependencies stay unloaded.
    assert present == ""


def test_import_rrdb_is_lightweight():
    code = r"""
import sys
import rrdb

print(rrdb.__version__, "rrdb.core" in sys.modules, "rrdb.io" in sys.modules)
"""
    proc = subprocess.run([sys.executable, "-c", code], capture_output=True, text=True, check=True)
    assert proc.stdout.split() == ["0.1.0", "False", "False"]
