from __future__ import annotations

import subprocess
from types import SimpleNamespace

import pytest

from rrdb.io import store as store_mod
from rrdb.io.errors import CreateError, FetchError, InfoError, TuneError, UpdateError, error_for
from rrdb.io.store import CommandResult, Operation, RrdtoolAdapter, find_rrdtool


def test_argv_layout() -> None:
    adapter = RrdtoolAdapter("/usr/bin/rrdtool")
    assert adapter.argv(Operation.TUNE, "s.rrd", ["-r", "a:b"]) == [
        "/usr/bin/rrdtool",
        "tune",
        "s.rrd",
        "-r",
        "a:b",
    ]


def test_run_success_captures_output(monkeypatch) -> None:
    seen = {}

    def fake_run(argv, **kwargs):
        seen["argv"] = argv
        seen.update(kwargs)
        return SimpleNamespace(returncode=0, stdout="step = 300\n")

    monkeypatch.setattr(subprocess, "run", fake_run)
    result = RrdtoolAdapter("rrdtool", timeout=5).run(Operation.INFO, "s.rrd")

    assert result == CommandResult.success("step = 300\n")
    assert result.ok
    assert seen["argv"] == ["rrdtool", "info", "s.rrd"]
    assert seen["timeout"] == 5
    assert seen["stderr"] is subprocess.STDOUT
    assert seen["check"] is False


def test_run_nonzero_exit_is_failure(monkeypatch) -> None:
    monkeypatch.setattr(
        subprocess,
        "run",
        lambda argv, **kw: SimpleNamespace(returncode=1, stdout="ERROR: opening 's.rrd'\n"),
    )
    result = RrdtoolAdapter("rrdtool").run(Operation.INFO, "s.rrd")
    assert not result.ok
    assert result.output is None
    assert result.error == "ERROR: opening 's.rrd'\n"


def test_run_timeout_is_failure(monkeypatch) -> None:
    def fake_run(argv, **kwargs):
        raise subprocess.TimeoutExpired(argv, kwargs["timeout"])

    monkeypatch.setattr(subprocess, "run", fake_run)
    result = RrdtoolAdapter("rrdtool", timeout=0.1).run(Operation.FETCH, "s.rrd", ["AVERAGE"])
    assert not result.ok
    assert "timed out" in result.error


def test_missing_executable_is_failure(tmp_path) -> None:
    missing = str(tmp_path / "no-such-rrdtool")
    result = RrdtoolAdapter(missing).run(Operation.INFO, "s.rrd")
    assert not result.ok
    assert missing in result.error


def test_find_rrdtool_falls_back_to_name(monkeypatch) -> None:
    monkeypatch.setattr(store_mod.shutil, "which", lambda name: None)
    assert find_rrdtool() == "rrdtool"
    monkeypatch.setattr(store_mod.shutil, "which", lambda name: "/opt/bin/rrdtool")
    assert find_rrdtool() == "/opt/bin/rrdtool"


@pytest.mark.parametrize(
    "operation, cls",
    [
        (Operation.INFO, InfoError),
        (Operation.CREATE, CreateError),
        (Operation.TUNE, TuneError),
        (Operation.UPDATE, UpdateError),
        (Operation.FETCH, FetchError),
    ],
)
def test_error_for_maps_every_operation(operation: Operation, cls) -> None:
    err = error_for(operation, "  boom\n")
    assert type(err) is cls
    assert err.diagnostic == "boom"
    assert err.operation is operation


def test_error_without_diagnostic_names_operation() -> None:
    assert str(error_for(Operation.TUNE)) == "rrdtool tune failed"
