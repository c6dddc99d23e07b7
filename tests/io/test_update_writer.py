from __future__ import annotations

import math
from datetime import UTC, datetime

import pytest

from rrdb.io.errors import UpdateError
from rrdb.io.store import CommandResult, Operation
from rrdb.io.write import UpdateWriter, build_update_values, coerce_value, format_value


class _RecordingStore:
    def __init__(self, result: CommandResult | None = None) -> None:
        self.result = result or CommandResult.success("")
        self.calls: list[tuple[Operation, str, list[str]]] = []

    def run(self, operation, path, args=()):
        self.calls.append((operation, path, list(args)))
        return self.result


@pytest.mark.parametrize(
    "value, expected",
    [
        ("7", 7),
        ("7.0", 7.0),
        ("7.", 7.0),
        (2.5, 2.5),
        (3, 3),
        ("1e3", 1000),
        ("-2.5", -2),
        (" 12 ", 12),
    ],
)
def test_coerce_value_by_literal_form(value, expected) -> None:
    out = coerce_value(value)
    assert out == expected
    assert type(out) is type(expected)


def test_coerce_value_unknowns() -> None:
    assert coerce_value(None) is None
    assert coerce_value(float("nan")) is None


@pytest.mark.parametrize("value", ["abc", "", "1,5", object()])
def test_coerce_value_rejects_non_numeric(value) -> None:
    with pytest.raises(UpdateError):
        coerce_value(value)


def test_format_value_tokens() -> None:
    assert format_value(None) == "U"
    assert format_value(7) == "7"
    assert format_value(2.5) == "2.5"
    assert format_value(math.nan) == "U"


def test_build_update_values_follows_declared_order() -> None:
    values = build_update_values(["b", "a", "_reserved0"], {"a": "1", "b": 2.5})
    assert values == ["2.5", "1", "U"]


def test_writer_issues_one_update_call() -> None:
    store = _RecordingStore()
    writer = UpdateWriter(store, "/tmp/s.rrd")

    writer.write(datetime(2024, 1, 1, tzinfo=UTC), ["a", "b"], {"a": 1, "b": None})

    assert store.calls == [(Operation.UPDATE, "/tmp/s.rrd", ["1704067200:1:U"])]


def test_writer_rejects_bad_value_before_store_call() -> None:
    store = _RecordingStore()
    with pytest.raises(UpdateError):
        UpdateWriter(store, "/tmp/s.rrd").write(1, ["a"], {"a": "n/a"})
    assert store.calls == []


def test_writer_maps_store_failure() -> None:
    store = _RecordingStore(CommandResult.failure("ERROR: expected 2 data source readings (got 1)\n"))
    with pytest.raises(UpdateError) as info:
        UpdateWriter(store, "/tmp/s.rrd").write(1, ["a"], {"a": 1})
    assert info.value.diagnostic == "ERROR: expected 2 data source readings (got 1)"
    assert info.value.operation is Operation.UPDATE


@pytest.mark.parametrize("value", [5e-05, 1e-05, 1.5e20, -2.5e-07])
def test_coerce_value_keeps_float_inputs(value: float) -> None:
    out = coerce_value(value)
    assert out == value
    assert type(out) is float


def test_build_update_values_exponent_floats() -> None:
    assert build_update_values(["a", "b"], {"a": 1e-05, "b": "1e-05"}) == ["1e-05", "0"]
