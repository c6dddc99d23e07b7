from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

import pytest

from rrdb.io.config import RrdbSettings
from rrdb.io.store import CommandResult, Operation

_DS_TYPES = {"GAUGE", "COUNTER", "DERIVE", "ABSOLUTE", "DCOUNTER", "DDERIVE"}


def _fmt_limit(token: str) -> str:
    return "NaN" if token == "U" else f"{float(token):.10e}"


@dataclass
class _Series:
    step: int
    last: int
    fields: list[tuple[str, str]]
    archives: list[str]
    samples: dict[int, list[str]] = field(default_factory=dict)


class FakeStore:
    """In-memory stand-in for rrdtool speaking the same text formats."""

    def __init__(self) -> None:
        self.series: dict[str, _Series] = {}
        self.calls: list[tuple[Operation, str, list[str]]] = []
        self.fail: dict[Operation, str] = {}

    # helpers for assertions
    def ops(self) -> list[Operation]:
        return [op for op, _, _ in self.calls]

    def field_names(self, path: str) -> list[str]:
        return [name for name, _ in self.series[path].fields]

    def run(self, operation: Operation, path: str, args: Sequence[str] = ()) -> CommandResult:
        args = list(args)
        self.calls.append((operation, path, args))
        if operation in self.fail:
            return CommandResult.failure(self.fail[operation])
        handler = getattr(self, f"_{operation.value}")
        return handler(path, args)

    def _info(self, path: str, args: list[str]) -> CommandResult:
        s = self.series.get(path)
        if s is None:
            return CommandResult.failure(f"ERROR: opening '{path}': No such file or directory\n")
        lines = [
            f'filename = "{path}"',
            'rrd_version = "0003"',
            f"step = {s.step}",
            f"last_update = {s.last}",
            "header_size = 1024",
        ]
        for i, (name, desc) in enumerate(s.fields):
            dst, heartbeat, lo, hi = desc.split(":")
            lines += [
                f"ds[{name}].index = {i}",
                f'ds[{name}].type = "{dst}"',
                f"ds[{name}].minimal_heartbeat = {heartbeat}",
                f"ds[{name}].min = {_fmt_limit(lo)}",
                f"ds[{name}].max = {_fmt_limit(hi)}",
                f'ds[{name}].last_ds = "U"',
                f"ds[{name}].value = 0.0000000000e+00",
                f"ds[{name}].unknown_sec = 0",
            ]
        for i, rra in enumerate(s.archives):
            lines.append(f'rra[{i}].cf = "{rra.split(":")[1]}"')
        return CommandResult.success("\n".join(lines) + "\n")

    def _create(self, path: str, args: list[str]) -> CommandResult:
        step, start = 300, 0
        fields: list[tuple[str, str]] = []
        archives: list[str] = []
        it = iter(args)
        for arg in it:
            if arg == "--step":
                step = int(next(it))
            elif arg == "--start":
                start = int(next(it))
            elif arg.startswith("DS:"):
                _, name, desc = arg.split(":", 2)
                if desc.split(":")[0] not in _DS_TYPES:
                    return CommandResult.failure(f"ERROR: unknown data source type in '{arg}'")
                fields.append((name, desc))
            elif arg.startswith("RRA:"):
                archives.append(arg)
            else:
                return CommandResult.failure(f"ERROR: can't parse argument '{arg}'")
        if not fields:
            return CommandResult.failure("ERROR: you must define at least one Data Source")
        self.series[path] = _Series(step=step, last=start, fields=fields, archives=archives)
        return CommandResult.success("")

    def _tune(self, path: str, args: list[str]) -> CommandResult:
        s = self.series.get(path)
        if s is None:
            return CommandResult.failure(f"ERROR: opening '{path}': No such file or directory")
        fields = list(s.fields)
        it = iter(args)
        for flag in it:
            value = next(it)
            if flag == "-r":
                old, new = value.split(":")
                names = [n for n, _ in fields]
                if old not in names:
                    return CommandResult.failure(f"ERROR: unknown data source name '{old}'")
                idx = names.index(old)
                fields[idx] = (new, fields[idx][1])
            elif flag == "-d":
                name, desc = value.split(":", 1)
                names = [n for n, _ in fields]
                if name not in names or desc.split(":")[0] not in _DS_TYPES:
                    return CommandResult.failure(f"ERROR: invalid data source '{value}'")
                fields[names.index(name)] = (name, desc)
        s.fields = fields
        return CommandResult.success("")

    def _update(self, path: str, args: list[str]) -> CommandResult:
        s = self.series.get(path)
        if s is None:
            return CommandResult.failure(f"ERROR: opening '{path}': No such file or directory")
        t, *values = args[0].split(":")
        if len(values) != len(s.fields):
            return CommandResult.failure(
                f"ERROR: expected {len(s.fields)} data source readings (got {len(values)})"
            )
        if int(t) <= s.last:
            return CommandResult.failure(
                f"ERROR: illegal attempt to update using time {t} when last update time is {s.last}"
            )
        s.last = int(t)
        s.samples[int(t)] = values
        return CommandResult.success("")

    def _fetch(self, path: str, args: list[str]) -> CommandResult:
        s = self.series.get(path)
        if s is None:
            return CommandResult.failure(f"ERROR: opening '{path}': No such file or directory")
        opts = dict(zip(args[1::2], args[2::2]))
        start = int(opts.get("--start", 0))
        end = int(opts.get("--end", 2**40))
        lines = ["".join(f"{name:>17}" for name, _ in s.fields), ""]
        for t in sorted(s.samples):
            if start <= t <= end:
                vals = " ".join(
                    "-nan" if v == "U" else f"{float(v):.10e}" for v in s.samples[t]
                )
                lines.append(f"{t}: {vals}")
        return CommandResult.success("\n".join(lines) + "\n")


@pytest.fixture
def fake_store() -> FakeStore:
    return FakeStore()


@pytest.fixture
def settings(tmp_path) -> RrdbSettings:
    return RrdbSettings(
        rrdtool_path="rrdtool",
        database_directory=str(tmp_path),
        reserve_fields=3,
        round_robin_archives=("AVERAGE:0.5:1:288",),
    )
