"""
Store adapter boundary for rrdb.

Responsibilities
- Define the closed set of store operations (info/create/update/tune/fetch).
- Define the StoreAdapter protocol: run(operation, path, args) -> CommandResult.
- Provide RrdtoolAdapter, which shells out to the rrdtool executable.

Semantics
- Adapters never raise for a failed command; they return a CommandResult whose
  ``error`` holds the diagnostic text (stdout and stderr merged). Callers map failures
  onto typed errors (rrdb.io.errors.error_for).
- Calls are synchronous. A timeout, when configured, is enforced here and reported as a
  failed result.

Notes
- Arguments are passed as an argv list; nothing is interpreted by a shell.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Protocol

logger = logging.getLogger(__name__)

__all__ = [
    "Operation",
    "CommandResult",
    "StoreAdapter",
    "RrdtoolAdapter",
    "find_rrdtool",
]


class Operation(Enum):
    """Store operations consumed by rrdb (rrdtool subcommand names)."""

    INFO = "info"
    CREATE = "create"
    UPDATE = "update"
    TUNE = "tune"
    FETCH = "fetch"


@dataclass(frozen=True, slots=True)
class CommandResult:
    """
    Captured outcome of a store operation.

    Attributes:
        output (str | None): Combined output on success, else None.
        error (str | None): Diagnostic text on failure, else None.
    """

    output: str | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, output: str) -> CommandResult:
        return cls(output=output, error=None)

    @classmethod
    def failure(cls, error: str) -> CommandResult:
        return cls(output=None, error=error)


class StoreAdapter(Protocol):
    """Executes one named operation against the series stored at ``path``."""

    def run(self, operation: Operation, path: str, args: Sequence[str] = ()) -> CommandResult: ...


def find_rrdtool() -> str:
    """Locate rrdtool on PATH, falling back to the bare command name."""
    return shutil.which("rrdtool") or "rrdtool"


class RrdtoolAdapter:
    """
    StoreAdapter backed by the rrdtool command line program.

    Args:
        rrdtool_path (str | None): Executable to run (default: discovered on PATH).
        timeout (float | None): Seconds to wait for a command before giving up.
    """

    def __init__(self, rrdtool_path: str | None = None, *, timeout: float | None = None) -> None:
        self.rrdtool_path = rrdtool_path or find_rrdtool()
        self.timeout = timeout

    def argv(self, operation: Operation, path: str, args: Sequence[str] = ()) -> list[str]:
        return [self.rrdtool_path, operation.value, path, *args]

    def run(self, operation: Operation, path: str, args: Sequence[str] = ()) -> CommandResult:
        argv = self.argv(operation, path, args)
        logger.debug("running %s", argv)
        try:
            proc = subprocess.run(
                argv,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                timeout=self.timeout,
                check=False,
            )
        except subprocess.TimeoutExpired:
            return CommandResult.failure(
                f"rrdtool {operation.value} timed out after {self.timeout}s"
            )
        except OSError as exc:
            return CommandResult.failure(f"could not run {self.rrdtool_path!r}: {exc}")

        output = proc.stdout or ""
        if proc.returncode != 0:
            return CommandResult.failure(output)
        return CommandResult.success(output)
