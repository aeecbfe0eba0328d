"""Command execution strategies.

Every stage that runs an external command receives a ``CommandExecutor``.
The strategy is chosen once per run by ``executor_for``:

- ``LiveExecutor`` runs the command (streams output unless ``capture=True``)
- ``DryRunExecutor`` only prints ``[dryrun] <command> <args>`` and reports success

Read-only inspection (``git diff``) is always given a ``LiveExecutor``, even
during a dry run, because the commit stage must know whether there is
anything to commit.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol

from mrel.core.result import Ok, Result
from mrel.output.console import ConsoleProtocol
from mrel.platform.process import CompletedCommand, ProcessError, run_streaming
from mrel.platform.process import run as run_process
from mrel.release.model import ExecutionMode

__all__ = [
    "CommandExecutor",
    "DryRunExecutor",
    "LiveExecutor",
    "MockExecutor",
    "RecordedCommand",
    "executor_for",
]


class CommandExecutor(Protocol):
    def execute(
        self,
        command: str,
        args: Sequence[str],
        *,
        cwd: Path,
        capture: bool = False,
    ) -> Result[CompletedCommand, ProcessError]: ...


@dataclass(frozen=True, slots=True)
class RecordedCommand:
    command: str
    args: tuple[str, ...]
    cwd: Path
    capture: bool = False

    @property
    def argv(self) -> list[str]:
        return [self.command, *self.args]

    def display(self) -> str:
        return " ".join(self.argv)


class LiveExecutor:
    """Runs commands for real."""

    def execute(
        self,
        command: str,
        args: Sequence[str],
        *,
        cwd: Path,
        capture: bool = False,
    ) -> Result[CompletedCommand, ProcessError]:
        cmd = [command, *args]
        if capture:
            return run_process(cmd, cwd=cwd)
        return run_streaming(cmd, cwd=cwd)


class DryRunExecutor:
    """Records and prints commands instead of running them."""

    def __init__(self, console: ConsoleProtocol, *, root: Path | None = None) -> None:
        self._console = console
        self._root = root
        self.recorded: list[RecordedCommand] = []

    def execute(
        self,
        command: str,
        args: Sequence[str],
        *,
        cwd: Path,
        capture: bool = False,
    ) -> Result[CompletedCommand, ProcessError]:
        record = RecordedCommand(command=command, args=tuple(args), cwd=cwd, capture=capture)
        self.recorded.append(record)

        line = f"[dryrun] {record.display()}"
        if self._root is not None and cwd != self._root:
            try:
                line += f"  (in {cwd.relative_to(self._root)})"
            except ValueError:
                line += f"  (in {cwd})"
        self._console.info(line)
        return Ok(CompletedCommand(stdout="", stderr=""))


def executor_for(
    mode: ExecutionMode, *, console: ConsoleProtocol, root: Path | None = None
) -> CommandExecutor:
    if mode.is_dry_run:
        return DryRunExecutor(console, root=root)
    return LiveExecutor()


def _empty_calls() -> list[RecordedCommand]:
    return []


@dataclass
class MockExecutor:
    """Executor that records commands and answers them from ``handler``.

    Use this in tests; without a handler every command succeeds with empty output.
    """

    handler: Callable[[RecordedCommand], Result[CompletedCommand, ProcessError]] | None = None
    calls: list[RecordedCommand] = field(default_factory=_empty_calls)

    def execute(
        self,
        command: str,
        args: Sequence[str],
        *,
        cwd: Path,
        capture: bool = False,
    ) -> Result[CompletedCommand, ProcessError]:
        record = RecordedCommand(command=command, args=tuple(args), cwd=cwd, capture=capture)
        self.calls.append(record)
        if self.handler is None:
            return Ok(CompletedCommand(stdout="", stderr=""))
        return self.handler(record)

    @property
    def argvs(self) -> list[list[str]]:
        return [c.argv for c in self.calls]

    def find(self, *prefix: str) -> list[RecordedCommand]:
        """Recorded calls whose argv starts with ``prefix``."""
        n = len(prefix)
        return [c for c in self.calls if tuple(c.argv[:n]) == prefix]
