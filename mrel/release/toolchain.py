"""Build/test collaborator: only the exit status of each command matters."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from mrel.core.result import Err, Ok, Result
from mrel.release.errors import ReleaseError, ReleaseErrorKind
from mrel.release.executor import CommandExecutor


def _run_gate(
    executor: CommandExecutor,
    command: Sequence[str],
    *,
    root: Path,
    kind: ReleaseErrorKind,
    what: str,
) -> Result[None, ReleaseError]:
    result = executor.execute(command[0], list(command[1:]), cwd=root)
    if isinstance(result, Err):
        e = result.error
        return Err(
            ReleaseError(
                kind=kind,
                message=f"{what} failed: {' '.join(command)} (exit {e.returncode})",
                hint=e.detail,
            )
        )
    return Ok(None)


def run_tests(
    executor: CommandExecutor, command: Sequence[str], *, root: Path
) -> Result[None, ReleaseError]:
    return _run_gate(executor, command, root=root, kind="tests_failed", what="tests")


def build_all(
    executor: CommandExecutor, command: Sequence[str], *, root: Path
) -> Result[None, ReleaseError]:
    return _run_gate(executor, command, root=root, kind="build_failed", what="build")
