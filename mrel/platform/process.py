"""Subprocess execution with Result-based error handling.

Two flavours:
- ``run``: captures stdout/stderr (publish calls, ``git diff`` inspection)
- ``run_streaming``: inherits the caller's streams (tests, builds, git writes)

Neither applies a timeout by default: build and publish commands may run for
as long as they need.

Usage:
    match run(["git", "diff"], cwd=root):
        case Ok(output):
            print(output.stdout)
        case Err(error):
            print(error.stderr)
"""

from __future__ import annotations

import subprocess
from dataclasses import dataclass
from pathlib import Path

from mrel.core.result import Err, Ok, Result

__all__ = ["CompletedCommand", "ProcessError", "run", "run_streaming"]


@dataclass(frozen=True, slots=True)
class CompletedCommand:
    """Output of a successful subprocess (empty strings when streamed)."""

    stdout: str
    stderr: str
    returncode: int = 0


@dataclass(frozen=True, slots=True)
class ProcessError:
    """Error from a failed subprocess execution.

    Attributes:
        command: The command that was executed.
        returncode: Exit code, -1 when the process could not be started.
        stdout: Standard output (empty when streamed).
        stderr: Standard error (empty when streamed).
    """

    command: tuple[str, ...]
    returncode: int
    stdout: str
    stderr: str

    def __str__(self) -> str:
        cmd_str = " ".join(self.command[:3])
        if len(self.command) > 3:
            cmd_str += " ..."
        return f"{cmd_str} failed (exit {self.returncode})"

    @property
    def detail(self) -> str | None:
        """Best available diagnostic text, stderr first."""
        text = self.stderr.strip() or self.stdout.strip()
        return text or None


def run(
    cmd: list[str],
    cwd: Path,
    env: dict[str, str] | None = None,
    *,
    timeout: float | None = None,
) -> Result[CompletedCommand, ProcessError]:
    """Execute a command, capturing stdout and stderr.

    Args:
        cmd: Command and arguments to execute.
        cwd: Working directory for the command.
        env: Environment variables (uses current env if None).
        timeout: Maximum seconds to wait (None for no limit).

    Returns:
        Ok(CompletedCommand) on success, Err(ProcessError) on failure.
    """
    try:
        proc = subprocess.run(
            cmd,
            cwd=str(cwd),
            env=env,
            capture_output=True,
            text=True,
            timeout=timeout,
            check=False,
        )
    except subprocess.TimeoutExpired as e:
        return Err(
            ProcessError(
                command=tuple(cmd),
                returncode=-1,
                stdout=e.stdout if isinstance(e.stdout, str) else "",
                stderr=f"Command timed out after {timeout}s",
            )
        )
    except OSError as e:
        return Err(ProcessError(command=tuple(cmd), returncode=-1, stdout="", stderr=str(e)))

    if proc.returncode != 0:
        return Err(
            ProcessError(
                command=tuple(cmd),
                returncode=proc.returncode,
                stdout=proc.stdout,
                stderr=proc.stderr,
            )
        )

    return Ok(CompletedCommand(stdout=proc.stdout, stderr=proc.stderr))


def run_streaming(
    cmd: list[str],
    cwd: Path,
    env: dict[str, str] | None = None,
) -> Result[CompletedCommand, ProcessError]:
    """Execute a command with output streamed to the terminal.

    Nothing is captured, so the error on failure only carries the exit code.
    """
    try:
        proc = subprocess.run(cmd, cwd=str(cwd), env=env, check=False)
    except OSError as e:
        return Err(ProcessError(command=tuple(cmd), returncode=-1, stdout="", stderr=str(e)))

    if proc.returncode != 0:
        return Err(
            ProcessError(command=tuple(cmd), returncode=proc.returncode, stdout="", stderr="")
        )

    return Ok(CompletedCommand(stdout="", stderr=""))
