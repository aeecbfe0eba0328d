from __future__ import annotations

from pathlib import Path

import pytest

import mrel.release.executor as executor_mod
from mrel.core.result import Err, Ok, Result
from mrel.output.console import MockConsole, Style
from mrel.platform.process import CompletedCommand, ProcessError
from mrel.release.executor import (
    DryRunExecutor,
    LiveExecutor,
    MockExecutor,
    RecordedCommand,
    executor_for,
)
from mrel.release.model import ExecutionMode


def test_executor_for_mode() -> None:
    console = MockConsole()
    assert isinstance(executor_for(ExecutionMode.LIVE, console=console), LiveExecutor)
    assert isinstance(executor_for(ExecutionMode.DRY_RUN, console=console), DryRunExecutor)


def test_dry_run_prints_and_succeeds(tmp_path: Path) -> None:
    console = MockConsole()
    executor = DryRunExecutor(console, root=tmp_path)

    result = executor.execute("git", ["tag", "v1.0.1"], cwd=tmp_path)
    assert result == Ok(CompletedCommand(stdout="", stderr=""))
    executor.execute(
        "yarn", ["publish", "--new-version", "1.0.1"], cwd=tmp_path / "packages" / "vue"
    )

    assert console.messages == [
        "[dryrun] git tag v1.0.1",
        "[dryrun] yarn publish --new-version 1.0.1  (in packages/vue)",
    ]
    assert console.count(Style.INFO) == 2
    assert [r.command for r in executor.recorded] == ["git", "yarn"]


def test_dry_run_never_spawns(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    def boom(*args: object, **kwargs: object) -> None:
        raise AssertionError("process spawned during dry run")

    monkeypatch.setattr(executor_mod, "run_process", boom)
    monkeypatch.setattr(executor_mod, "run_streaming", boom)

    executor = DryRunExecutor(MockConsole())
    assert isinstance(executor.execute("yarn", ["build"], cwd=tmp_path), Ok)


def test_live_executor_picks_capture_mode(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    seen: list[tuple[str, list[str]]] = []

    def fake_run(cmd: list[str], cwd: Path) -> Result[CompletedCommand, ProcessError]:
        seen.append(("captured", cmd))
        return Ok(CompletedCommand(stdout="diff", stderr=""))

    def fake_stream(cmd: list[str], cwd: Path) -> Result[CompletedCommand, ProcessError]:
        seen.append(("streamed", cmd))
        return Err(ProcessError(command=tuple(cmd), returncode=2, stdout="", stderr=""))

    monkeypatch.setattr(executor_mod, "run_process", fake_run)
    monkeypatch.setattr(executor_mod, "run_streaming", fake_stream)

    live = LiveExecutor()
    captured = live.execute("git", ["diff"], cwd=tmp_path, capture=True)
    streamed = live.execute("yarn", ["test"], cwd=tmp_path)

    assert captured == Ok(CompletedCommand(stdout="diff", stderr=""))
    assert isinstance(streamed, Err)
    assert streamed.error.returncode == 2
    assert seen == [("captured", ["git", "diff"]), ("streamed", ["yarn", "test"])]


def test_live_executor_runs_real_command(tmp_path: Path) -> None:
    import sys

    result = LiveExecutor().execute(
        sys.executable, ["-c", "print('hello')"], cwd=tmp_path, capture=True
    )
    assert isinstance(result, Ok)
    assert result.value.stdout.strip() == "hello"


def test_mock_executor_handler_and_find(tmp_path: Path) -> None:
    def handler(cmd: RecordedCommand) -> Result[CompletedCommand, ProcessError]:
        if cmd.argv[:2] == ["git", "push"]:
            return Err(ProcessError(command=tuple(cmd.argv), returncode=1, stdout="", stderr="no"))
        return Ok(CompletedCommand(stdout="", stderr=""))

    mock = MockExecutor(handler=handler)
    assert isinstance(mock.execute("git", ["add", "-A"], cwd=tmp_path), Ok)
    assert isinstance(mock.execute("git", ["push"], cwd=tmp_path), Err)
    assert mock.argvs == [["git", "add", "-A"], ["git", "push"]]
    assert len(mock.find("git")) == 2
    assert mock.find("git", "push")[0].display() == "git push"
