from __future__ import annotations

from pathlib import Path

from mrel.core.result import Err, Ok
from mrel.platform.process import ProcessError
from mrel.release import toolchain
from mrel.release.executor import MockExecutor


def _fail(returncode: int, stderr: str = ""):
    return lambda cmd: Err(
        ProcessError(command=tuple(cmd.argv), returncode=returncode, stdout="", stderr=stderr)
    )


def test_gates_run_configured_commands(tmp_path: Path) -> None:
    mock = MockExecutor()
    assert toolchain.run_tests(mock, ("yarn", "test", "--bail"), root=tmp_path) == Ok(None)
    assert toolchain.build_all(mock, ("yarn", "build", "--release"), root=tmp_path) == Ok(None)
    assert mock.argvs == [["yarn", "test", "--bail"], ["yarn", "build", "--release"]]
    assert not any(c.capture for c in mock.calls)


def test_test_failure(tmp_path: Path) -> None:
    result = toolchain.run_tests(MockExecutor(handler=_fail(1)), ("yarn", "test"), root=tmp_path)
    assert isinstance(result, Err)
    assert result.error.kind == "tests_failed"
    assert result.error.message == "tests failed: yarn test (exit 1)"
    assert result.error.hint is None


def test_build_failure(tmp_path: Path) -> None:
    mock = MockExecutor(handler=_fail(2, "tsc: error TS2322"))
    result = toolchain.build_all(mock, ("npm", "run", "build"), root=tmp_path)
    assert isinstance(result, Err)
    assert result.error.kind == "build_failed"
    assert result.error.hint == "tsc: error TS2322"
