"""Version-control collaborator (git).

Commands are issued through a ``CommandExecutor`` so a dry run prints them
instead of running them. ``has_pending_changes`` is the exception: callers
pass it a live executor.
"""

from __future__ import annotations

from pathlib import Path

from mrel.core.result import Err, Ok, Result
from mrel.release.errors import ReleaseError, ReleaseErrorKind
from mrel.release.executor import CommandExecutor


def tag_name(version: str) -> str:
    return f"v{version}"


def commit_message(version: str) -> str:
    return f"release: {tag_name(version)}"


def _git(
    executor: CommandExecutor,
    args: list[str],
    *,
    root: Path,
    kind: ReleaseErrorKind,
    message: str,
) -> Result[None, ReleaseError]:
    result = executor.execute("git", args, cwd=root)
    if isinstance(result, Err):
        e = result.error
        return Err(ReleaseError(kind=kind, message=message, hint=e.detail or str(e)))
    return Ok(None)


def has_pending_changes(inspector: CommandExecutor, *, root: Path) -> Result[bool, ReleaseError]:
    result = inspector.execute("git", ["diff"], cwd=root, capture=True)
    if isinstance(result, Err):
        e = result.error
        return Err(
            ReleaseError(
                kind="git_failed",
                message="failed to inspect working tree changes",
                hint=e.detail or str(e),
            )
        )
    return Ok(bool(result.value.stdout.strip()))


def commit_release(
    executor: CommandExecutor, *, root: Path, version: str
) -> Result[None, ReleaseError]:
    added = _git(executor, ["add", "-A"], root=root, kind="git_failed", message="git add failed")
    if isinstance(added, Err):
        return added
    return _git(
        executor,
        ["commit", "-m", commit_message(version)],
        root=root,
        kind="git_failed",
        message="git commit failed",
    )


def create_tag(
    executor: CommandExecutor, *, root: Path, version: str
) -> Result[None, ReleaseError]:
    tag = tag_name(version)
    return _git(
        executor, ["tag", tag], root=root, kind="tag_failed", message=f"git tag {tag} failed"
    )


def push_tag(
    executor: CommandExecutor, *, root: Path, version: str, remote: str
) -> Result[None, ReleaseError]:
    ref = f"refs/tags/{tag_name(version)}"
    return _git(
        executor,
        ["push", remote, ref],
        root=root,
        kind="push_failed",
        message=f"failed to push {ref} to {remote}",
    )


def push_branch(executor: CommandExecutor, *, root: Path) -> Result[None, ReleaseError]:
    return _git(executor, ["push"], root=root, kind="push_failed", message="git push failed")
