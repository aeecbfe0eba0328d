from __future__ import annotations

from dataclasses import dataclass

from mrel.release.model import ExecutionMode


@dataclass(frozen=True, slots=True)
class ReleaseOptions:
    """Command line flags for one release run, fixed at startup."""

    version: str | None = None
    preid: str | None = None
    mode: ExecutionMode = ExecutionMode.LIVE
    skip_tests: bool = False
    skip_build: bool = False
    tag: str | None = None
    skip: frozenset[str] = frozenset()

    @property
    def dry_run(self) -> bool:
        return self.mode.is_dry_run
