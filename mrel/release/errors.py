"""Release error payload."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

ReleaseErrorKind = Literal[
    "invalid_version",
    "invalid_manifest",
    "manifest_io",
    "tests_failed",
    "build_failed",
    "git_failed",
    "publish_failed",
    "tag_failed",
    "push_failed",
]


@dataclass(frozen=True, slots=True)
class ReleaseError:
    """A fatal release failure.

    ``hint`` carries the underlying detail (usually the failed command's
    stderr) so it can be shown to the operator as-is.
    """

    kind: ReleaseErrorKind
    message: str
    hint: str | None = None

    def pretty(self) -> str:
        if self.hint:
            return f"{self.message} (hint: {self.hint})"
        return self.message
