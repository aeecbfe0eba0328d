from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Literal

from mrel.core.workspace import MANIFEST_FILE_NAME

if TYPE_CHECKING:
    from mrel.release.manifest import Manifest


IncrementKind = Literal[
    "patch",
    "minor",
    "major",
    "prepatch",
    "preminor",
    "premajor",
    "prerelease",
]

STABLE_INCREMENTS: tuple[IncrementKind, ...] = ("patch", "minor", "major")
PRE_INCREMENTS: tuple[IncrementKind, ...] = ("prepatch", "preminor", "premajor", "prerelease")

PublishOutcome = Literal["published", "skipped_private", "skipped_configured", "already_published"]
ReleaseStatus = Literal["released", "declined"]


class ExecutionMode(Enum):
    LIVE = "live"
    DRY_RUN = "dry-run"

    @property
    def is_dry_run(self) -> bool:
        return self is ExecutionMode.DRY_RUN


@dataclass(frozen=True, slots=True)
class Package:
    """A package of the release set (or the root, which is never published)."""

    name: str
    root: Path
    manifest: Manifest

    @property
    def manifest_path(self) -> Path:
        return self.root / MANIFEST_FILE_NAME

    @property
    def display_name(self) -> str:
        return self.manifest.name or self.name


@dataclass(frozen=True, slots=True)
class VersionChoice:
    kind: IncrementKind
    version: str

    @property
    def label(self) -> str:
        return f"{self.kind} ({self.version})"


@dataclass(frozen=True, slots=True)
class ReleasePlan:
    """Increment choices offered to the operator for the current version."""

    current: str
    preid: str | None
    choices: tuple[VersionChoice, ...]


@dataclass(frozen=True, slots=True)
class PackagePublish:
    name: str
    outcome: PublishOutcome
    release_tag: str | None = None


def _empty_publishes() -> tuple[PackagePublish, ...]:
    return ()


@dataclass(frozen=True, slots=True)
class ReleaseReport:
    status: ReleaseStatus
    version: str
    mode: ExecutionMode
    committed: bool = False
    publishes: tuple[PackagePublish, ...] = field(default_factory=_empty_publishes)
    skipped: tuple[str, ...] = ()

    def names_with(self, outcome: PublishOutcome) -> list[str]:
        return [p.name for p in self.publishes if p.outcome == outcome]
