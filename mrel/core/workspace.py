"""Monorepo workspace detection.

The workspace is the root of the multi-package source tree being released.
It is identified by a root ``package.json`` next to the packages directory
(``packages/`` unless release.toml says otherwise).
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from .config import CONFIG_FILE_NAME, DEFAULT_PACKAGES_DIR
from .result import Err, Ok, Result

__all__ = [
    "MANIFEST_FILE_NAME",
    "WORKSPACE_ENV_VAR",
    "Workspace",
    "WorkspaceError",
    "detect_workspace",
    "find_workspace_upward",
    "is_workspace_root",
]

MANIFEST_FILE_NAME = "package.json"
WORKSPACE_ENV_VAR = "MREL_WORKSPACE"


@dataclass(frozen=True)
class WorkspaceError:
    """Error when the monorepo root cannot be detected."""

    message: str
    searched_from: Path | None = None


@dataclass(frozen=True, slots=True)
class Workspace:
    """A detected monorepo.

    The root contains:
    - package.json (root manifest, never published)
    - release.toml (optional)
    - the packages directory, one sub-directory per package
    """

    root: Path

    @property
    def manifest_path(self) -> Path:
        return self.root / MANIFEST_FILE_NAME

    @property
    def config_path(self) -> Path:
        return self.root / CONFIG_FILE_NAME

    def packages_dir(self, name: str = DEFAULT_PACKAGES_DIR) -> Path:
        return self.root / name

    def package_dirs(self, name: str = DEFAULT_PACKAGES_DIR) -> list[Path]:
        """Package directories in deterministic (sorted) order.

        Hidden entries and stray ``*.ts`` files are ignored, as is any
        directory without a package.json.
        """
        base = self.packages_dir(name)
        if not base.is_dir():
            return []
        dirs: list[Path] = []
        for entry in sorted(base.iterdir(), key=lambda p: p.name):
            if entry.name.startswith(".") or entry.name.endswith(".ts"):
                continue
            if entry.is_dir() and (entry / MANIFEST_FILE_NAME).is_file():
                dirs.append(entry)
        return dirs

    def __str__(self) -> str:
        return str(self.root)


def is_workspace_root(path: Path, packages_dir: str = DEFAULT_PACKAGES_DIR) -> bool:
    """A workspace root has a package.json plus a packages directory or a release.toml."""
    if not (path / MANIFEST_FILE_NAME).is_file():
        return False
    return (path / packages_dir).is_dir() or (path / CONFIG_FILE_NAME).is_file()


def find_workspace_upward(start: Path, packages_dir: str = DEFAULT_PACKAGES_DIR) -> Path | None:
    for parent in (start, *start.parents):
        if is_workspace_root(parent, packages_dir):
            return parent
    return None


def detect_workspace(
    *,
    start_dir: Path | None = None,
    env_var: str = WORKSPACE_ENV_VAR,
    packages_dir: str = DEFAULT_PACKAGES_DIR,
) -> Result[Workspace, WorkspaceError]:
    """Detect the monorepo root.

    Detection order:
    1. ``$MREL_WORKSPACE`` (if set it must be valid)
    2. Search upward from start_dir (or cwd)
    """
    env_value = os.environ.get(env_var)
    if env_value:
        env_path = Path(env_value).expanduser().resolve()
        if env_path.is_dir() and is_workspace_root(env_path, packages_dir):
            return Ok(Workspace(root=env_path))
        return Err(
            WorkspaceError(
                message=f"${env_var} is set to '{env_value}' but it is not a monorepo root",
                searched_from=env_path if env_path.is_dir() else None,
            )
        )

    search_start = (start_dir or Path.cwd()).resolve()
    found = find_workspace_upward(search_start, packages_dir)
    if found is None:
        return Err(
            WorkspaceError(
                message=(
                    f"Could not find monorepo root ({MANIFEST_FILE_NAME} with a "
                    f"{packages_dir}/ directory)"
                ),
                searched_from=search_start,
            )
        )
    return Ok(Workspace(root=found))
