"""Version propagation across the release set.

Rewrites, for the root manifest and every package:
- the package's own ``version``
- every ``dependencies`` / ``peerDependencies`` entry that names a package of
  the release set (by manifest name, or ``<scope>/<dir name>``; the bare
  directory name only for packages without a manifest name)

External dependencies are never touched. All manifests are rewritten in memory
before anything is written; each file is then replaced atomically.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from mrel.core.result import Err, Ok, Result
from mrel.output.console import ConsoleProtocol, Style
from mrel.release.errors import ReleaseError
from mrel.release.manifest import DEPENDENCY_FIELDS, DependencyField, Manifest, write_manifest
from mrel.release.model import Package

__all__ = [
    "DependencyRewrite",
    "PropagationResult",
    "propagate",
    "release_set_names",
    "rewrite_manifest",
]


@dataclass(frozen=True, slots=True)
class DependencyRewrite:
    package: str
    field: DependencyField
    dependency: str
    previous: str
    version: str


@dataclass(frozen=True, slots=True)
class PropagationResult:
    root: Package
    packages: tuple[Package, ...]
    rewrites: tuple[DependencyRewrite, ...]
    # Manifests whose content actually changed on disk.
    written: tuple[Path, ...]


def release_set_names(packages: Sequence[Package], *, scope: str | None) -> frozenset[str]:
    """Every dependency key that refers to a package of the release set."""
    names: set[str] = set()
    for pkg in packages:
        # A bare directory name only counts when the manifest has no other name.
        if pkg.manifest.name:
            names.add(pkg.manifest.name)
        else:
            names.add(pkg.name)
        if scope:
            names.add(f"{scope.rstrip('/')}/{pkg.name}")
    return frozenset(names)


def rewrite_manifest(
    manifest: Manifest,
    *,
    version: str,
    in_set: frozenset[str],
) -> tuple[Manifest, list[tuple[DependencyField, str, str]]]:
    """Return the rewritten manifest and the (field, dependency, previous) entries changed."""
    updated = manifest.with_version(version)
    rewrites: list[tuple[DependencyField, str, str]] = []
    for kind in DEPENDENCY_FIELDS:
        deps = manifest.deps(kind)
        if not deps:
            continue
        new_deps = dict(deps)
        for dep, previous in deps.items():
            if dep in in_set:
                new_deps[dep] = version
                rewrites.append((kind, dep, previous))
        updated = updated.with_deps(kind, new_deps)
    return updated, rewrites


def propagate(
    version: str,
    *,
    root: Package,
    packages: Sequence[Package],
    scope: str | None,
    console: ConsoleProtocol,
) -> Result[PropagationResult, ReleaseError]:
    in_set = release_set_names(packages, scope=scope)

    staged: list[Package] = []
    all_rewrites: list[DependencyRewrite] = []
    for pkg in (root, *packages):
        manifest, rewrites = rewrite_manifest(pkg.manifest, version=version, in_set=in_set)
        for kind, dep, previous in rewrites:
            console.print(f"{pkg.display_name} -> {kind} -> {dep}@{version}", Style.WARNING)
            all_rewrites.append(
                DependencyRewrite(
                    package=pkg.name,
                    field=kind,
                    dependency=dep,
                    previous=previous,
                    version=version,
                )
            )
        staged.append(Package(name=pkg.name, root=pkg.root, manifest=manifest))

    written: list[Path] = []
    for pkg in staged:
        result = write_manifest(pkg.manifest_path, pkg.manifest)
        if isinstance(result, Err):
            return result
        if result.value:
            written.append(pkg.manifest_path)

    return Ok(
        PropagationResult(
            root=staged[0],
            packages=tuple(staged[1:]),
            rewrites=tuple(all_rewrites),
            written=tuple(written),
        )
    )
