"""package.json model and IO.

A manifest is read into a typed ``Manifest`` holding the fields the release
tooling rewrites (``version``, ``dependencies``, ``peerDependencies``) plus the
fields it consults (``name``, ``private``). Everything else is kept verbatim in
``extra`` and the original key order is remembered, so writing a manifest back
only changes the values that were explicitly rewritten.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Literal

from mrel.core.result import Err, Ok, Result
from mrel.core.structured import StrDict, as_str_dict, as_str_map
from mrel.core.workspace import MANIFEST_FILE_NAME, Workspace
from mrel.platform.files import atomic_write_json
from mrel.release.errors import ReleaseError
from mrel.release.model import Package

__all__ = [
    "DEPENDENCY_FIELDS",
    "DependencyField",
    "Manifest",
    "load_package",
    "load_release_set",
    "read_manifest",
    "write_manifest",
]

DependencyField = Literal["dependencies", "peerDependencies"]
DEPENDENCY_FIELDS: tuple[DependencyField, ...] = ("dependencies", "peerDependencies")

_KNOWN_KEYS = frozenset({"name", "version", "private", *DEPENDENCY_FIELDS})


def _empty_extra() -> StrDict:
    return {}


@dataclass(frozen=True, slots=True)
class Manifest:
    version: str
    name: str | None = None
    private: bool | None = None
    dependencies: dict[str, str] | None = None
    peer_dependencies: dict[str, str] | None = None
    extra: StrDict = field(default_factory=_empty_extra)
    key_order: tuple[str, ...] = ()

    @property
    def is_private(self) -> bool:
        return self.private is True

    def deps(self, kind: DependencyField) -> dict[str, str] | None:
        if kind == "dependencies":
            return self.dependencies
        return self.peer_dependencies

    def with_version(self, version: str) -> Manifest:
        return replace(self, version=version)

    def with_deps(self, kind: DependencyField, deps: dict[str, str]) -> Manifest:
        if kind == "dependencies":
            return replace(self, dependencies=deps)
        return replace(self, peer_dependencies=deps)

    @classmethod
    def from_dict(cls, data: StrDict) -> Result[Manifest, str]:
        version = data.get("version")
        if not isinstance(version, str) or not version.strip():
            return Err("missing version")

        name = data.get("name")
        if name is not None and not isinstance(name, str):
            return Err("name must be a string")

        private = data.get("private")
        if private is not None and not isinstance(private, bool):
            return Err("private must be a boolean")

        deps: dict[DependencyField, dict[str, str] | None] = {}
        for kind in DEPENDENCY_FIELDS:
            if data.get(kind) is None:
                deps[kind] = None
                continue
            mapping = as_str_map(data[kind])
            if mapping is None:
                return Err(f"{kind} must map package names to version strings")
            deps[kind] = mapping

        return Ok(
            cls(
                version=version,
                name=name,
                private=private,
                dependencies=deps["dependencies"],
                peer_dependencies=deps["peerDependencies"],
                # Known keys holding null are kept verbatim.
                extra={k: v for k, v in data.items() if k not in _KNOWN_KEYS or v is None},
                key_order=tuple(data.keys()),
            )
        )

    def _known_value(self, key: str) -> object | None:
        match key:
            case "name":
                return self.name
            case "version":
                return self.version
            case "private":
                return self.private
            case "dependencies":
                return self.dependencies
            case "peerDependencies":
                return self.peer_dependencies
            case _:
                return None

    def to_dict(self) -> StrDict:
        """Rebuild the document in its original key order."""
        out: StrDict = {}
        for key in self.key_order:
            if key in _KNOWN_KEYS:
                value = self._known_value(key)
                if value is not None:
                    out[key] = value
                elif key in self.extra:
                    out[key] = None
            elif key in self.extra:
                out[key] = self.extra[key]

        # Fields set programmatically that were absent from the source document.
        for key in ("name", "version", "private", *DEPENDENCY_FIELDS):
            value = self._known_value(key)
            if key not in out and value is not None:
                out[key] = value
        for key, value in self.extra.items():
            if key not in out:
                out[key] = value
        return out


def _invalid(path: Path, message: str) -> ReleaseError:
    return ReleaseError(kind="invalid_manifest", message=f"{path}: {message}", hint=str(path))


def read_manifest(path: Path) -> Result[Manifest, ReleaseError]:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        return Err(
            ReleaseError(
                kind="manifest_io",
                message=f"failed to read {path.name}: {e}",
                hint=str(path),
            )
        )

    try:
        obj: object = json.loads(text)
    except json.JSONDecodeError as e:
        return Err(_invalid(path, f"invalid JSON: {e}"))

    data = as_str_dict(obj)
    if data is None:
        return Err(_invalid(path, "manifest root must be an object"))

    manifest = Manifest.from_dict(data)
    if isinstance(manifest, Err):
        return Err(_invalid(path, manifest.error))
    return Ok(manifest.value)


def write_manifest(path: Path, manifest: Manifest) -> Result[bool, ReleaseError]:
    """Persist ``manifest``. Ok(False) when the file already had this content."""
    try:
        changed = atomic_write_json(path, manifest.to_dict())
    except OSError as e:
        return Err(
            ReleaseError(
                kind="manifest_io",
                message=f"failed to write {path.name}: {e}",
                hint=str(path),
            )
        )
    return Ok(changed)


def load_package(root: Path, *, name: str) -> Result[Package, ReleaseError]:
    manifest = read_manifest(root / MANIFEST_FILE_NAME)
    if isinstance(manifest, Err):
        return manifest
    return Ok(Package(name=name, root=root, manifest=manifest.value))


def load_release_set(
    workspace: Workspace, *, packages_dir: str
) -> Result[tuple[Package, ...], ReleaseError]:
    """Read every package of the release set, in discovery order."""
    packages: list[Package] = []
    for pkg_root in workspace.package_dirs(packages_dir):
        pkg = load_package(pkg_root, name=pkg_root.name)
        if isinstance(pkg, Err):
            return pkg
        packages.append(pkg.value)
    return Ok(tuple(packages))
