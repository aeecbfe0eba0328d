from __future__ import annotations

from pathlib import Path

from mrel.core.result import Err, Ok
from mrel.core.workspace import Workspace
from mrel.output.console import MockConsole, Style
from mrel.release.manifest import Manifest, load_package, load_release_set
from mrel.release.model import Package
from mrel.release.propagate import (
    PropagationResult,
    propagate,
    release_set_names,
    rewrite_manifest,
)


def _load(root: Path) -> tuple[Package, tuple[Package, ...]]:
    root_pkg = load_package(root, name=root.name)
    packages = load_release_set(Workspace(root=root), packages_dir="packages")
    assert isinstance(root_pkg, Ok) and isinstance(packages, Ok)
    return root_pkg.value, packages.value


def _propagate(root: Path, version: str, console: MockConsole) -> PropagationResult:
    root_pkg, packages = _load(root)
    result = propagate(version, root=root_pkg, packages=packages, scope="@vue", console=console)
    assert isinstance(result, Ok), result
    return result.value


def test_release_set_names_cover_manifest_and_scope(monorepo: Path) -> None:
    _, packages = _load(monorepo)
    names = release_set_names(packages, scope="@vue")
    assert {"@vue/shared", "vue", "@vue/vue", "@vue/runtime"} <= names
    assert "lodash" not in names
    assert "shared" not in names
    assert "runtime" not in names


def test_scoped_name_matches_directory() -> None:
    pkg = Package(name="compiler", root=Path("/x"), manifest=Manifest(version="1.0.0"))
    assert "@scope/compiler" in release_set_names([pkg], scope="@scope/")
    assert release_set_names([pkg], scope=None) == frozenset({"compiler"})


def test_rewrite_manifest_leaves_external_deps() -> None:
    m = Manifest(
        version="1.0.0",
        dependencies={"a": "1.0.0", "left-pad": "^1.0.0"},
        peer_dependencies={"a": "1.0.0"},
    )
    updated, rewrites = rewrite_manifest(m, version="1.1.0", in_set=frozenset({"a"}))
    assert updated.version == "1.1.0"
    assert updated.dependencies == {"a": "1.1.0", "left-pad": "^1.0.0"}
    assert updated.peer_dependencies == {"a": "1.1.0"}
    assert rewrites == [("dependencies", "a", "1.0.0"), ("peerDependencies", "a", "1.0.0")]
    assert m.dependencies == {"a": "1.0.0", "left-pad": "^1.0.0"}


def test_propagate_updates_every_manifest(monorepo: Path, read_manifest_json) -> None:
    console = MockConsole()
    result = _propagate(monorepo, "1.1.0", console)

    root = read_manifest_json(monorepo / "package.json")
    assert root["version"] == "1.1.0"
    assert root["devDependencies"] == {"typescript": "^4.9.0"}

    runtime = read_manifest_json(monorepo / "packages" / "runtime" / "package.json")
    assert runtime["version"] == "1.1.0"
    assert runtime["dependencies"] == {"@vue/shared": "1.1.0", "lodash": "^4.17.21"}
    assert runtime["peerDependencies"] == {"vue": "1.1.0", "react": "^18.0.0"}
    assert runtime["description"] == "Runtime with ünïcode"
    assert list(runtime) == [
        "name",
        "version",
        "description",
        "dependencies",
        "peerDependencies",
        "files",
    ]

    vue = read_manifest_json(monorepo / "packages" / "vue" / "package.json")
    assert vue["dependencies"] == {"@vue/shared": "1.1.0", "@vue/runtime": "1.1.0"}

    internal = read_manifest_json(monorepo / "packages" / "internal" / "package.json")
    assert internal["version"] == "1.1.0"
    assert internal["private"] is True

    assert len(result.written) == 5
    assert [p.name for p in result.packages] == ["internal", "runtime", "shared", "vue"]
    assert {(r.package, r.dependency) for r in result.rewrites} == {
        ("runtime", "@vue/shared"),
        ("runtime", "vue"),
        ("vue", "@vue/shared"),
        ("vue", "@vue/runtime"),
    }
    assert console.find("@vue/runtime -> peerDependencies -> vue@1.1.0")
    assert all(r.style == Style.WARNING for r in console.outputs)


def test_propagate_twice_is_stable(monorepo: Path, snapshot_manifests) -> None:
    _propagate(monorepo, "1.1.0", MockConsole())
    first = snapshot_manifests(monorepo)

    again = _propagate(monorepo, "1.1.0", MockConsole())
    assert again.written == ()
    assert snapshot_manifests(monorepo) == first


def test_prerelease_propagation(beta_monorepo: Path, read_manifest_json) -> None:
    _propagate(beta_monorepo, "2.0.0-beta.1", MockConsole())
    vue = read_manifest_json(beta_monorepo / "packages" / "vue" / "package.json")
    assert vue["version"] == "2.0.0-beta.1"
    assert vue["dependencies"] == {
        "@vue/shared": "2.0.0-beta.1",
        "@vue/runtime": "2.0.0-beta.1",
    }


def test_write_failure_is_reported(monorepo: Path, monkeypatch) -> None:
    import mrel.release.manifest as manifest_mod

    def fail(path: Path, data: object) -> bool:
        raise PermissionError("read-only")

    monkeypatch.setattr(manifest_mod, "atomic_write_json", fail)
    root_pkg, packages = _load(monorepo)
    result = propagate(
        "1.1.0", root=root_pkg, packages=packages, scope=None, console=MockConsole()
    )
    assert isinstance(result, Err)
    assert result.error.kind == "manifest_io"


def test_external_dependency_named_like_a_directory(tmp_path: Path, read_manifest_json) -> None:
    utils = Package(
        name="utils",
        root=tmp_path / "packages" / "utils",
        manifest=Manifest(version="1.0.0", name="@acme/utils"),
    )
    app = Package(
        name="app",
        root=tmp_path / "packages" / "app",
        manifest=Manifest(
            version="1.0.0",
            name="@acme/app",
            dependencies={"utils": "^0.0.2", "@acme/utils": "1.0.0"},
        ),
    )
    root = Package(name="repo", root=tmp_path, manifest=Manifest(version="1.0.0"))
    for pkg in (root, utils, app):
        pkg.root.mkdir(parents=True, exist_ok=True)

    result = propagate(
        "1.0.1", root=root, packages=[utils, app], scope="@acme", console=MockConsole()
    )

    assert isinstance(result, Ok), result
    written = read_manifest_json(app.manifest_path)
    assert written["dependencies"] == {"utils": "^0.0.2", "@acme/utils": "1.0.1"}
