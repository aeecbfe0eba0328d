from __future__ import annotations

import json
from pathlib import Path

import pytest


def _write(path: Path, data: dict[str, object]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")


def write_monorepo(root: Path, *, version: str = "1.0.0") -> Path:
    """A small vue-style monorepo: three public packages, one private."""
    _write(
        root / "package.json",
        {
            "private": True,
            "version": version,
            "workspaces": ["packages/*"],
            "scripts": {"release": "mrel release"},
            "devDependencies": {"typescript": "^4.9.0"},
        },
    )
    _write(
        root / "packages" / "shared" / "package.json",
        {"name": "@vue/shared", "version": version, "main": "index.js", "sideEffects": False},
    )
    _write(
        root / "packages" / "runtime" / "package.json",
        {
            "name": "@vue/runtime",
            "version": version,
            "description": "Runtime with ünïcode",
            "dependencies": {"@vue/shared": version, "lodash": "^4.17.21"},
            "peerDependencies": {"vue": version, "react": "^18.0.0"},
            "files": ["dist"],
        },
    )
    _write(
        root / "packages" / "vue" / "package.json",
        {
            "name": "vue",
            "version": version,
            "dependencies": {"@vue/shared": version, "@vue/runtime": version},
        },
    )
    _write(
        root / "packages" / "internal" / "package.json",
        {"name": "@vue/internal", "version": version, "private": True},
    )
    (root / "packages" / ".cache").mkdir()
    (root / "packages" / "global.d.ts").write_text("declare const __DEV__: boolean\n")
    return root


@pytest.fixture
def monorepo(tmp_path: Path) -> Path:
    return write_monorepo(tmp_path / "repo")


@pytest.fixture
def beta_monorepo(tmp_path: Path) -> Path:
    return write_monorepo(tmp_path / "repo", version="2.0.0-beta.0")


def read_json(path: Path) -> dict[str, object]:
    data: dict[str, object] = json.loads(path.read_text(encoding="utf-8"))
    return data


def snapshot(root: Path) -> dict[str, bytes]:
    """Raw bytes of every package.json under root."""
    return {str(p.relative_to(root)): p.read_bytes() for p in sorted(root.rglob("package.json"))}


@pytest.fixture
def read_manifest_json():
    return read_json


@pytest.fixture
def snapshot_manifests():
    return snapshot


@pytest.fixture
def make_monorepo():
    return write_monorepo
