"""Tests for mrel.platform.files module."""

from __future__ import annotations

import os
import stat
from pathlib import Path

from mrel.platform.files import atomic_write_json, atomic_write_text, dump_json


def test_dump_json_format() -> None:
    text = dump_json({"name": "ünï", "version": "1.0.0", "files": ["dist"]})
    assert text == '{\n  "name": "ünï",\n  "version": "1.0.0",\n  "files": [\n    "dist"\n  ]\n}\n'


def test_atomic_write_text_replaces_content(tmp_path: Path) -> None:
    path = tmp_path / "package.json"
    path.write_text("old", encoding="utf-8")

    atomic_write_text(path, "new")

    assert path.read_text(encoding="utf-8") == "new"
    assert [p.name for p in tmp_path.iterdir()] == ["package.json"]


def test_atomic_write_json_reports_change(tmp_path: Path) -> None:
    path = tmp_path / "package.json"

    assert atomic_write_json(path, {"version": "1.0.1"}) is True
    assert atomic_write_json(path, {"version": "1.0.1"}) is False
    assert path.read_text(encoding="utf-8") == '{\n  "version": "1.0.1"\n}\n'


def test_atomic_write_keeps_existing_mode(tmp_path: Path) -> None:
    path = tmp_path / "package.json"
    path.write_text("{}\n", encoding="utf-8")
    path.chmod(0o644)

    atomic_write_json(path, {"version": "1.0.1"})

    assert stat.S_IMODE(path.stat().st_mode) == 0o644


def test_atomic_write_new_file_is_not_private(tmp_path: Path) -> None:
    path = tmp_path / "package.json"
    mask = os.umask(0o022)
    try:
        atomic_write_text(path, "{}\n")
    finally:
        os.umask(mask)

    assert stat.S_IMODE(path.stat().st_mode) == 0o644
