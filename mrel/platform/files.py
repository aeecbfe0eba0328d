"""Filesystem helpers for manifest rewrites."""

from __future__ import annotations

import json
import os
import shutil
import tempfile
from collections.abc import Mapping
from pathlib import Path

__all__ = ["atomic_write_json", "atomic_write_text", "dump_json"]


def dump_json(data: Mapping[str, object]) -> str:
    """Serialise a document the way package managers write package.json.

    Two-space indent, insertion order kept, non-ASCII left as-is, trailing newline.
    """
    return json.dumps(data, indent=2, ensure_ascii=False) + "\n"


def _current_umask() -> int:
    mask = os.umask(0)
    os.umask(mask)
    return mask


def atomic_write_text(path: Path, content: str, *, encoding: str = "utf-8") -> None:
    """Write text to path atomically (temp file in the same dir + os.replace).

    Readers see either the previous content or the new one, never a partial file.
    An existing file keeps its permission bits; a new one gets the usual
    umask-derived mode instead of the private mode of the temp file.
    """
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=str(path.parent))
    tmp_path = Path(tmp_name)
    try:
        with os.fdopen(fd, "w", encoding=encoding, newline="") as handle:
            handle.write(content)
            handle.flush()
            os.fsync(handle.fileno())
        if path.exists():
            shutil.copymode(path, tmp_path)
        else:
            os.chmod(tmp_path, 0o666 & ~_current_umask())
        os.replace(tmp_path, path)
    finally:
        tmp_path.unlink(missing_ok=True)


def atomic_write_json(path: Path, data: Mapping[str, object]) -> bool:
    """Atomically write ``data`` as JSON. Returns False if the file already matched."""
    content = dump_json(data)
    try:
        if path.read_text(encoding="utf-8") == content:
            return False
    except FileNotFoundError:
        pass
    atomic_write_text(path, content)
    return True
