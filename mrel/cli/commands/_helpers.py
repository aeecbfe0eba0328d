"""Shared helpers for CLI commands."""

from __future__ import annotations

from typing import NoReturn

import typer

from mrel.core.errors import ErrorCode
from mrel.output.console import ConsoleProtocol, Style
from mrel.release.errors import ReleaseError


def release_error_code(error: ReleaseError) -> ErrorCode:
    match error.kind:
        case "invalid_version":
            return ErrorCode.USER_ERROR
        case "tests_failed" | "build_failed":
            return ErrorCode.BUILD_ERROR
        case "publish_failed" | "tag_failed" | "push_failed":
            return ErrorCode.NETWORK_ERROR
        case "invalid_manifest" | "manifest_io" | "git_failed":
            return ErrorCode.IO_ERROR
    return ErrorCode.USER_ERROR


def exit_on_release_error(error: ReleaseError, console: ConsoleProtocol) -> NoReturn:
    """Print ``error`` (with its underlying detail) and exit with its code."""
    console.error(error.message)
    if error.hint:
        console.print(f"hint: {error.hint}", Style.DIM)
    raise typer.Exit(code=int(release_error_code(error)))
