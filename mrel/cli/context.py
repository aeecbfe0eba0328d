from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import typer

from mrel.core.config import ReleaseConfig, load_release_config
from mrel.core.errors import ErrorCode
from mrel.core.result import Err
from mrel.core.workspace import Workspace, detect_workspace
from mrel.output.console import ConsoleProtocol, RichConsole


@dataclass(frozen=True, slots=True)
class CLIContext:
    workspace: Workspace
    config: ReleaseConfig
    console: ConsoleProtocol


def build_context(*, config_path: Path | None = None) -> CLIContext:
    console = RichConsole()

    workspace_result = detect_workspace()
    if isinstance(workspace_result, Err):
        console.error(workspace_result.error.message)
        raise typer.Exit(code=int(ErrorCode.ENV_ERROR))
    workspace = workspace_result.value

    config_result = load_release_config(config_path or workspace.config_path)
    if isinstance(config_result, Err):
        console.error(config_result.error.message)
        raise typer.Exit(code=int(ErrorCode.ENV_ERROR))

    return CLIContext(workspace=workspace, config=config_result.value, console=console)
