from __future__ import annotations

from pathlib import Path

import typer

from mrel.cli.commands._helpers import exit_on_release_error
from mrel.cli.context import build_context
from mrel.cli.prompts import TyperPrompter
from mrel.core.result import Err
from mrel.output.console import Style
from mrel.release.model import ExecutionMode
from mrel.release.options import ReleaseOptions
from mrel.release.pipeline import ReleasePipeline


def release(
    version: str | None = typer.Argument(
        None, help="Target version (prompted for when omitted)."
    ),
    preid: str | None = typer.Option(
        None, "--preid", help="Prerelease identifier for pre* increments (e.g. beta)."
    ),
    dry: bool = typer.Option(
        False, "--dry", help="Rewrite manifests but only print mutating commands."
    ),
    skip_tests: bool = typer.Option(
        False, "--skip-tests", "--skipTests", help="Skip the test gate."
    ),
    skip_build: bool = typer.Option(
        False, "--skip-build", "--skipBuild", help="Skip the build gate."
    ),
    tag: str | None = typer.Option(
        None, "--tag", help="Registry release tag for every package (overrides inference)."
    ),
    skip: list[str] = typer.Option(
        [], "--skip", help="Package to leave unpublished (repeatable)."
    ),
    config: Path | None = typer.Option(
        None, "--config", help="Path to release.toml (default: <root>/release.toml)."
    ),
) -> None:
    """Version, commit, publish and tag every package of the monorepo."""
    ctx = build_context(config_path=config)

    options = ReleaseOptions(
        version=version,
        preid=preid,
        mode=ExecutionMode.DRY_RUN if dry else ExecutionMode.LIVE,
        skip_tests=skip_tests,
        skip_build=skip_build,
        tag=tag,
        skip=frozenset(skip),
    )
    pipeline = ReleasePipeline(
        options=options,
        config=ctx.config,
        workspace=ctx.workspace,
        prompter=TyperPrompter(ctx.console),
        console=ctx.console,
    )

    result = pipeline.run()
    if isinstance(result, Err):
        exit_on_release_error(result.error, ctx.console)

    if result.value.status == "declined":
        ctx.console.print("Release cancelled.", Style.DIM)
