from __future__ import annotations

import typer

from mrel.cli.commands._helpers import exit_on_release_error
from mrel.cli.context import build_context
from mrel.core.result import Err
from mrel.output.console import Style
from mrel.release.manifest import read_manifest
from mrel.release.planner import build_plan


def versions(
    preid: str | None = typer.Option(None, "--preid", help="Prerelease identifier."),
) -> None:
    """Show the current version and the versions each increment would produce."""
    ctx = build_context()

    manifest = read_manifest(ctx.workspace.manifest_path)
    if isinstance(manifest, Err):
        exit_on_release_error(manifest.error, ctx.console)

    plan = build_plan(manifest.value.version, preid=preid)
    if isinstance(plan, Err):
        exit_on_release_error(plan.error, ctx.console)

    ctx.console.print(f"current: {plan.value.current}", Style.BOLD)
    if plan.value.preid:
        ctx.console.print(f"preid: {plan.value.preid}", Style.DIM)
    for choice in plan.value.choices:
        ctx.console.print(f"  {choice.kind:<10} {choice.version}")
