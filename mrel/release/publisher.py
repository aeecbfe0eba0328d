"""Per-package publishing.

A package is published at most once per version. Re-running a release after
a partial failure is safe: the registry rejects versions it already has, and
that rejection is reported as ``already_published`` instead of failing.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from mrel.core.result import Err, Ok, Result
from mrel.output.console import ConsoleProtocol, Style
from mrel.platform.process import ProcessError
from mrel.release.errors import ReleaseError
from mrel.release.executor import CommandExecutor
from mrel.release.model import Package, PackagePublish

__all__ = [
    "NEXT_CHANNEL",
    "PRERELEASE_CHANNELS",
    "PublishSettings",
    "is_already_published",
    "publish_args",
    "publish_package",
    "select_release_tag",
]

PRERELEASE_CHANNELS = ("alpha", "beta", "rc")
NEXT_CHANNEL = "next"


@dataclass(frozen=True, slots=True)
class PublishSettings:
    command: tuple[str, ...]
    skip: frozenset[str] = frozenset()
    tag_override: str | None = None
    next_tag_package: str | None = None
    already_published_markers: tuple[str, ...] = ("previously published",)


def _names(package: Package) -> set[str]:
    names = {package.name}
    if package.manifest.name:
        names.add(package.manifest.name)
    return names


def select_release_tag(
    package: Package,
    version: str,
    *,
    override: str | None,
    next_tag_package: str | None,
) -> str | None:
    """Registry channel for ``package``; None publishes to the default channel."""
    if override:
        return override
    for channel in PRERELEASE_CHANNELS:
        if channel in version:
            return channel
    if next_tag_package and next_tag_package in _names(package):
        return NEXT_CHANNEL
    return None


def is_already_published(error: ProcessError, markers: Iterable[str]) -> bool:
    """True if the registry rejected the publish because the version exists.

    Registries only report this as free text, so this is a loose
    case-insensitive substring match over stderr and stdout.
    """
    text = f"{error.stderr}\n{error.stdout}".lower()
    return any(marker.lower() in text for marker in markers if marker)


def publish_args(version: str, release_tag: str | None) -> list[str]:
    args = ["--new-version", version]
    if release_tag:
        args += ["--tag", release_tag]
    args += ["--access", "public"]
    return args


def publish_package(
    package: Package,
    version: str,
    *,
    settings: PublishSettings,
    executor: CommandExecutor,
    console: ConsoleProtocol,
) -> Result[PackagePublish, ReleaseError]:
    if _names(package) & settings.skip:
        return Ok(PackagePublish(name=package.name, outcome="skipped_configured"))
    if package.manifest.is_private:
        return Ok(PackagePublish(name=package.name, outcome="skipped_private"))

    release_tag = select_release_tag(
        package,
        version,
        override=settings.tag_override,
        next_tag_package=settings.next_tag_package,
    )

    console.print(f"Publishing {package.name}...", Style.HEADER)
    command, *base_args = settings.command
    result = executor.execute(
        command,
        [*base_args, *publish_args(version, release_tag)],
        cwd=package.root,
        capture=True,
    )
    if isinstance(result, Err):
        e = result.error
        if is_already_published(e, settings.already_published_markers):
            console.warning(f"Skipping already published: {package.name}")
            return Ok(
                PackagePublish(
                    name=package.name, outcome="already_published", release_tag=release_tag
                )
            )
        return Err(
            ReleaseError(
                kind="publish_failed",
                message=f"failed to publish {package.display_name}@{version}",
                hint=e.detail or str(e),
            )
        )

    console.success(f"Successfully published {package.display_name}@{version}")
    return Ok(PackagePublish(name=package.name, outcome="published", release_tag=release_tag))
