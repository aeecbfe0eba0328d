from __future__ import annotations

from mrel.core.result import Err, Ok, Result
from mrel.release.errors import ReleaseError
from mrel.release.model import (
    PRE_INCREMENTS,
    STABLE_INCREMENTS,
    IncrementKind,
    ReleasePlan,
    VersionChoice,
)
from mrel.release.prompts import CUSTOM_CHOICE, Prompter
from mrel.release.semver import SemVer, parse_version, prerelease_id, validate_version


def effective_preid(current: SemVer, preid: str | None) -> str | None:
    """Explicit --preid wins; otherwise reuse the current prerelease channel."""
    return preid or prerelease_id(current)


def increment_kinds(preid: str | None) -> tuple[IncrementKind, ...]:
    if preid:
        return STABLE_INCREMENTS + PRE_INCREMENTS
    return STABLE_INCREMENTS


def build_plan(current: str, *, preid: str | None) -> Result[ReleasePlan, ReleaseError]:
    parsed = parse_version(current)
    if parsed is None:
        return Err(
            ReleaseError(
                kind="invalid_version",
                message=f"current version is not a valid semantic version: {current}",
                hint="Fix the root package.json version or pass an explicit target version.",
            )
        )

    pid = effective_preid(parsed, preid)
    choices: list[VersionChoice] = []
    for kind in increment_kinds(pid):
        bumped = parsed.increment(kind, pid)
        # Switching channel (beta -> alpha) can rank lower; never offer a downgrade.
        if bumped > parsed:
            choices.append(VersionChoice(kind=kind, version=str(bumped)))

    return Ok(ReleasePlan(current=str(parsed), preid=pid, choices=tuple(choices)))


def resolve_target_version(
    *,
    explicit: str | None,
    current: str,
    preid: str | None,
    prompter: Prompter,
) -> Result[SemVer, ReleaseError]:
    """Explicit version, or the operator's pick among the planned increments."""
    if explicit is not None:
        return validate_version(explicit)

    plan = build_plan(current, preid=preid)
    if isinstance(plan, Err):
        return plan

    by_label = {c.label: c.version for c in plan.value.choices}
    picked = prompter.select("Select release type", [*by_label, CUSTOM_CHOICE])
    if picked == CUSTOM_CHOICE:
        raw = prompter.text("Input custom version", default=plan.value.current)
    else:
        raw = by_label.get(picked, picked)
    return validate_version(raw)
