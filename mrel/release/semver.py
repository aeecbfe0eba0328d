"""Semantic versions: parsing, precedence and increments.

Increment rules follow the npm ``semver.inc`` conventions that JavaScript
package registries expect, e.g.::

    3.2.4        prerelease beta -> 3.2.5-beta.0
    3.2.5-beta.0 prerelease beta -> 3.2.5-beta.1
    3.2.5-beta.1 patch           -> 3.2.5
    2.0.0-rc.0   major           -> 2.0.0
"""

from __future__ import annotations

import re
from dataclasses import dataclass, replace

from mrel.core.result import Err, Ok, Result
from mrel.release.errors import ReleaseError
from mrel.release.model import IncrementKind

__all__ = [
    "SemVer",
    "parse_version",
    "prerelease_id",
    "validate_version",
]

_IDENT = r"(?:0|[1-9]\d*|\d*[a-zA-Z-][0-9a-zA-Z-]*)"
_VERSION_RE = re.compile(
    r"^v?(0|[1-9]\d*)\.(0|[1-9]\d*)\.(0|[1-9]\d*)"
    rf"(?:-({_IDENT}(?:\.{_IDENT})*))?"
    r"(?:\+([0-9a-zA-Z-]+(?:\.[0-9a-zA-Z-]+)*))?$"
)

Identifier = int | str


def _parse_identifier(raw: str) -> Identifier:
    return int(raw) if raw.isdigit() else raw


@dataclass(frozen=True, slots=True)
class SemVer:
    major: int
    minor: int
    patch: int
    prerelease: tuple[Identifier, ...] = ()
    build: tuple[str, ...] = ()

    def __str__(self) -> str:
        out = f"{self.major}.{self.minor}.{self.patch}"
        if self.prerelease:
            out += "-" + ".".join(str(p) for p in self.prerelease)
        if self.build:
            out += "+" + ".".join(self.build)
        return out

    def to_tag(self) -> str:
        return f"v{self}"

    @property
    def is_prerelease(self) -> bool:
        return bool(self.prerelease)

    def _precedence(self) -> tuple[int, int, int, int, tuple[tuple[int, int | str], ...]]:
        # A release ranks above any of its prereleases; numeric identifiers rank
        # below alphanumeric ones; build metadata is ignored.
        pre = tuple((0, p) if isinstance(p, int) else (1, p) for p in self.prerelease)
        return (self.major, self.minor, self.patch, 0 if self.prerelease else 1, pre)

    def __lt__(self, other: SemVer) -> bool:
        return _compare(self, other) < 0

    def __le__(self, other: SemVer) -> bool:
        return _compare(self, other) <= 0

    def __gt__(self, other: SemVer) -> bool:
        return _compare(self, other) > 0

    def __ge__(self, other: SemVer) -> bool:
        return _compare(self, other) >= 0

    def increment(self, kind: IncrementKind, preid: str | None = None) -> SemVer:
        """Return the next version for ``kind``; ``preid`` names the prerelease channel."""
        base = replace(self, build=())
        match kind:
            case "major":
                if base.minor != 0 or base.patch != 0 or not base.prerelease:
                    return SemVer(base.major + 1, 0, 0)
                return SemVer(base.major, 0, 0)
            case "minor":
                if base.patch != 0 or not base.prerelease:
                    return SemVer(base.major, base.minor + 1, 0)
                return SemVer(base.major, base.minor, 0)
            case "patch":
                if not base.prerelease:
                    return SemVer(base.major, base.minor, base.patch + 1)
                return SemVer(base.major, base.minor, base.patch)
            case "premajor":
                return SemVer(base.major + 1, 0, 0)._bump_prerelease(preid)
            case "preminor":
                return SemVer(base.major, base.minor + 1, 0)._bump_prerelease(preid)
            case "prepatch":
                return SemVer(base.major, base.minor, base.patch + 1)._bump_prerelease(preid)
            case "prerelease":
                if not base.prerelease:
                    base = SemVer(base.major, base.minor, base.patch + 1)
                return base._bump_prerelease(preid)
            case _:
                raise AssertionError(f"unexpected increment kind: {kind}")

    def _bump_prerelease(self, preid: str | None) -> SemVer:
        pre: list[Identifier] = list(self.prerelease)
        if not pre:
            pre = [0]
        else:
            for i in range(len(pre) - 1, -1, -1):
                item = pre[i]
                if isinstance(item, int):
                    pre[i] = item + 1
                    break
            else:
                pre.append(0)

        if preid:
            if pre[0] != preid:
                pre = [preid, 0]
            elif len(pre) < 2 or not isinstance(pre[1], int):
                pre = [preid, 0]

        return SemVer(self.major, self.minor, self.patch, tuple(pre))


def _compare(a: SemVer, b: SemVer) -> int:
    ka = a._precedence()
    kb = b._precedence()
    if ka == kb:
        return 0
    return -1 if ka < kb else 1


def parse_version(text: str) -> SemVer | None:
    """Parse ``MAJOR.MINOR.PATCH[-PRERELEASE][+BUILD]`` (a leading ``v`` is tolerated)."""
    m = _VERSION_RE.match(text.strip())
    if m is None:
        return None
    pre_raw = m.group(4)
    build_raw = m.group(5)
    return SemVer(
        int(m.group(1)),
        int(m.group(2)),
        int(m.group(3)),
        tuple(_parse_identifier(p) for p in pre_raw.split(".")) if pre_raw else (),
        tuple(build_raw.split(".")) if build_raw else (),
    )


def validate_version(text: str) -> Result[SemVer, ReleaseError]:
    parsed = parse_version(text)
    if parsed is None:
        return Err(
            ReleaseError(
                kind="invalid_version",
                message=f"invalid target version: {text}",
                hint="Expected MAJOR.MINOR.PATCH[-PRERELEASE][+BUILD], e.g. 1.2.3 or 1.2.3-beta.0",
            )
        )
    return Ok(parsed)


def prerelease_id(version: SemVer) -> str | None:
    """Leading prerelease identifier ("beta" for 3.2.4-beta.0), None if absent or numeric."""
    if not version.prerelease:
        return None
    head = version.prerelease[0]
    return head if isinstance(head, str) else None
